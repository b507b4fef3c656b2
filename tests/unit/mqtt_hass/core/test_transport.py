"""Unit tests for the paho-mqtt transport.

Key Testing Patterns:
    - Inject a mocked paho client through client_factory
    - Simulate CONNACK by invoking the transport's on_connect from loop_start
    - Verify paho return codes are mapped onto booleans

Example Run:
    pytest tests/unit/mqtt_hass/core/test_transport.py -v
"""

from unittest.mock import MagicMock

import paho.mqtt.client as mqtt

from mqtt_hass.const import STATUS_TOPIC
from mqtt_hass.core.registry import MqttHass
from mqtt_hass.core.transport import PahoTransport
from mqtt_hass.entities import Lock


def make_transport(client, **kwargs):
    factory = MagicMock(return_value=client)
    transport = PahoTransport("test.broker", 1883, client_factory=factory, **kwargs)
    return transport, factory


def ack_on(client, transport, failure=False):
    """Make `client.loop_start` deliver a CONNACK to the transport."""
    reason = MagicMock(is_failure=failure)
    client.loop_start.side_effect = lambda: transport._on_connect(client, None, {}, reason)


class TestConnect:
    """Test suite for PahoTransport.connect."""

    def test_connect_success(self, mock_paho_client):
        """Test that an accepted CONNACK yields True."""
        transport, factory = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport)

        assert transport.connect("abc_1", "user", "pass") is True

        factory.assert_called_once_with("abc_1")
        mock_paho_client.username_pw_set.assert_called_once_with("user", "pass")
        mock_paho_client.connect.assert_called_once_with("test.broker", 1883, keepalive=60)
        assert transport.client is mock_paho_client

    def test_connect_refused(self, mock_paho_client):
        """Test that a refused CONNACK yields False and stops the network loop."""
        transport, _ = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport, failure=True)

        assert transport.connect("abc_1", "user", "bad") is False
        mock_paho_client.loop_stop.assert_called_once()
        mock_paho_client.disconnect.assert_called_once()
        assert transport.client is None

    def test_connect_socket_error(self, mock_paho_client):
        """Test that socket errors are reported as False, not raised."""
        transport, _ = make_transport(mock_paho_client)
        mock_paho_client.connect.side_effect = OSError("unreachable")

        assert transport.connect("abc_1", "user", "pass") is False
        mock_paho_client.loop_start.assert_not_called()
        assert transport.client is None

    def test_connect_timeout_tears_down(self, mock_paho_client):
        """Test that a missing CONNACK times out and stops the client."""
        transport, _ = make_transport(mock_paho_client, connect_timeout=0.01)

        assert transport.connect("abc_1", "user", "pass") is False
        mock_paho_client.loop_stop.assert_called_once()
        mock_paho_client.disconnect.assert_called_once()
        assert transport.client is None

    def test_anonymous_connect_skips_credentials(self, mock_paho_client):
        """Test that an empty username leaves credentials unset."""
        transport, _ = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport)

        transport.connect("abc_1", "", "")

        mock_paho_client.username_pw_set.assert_not_called()

    def test_each_connect_uses_new_client(self, mock_paho_client):
        """Test that reconnecting replaces the previous paho client."""
        second = MagicMock()
        second.is_connected.return_value = True
        factory = MagicMock(side_effect=[mock_paho_client, second])
        transport = PahoTransport("test.broker", client_factory=factory)
        ack_on(mock_paho_client, transport)
        ack_on(second, transport)

        transport.connect("abc_1", "u", "p")
        transport.connect("abc_2", "u", "p")

        mock_paho_client.loop_stop.assert_called_once()
        mock_paho_client.disconnect.assert_called_once()
        assert transport.client is second

    def test_manual_loop_mode(self, mock_paho_client):
        """Test that without a background loop connect drives client.loop itself."""
        transport, _ = make_transport(mock_paho_client, background_loop=False)
        reason = MagicMock(is_failure=False)
        mock_paho_client.loop.side_effect = lambda timeout: transport._on_connect(
            mock_paho_client, None, {}, reason
        ) or mqtt.MQTT_ERR_SUCCESS

        assert transport.connect("abc_1", "user", "pass") is True
        mock_paho_client.loop_start.assert_not_called()
        assert transport.loop() is True


class TestMessaging:
    """Test suite for publish, subscribe and inbound forwarding."""

    def connected(self, client):
        transport, _ = make_transport(client)
        ack_on(client, transport)
        transport.connect("abc_1", "user", "pass")
        return transport

    def test_publish_success(self, mock_paho_client):
        """Test that a successful publish returns True."""
        transport = self.connected(mock_paho_client)

        assert transport.publish("a/b", "online") is True
        mock_paho_client.publish.assert_called_once_with("a/b", payload="online", qos=0, retain=False)

    def test_publish_failure(self, mock_paho_client):
        """Test that a non-zero return code maps to False."""
        transport = self.connected(mock_paho_client)
        mock_paho_client.publish.return_value = MagicMock(rc=mqtt.MQTT_ERR_NO_CONN)

        assert transport.publish("a/b", "online") is False

    def test_publish_without_client(self):
        """Test that publishing before connect fails cleanly."""
        transport = PahoTransport("test.broker")

        assert transport.publish("a/b", "x") is False
        assert transport.subscribe("a/b") is False
        assert transport.is_connected() is False
        assert transport.loop() is False

    def test_subscribe(self, mock_paho_client):
        """Test subscribe return code mapping."""
        transport = self.connected(mock_paho_client)

        assert transport.subscribe("a/b/command") is True
        mock_paho_client.subscribe.assert_called_once_with("a/b/command", qos=0)

        mock_paho_client.subscribe.return_value = (mqtt.MQTT_ERR_NO_CONN, None)
        assert transport.subscribe("a/b/command") is False

    def test_inbound_message_forwarded(self, mock_paho_client):
        """Test that paho messages reach the callback as (topic, payload, length)."""
        transport = self.connected(mock_paho_client)
        callback = MagicMock()
        transport.set_message_callback(callback)

        transport._on_message(mock_paho_client, None, MagicMock(topic="a/b/command", payload=b"LOCK"))

        callback.assert_called_once_with("a/b/command", b"LOCK", 4)

    def test_inbound_message_without_callback(self, mock_paho_client):
        """Test that messages are dropped when no callback is set."""
        transport = self.connected(mock_paho_client)

        transport._on_message(mock_paho_client, None, MagicMock(topic="x", payload=b""))

    def test_disconnect(self, mock_paho_client):
        """Test that disconnect stops the loop and forgets the client."""
        transport = self.connected(mock_paho_client)

        transport.disconnect()

        mock_paho_client.loop_stop.assert_called_once()
        mock_paho_client.disconnect.assert_called_once()
        assert transport.is_connected() is False


class TestAutomaticReconnect:
    """Test suite for paho's own reconnect after a dropped link."""

    def reconnect(self, client, transport):
        client.subscribe.reset_mock()
        transport._on_connect(client, None, {}, MagicMock(is_failure=False))

    def test_subscriptions_restored(self, mock_paho_client):
        """Test that topics subscribed on this connection are subscribed again."""
        transport, _ = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport)
        transport.connect("abc_1", "user", "pass")
        transport.subscribe("a/b/command")
        transport.subscribe("c/d/command")
        transport.subscribe("a/b/command")

        self.reconnect(mock_paho_client, transport)

        assert mock_paho_client.subscribe.call_args_list == [
            (("a/b/command",), {"qos": 0}),
            (("c/d/command",), {"qos": 0}),
        ]

    def test_failed_subscription_not_restored(self, mock_paho_client):
        """Test that a topic whose subscribe failed is not remembered."""
        transport, _ = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport)
        transport.connect("abc_1", "user", "pass")
        mock_paho_client.subscribe.return_value = (mqtt.MQTT_ERR_NO_CONN, None)
        transport.subscribe("a/b/command")
        mock_paho_client.subscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 2)

        self.reconnect(mock_paho_client, transport)

        mock_paho_client.subscribe.assert_not_called()

    def test_new_connect_starts_without_subscriptions(self, mock_paho_client):
        """Test that an explicit connect does not replay the previous session's topics."""
        second = MagicMock()
        second.is_connected.return_value = True
        second.subscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 1)
        factory = MagicMock(side_effect=[mock_paho_client, second])
        transport = PahoTransport("test.broker", client_factory=factory)
        ack_on(mock_paho_client, transport)
        ack_on(second, transport)

        transport.connect("abc_1", "u", "p")
        transport.subscribe("a/b/command")
        transport.connect("abc_2", "u", "p")

        second.subscribe.assert_not_called()

    def test_registry_keeps_routing_after_reconnect(self, mock_paho_client, device):
        """Test that status and command topics survive a reconnect the registry never sees."""
        transport, _ = make_transport(mock_paho_client)
        ack_on(mock_paho_client, transport)
        hass = MqttHass(transport, serial_number="abc123")
        handler = MagicMock()
        lock = Lock(hass, device, "door", "Door", command_handler=handler)

        assert hass.connect("user", "pass") is True
        assert hass.register_entity(lock) is True

        self.reconnect(mock_paho_client, transport)
        assert hass.connect("user", "pass") is True

        topics = [call[0][0] for call in mock_paho_client.subscribe.call_args_list]
        assert topics == [STATUS_TOPIC, lock.command_topic]

        transport._on_message(
            mock_paho_client, None, MagicMock(topic=lock.command_topic, payload=b"UNLOCK")
        )
        handler.assert_called_once_with(lock.command_topic, b"UNLOCK", 6)
