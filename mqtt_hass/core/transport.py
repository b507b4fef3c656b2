"""MQTT transport abstraction for MQTT HASS.

The registry and entities only talk to the broker through the narrow
:class:`Transport` interface defined here. :class:`PahoTransport` is the
production implementation backed by paho-mqtt; tests substitute a mock.

Every operation reports failure as ``False``. Nothing in this module
retries a failed connect; that policy belongs to the embedding
application. When paho restores a dropped link by itself the topics
subscribed on the current connection are subscribed again.
"""

# Standard library imports
import logging
import threading
import time
from typing import Callable, List, Optional, Protocol

# Third-party imports
import paho.mqtt.client as mqtt


logger = logging.getLogger(__name__)

# (topic, payload, length)
MessageCallback = Callable[[str, bytes, int], None]
ClientFactory = Callable[[str], mqtt.Client]


class Transport(Protocol):
    """Publish/subscribe primitives consumed by :class:`MqttHass`."""

    def connect(self, client_id: str, user: str, password: str) -> bool: ...

    def disconnect(self) -> None: ...

    def is_connected(self) -> bool: ...

    def publish(self, topic: str, payload: str) -> bool: ...

    def subscribe(self, topic: str) -> bool: ...

    def set_message_callback(self, callback: Optional[MessageCallback]) -> None: ...

    def loop(self) -> bool: ...


def _default_client_factory(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        client_id=client_id,
    )


class PahoTransport:
    """paho-mqtt backed :class:`Transport`.

    A new paho client is created for every connection attempt so that each
    attempt uses its own client id. By default paho's network loop runs in
    a background thread; with ``background_loop=False`` the application
    drives it by calling :meth:`loop`.

    Attributes:
        host: MQTT broker hostname or IP address.
        port: MQTT broker port.
        keepalive: Keep-alive interval in seconds.
        connect_timeout: Seconds to wait for the broker's CONNACK.
        qos: QoS level used for publish and subscribe.
        retain: Whether published messages are retained.
        client: Current paho client, ``None`` before the first connect.

    Example:
        >>> transport = PahoTransport("192.168.1.10", 1883)
        >>> transport.connect("abc123_1700000000", "user", "secret")
        True
        >>> transport.publish("homeassistant/sensor/x/y/state", "21.5")
        True
    """

    def __init__(
        self,
        host: str,
        port: int = 1883,
        keepalive: int = 60,
        connect_timeout: float = 10.0,
        qos: int = 0,
        retain: bool = False,
        background_loop: bool = True,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.host = host
        self.port = port
        self.keepalive = keepalive
        self.connect_timeout = connect_timeout
        self.qos = qos
        self.retain = retain
        self.background_loop = background_loop
        self.client: Optional[mqtt.Client] = None

        self._client_factory = client_factory or _default_client_factory
        self._message_callback: Optional[MessageCallback] = None
        self._connack = threading.Event()
        self._connack_ok = False
        self._subscriptions: List[str] = []
        self._subscriptions_lock = threading.Lock()
        logger.debug(f"PahoTransport initialized for {host}:{port}")

    # ----------------------------
    # Connection
    # ----------------------------

    def connect(self, client_id: str, user: str, password: str) -> bool:
        """Connect to the broker and block until CONNACK or timeout.

        Args:
            client_id: MQTT client identifier for this attempt.
            user: Broker username (may be empty for anonymous brokers).
            password: Broker password.

        Returns:
            True if the broker accepted the connection.
        """
        self._teardown_client()

        client = self._client_factory(client_id)
        if user:
            client.username_pw_set(user, password)
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message
        self.client = client

        self._connack.clear()
        self._connack_ok = False
        with self._subscriptions_lock:
            self._subscriptions.clear()

        try:
            logger.info(f"Connecting to MQTT broker at {self.host}:{self.port} as {client_id}")
            client.connect(self.host, self.port, keepalive=self.keepalive)
        except (ConnectionRefusedError, OSError) as e:
            logger.warning(f"Connection to MQTT broker failed: {e}")
            self._teardown_client()
            return False

        if self.background_loop:
            client.loop_start()
            self._connack.wait(self.connect_timeout)
        else:
            deadline = time.monotonic() + self.connect_timeout
            while not self._connack.is_set() and time.monotonic() < deadline:
                client.loop(timeout=0.1)

        if not self._connack.is_set():
            logger.error(f"Timed out after {self.connect_timeout}s waiting for CONNACK")
            self._teardown_client()
            return False

        if not self._connack_ok:
            self._teardown_client()
            return False

        return True

    def disconnect(self) -> None:
        """Disconnect from the broker and stop the network loop."""
        if self.client is None:
            return
        self._teardown_client()
        logger.info("MQTT client disconnected")

    def is_connected(self) -> bool:
        return self.client is not None and self.client.is_connected()

    def loop(self) -> bool:
        """Service the network once when the loop is driven by the caller.

        With the background loop enabled this only reports connectivity.
        """
        if self.client is None:
            return False
        if self.background_loop:
            return self.client.is_connected()
        return self.client.loop(timeout=0.1) == mqtt.MQTT_ERR_SUCCESS

    # ----------------------------
    # Messaging
    # ----------------------------

    def publish(self, topic: str, payload: str) -> bool:
        if self.client is None:
            logger.debug(f"Publish to {topic} skipped: no client")
            return False

        info = self.client.publish(topic, payload=payload, qos=self.qos, retain=self.retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning(f"Publish to {topic} failed: {mqtt.error_string(info.rc)}")
            return False

        logger.debug(f"Published to {topic}: {payload}")
        return True

    def subscribe(self, topic: str) -> bool:
        if self.client is None:
            logger.debug(f"Subscribe to {topic} skipped: no client")
            return False

        result, _ = self.client.subscribe(topic, qos=self.qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            logger.warning(f"Subscribe to {topic} failed: {mqtt.error_string(result)}")
            return False

        with self._subscriptions_lock:
            if topic not in self._subscriptions:
                self._subscriptions.append(topic)
        logger.info(f"Subscribed to topic: {topic}")
        return True

    def set_message_callback(self, callback: Optional[MessageCallback]) -> None:
        self._message_callback = callback

    # ----------------------------
    # paho callbacks
    # ----------------------------

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            logger.error(f"MQTT connection refused: {reason_code}")
            self._connack_ok = False
        else:
            logger.info("MQTT connected successfully")
            self._connack_ok = True
            self._restore_subscriptions(client)
        self._connack.set()

    def _restore_subscriptions(self, client) -> None:
        # Empty on a fresh connect; only paho's automatic reconnect finds topics here
        with self._subscriptions_lock:
            topics = list(self._subscriptions)
        for topic in topics:
            result, _ = client.subscribe(topic, qos=self.qos)
            if result != mqtt.MQTT_ERR_SUCCESS:
                logger.warning(f"Re-subscribe to {topic} failed: {mqtt.error_string(result)}")
            else:
                logger.info(f"Re-subscribed to topic: {topic}")

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties=None):
        if reason_code == 0:
            logger.info("MQTT client disconnected cleanly")
        else:
            logger.warning(f"MQTT disconnected unexpectedly: {reason_code}")

    def _on_message(self, client, userdata, msg):
        callback = self._message_callback
        if callback is None:
            logger.debug(f"Dropping message on {msg.topic}: no callback registered")
            return
        callback(msg.topic, msg.payload, len(msg.payload))

    def _teardown_client(self) -> None:
        client = self.client
        if client is None:
            return
        self.client = None
        if self.background_loop:
            client.loop_stop()
        client.disconnect()
