"""Pytest configuration and global fixtures.

This module provides fixtures and configuration that are available to all tests.
Fixtures defined here are automatically discovered by pytest and can be used
by any test function by including them as parameters.

Common Fixtures:
    - mock_transport: Mocked Transport that reports every operation as successful
    - hass: MqttHass registry wired to mock_transport with a fixed serial number
    - device: Sample Device record
    - mock_paho_client: Mocked paho-mqtt client for PahoTransport tests
    - temp_config_file: Temporary config file for testing

Example:
    def test_something(hass, device):
        sensor = Sensor(hass, device, "temp", "Temperature")
        assert hass.register_entity(sensor) is True
"""

import configparser
from unittest.mock import MagicMock

import paho.mqtt.client as mqtt
import pytest

from mqtt_hass.core.registry import MqttHass
from mqtt_hass.entities.base import Device

TEST_SERIAL = "abc123"


@pytest.fixture
def mock_transport():
    """Provide a mocked transport for testing without a broker.

    Returns:
        MagicMock: Transport whose publish, subscribe and connect succeed and
        which starts out disconnected.
    """
    transport = MagicMock()
    transport.publish.return_value = True
    transport.subscribe.return_value = True
    transport.connect.return_value = True
    transport.is_connected.return_value = False
    transport.loop.return_value = True
    return transport


@pytest.fixture
def hass(mock_transport):
    """Provide a registry bound to the mocked transport."""
    return MqttHass(mock_transport, serial_number=TEST_SERIAL)


@pytest.fixture
def device():
    """Provide a sample device record."""
    return Device(name="garage", model="Controller", sw_version="2.1", manufacturer="Acme")


@pytest.fixture
def mock_paho_client():
    """Provide a mocked paho-mqtt client for PahoTransport tests.

    Returns:
        MagicMock: Mocked client with common methods stubbed
    """
    client = MagicMock()
    client.connect.return_value = 0
    client.publish.return_value = MagicMock(rc=mqtt.MQTT_ERR_SUCCESS)
    client.subscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 1)
    client.loop_start.return_value = None
    client.loop_stop.return_value = None
    client.disconnect.return_value = None
    client.is_connected.return_value = True
    return client


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config.ini file for testing.

    Args:
        tmp_path: pytest fixture providing temporary directory

    Returns:
        Path: Path to temporary config file
    """
    config = configparser.ConfigParser()

    config["device"] = {
        "name": "Test Device",
        "model": "Test Model",
        "manufacturer": "Test Inc",
        "interval": "15",
    }

    config["mqtt"] = {
        "broker": "test.broker.local",
        "port": "1883",
        "username": "testuser",
        "password": "testpass",
        "connection_timeout": "5",
    }

    config_file = tmp_path / "config.ini"
    with open(config_file, "w") as f:
        config.write(f)

    return config_file


# Pytest hooks for custom behavior


def pytest_configure(config):
    """Set environment defaults used when a config file is generated.

    Markers are declared in pyproject.toml.
    """
    import os

    os.environ["MH_MQTT_BROKER"] = "localhost"
    os.environ["MH_MQTT_PORT"] = "1883"
    os.environ["MH_MQTT_USER"] = "test_user"
    os.environ["MH_MQTT_PASS"] = "test_pass"
    os.environ["MH_DEVICE_NAME"] = "test_device"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
