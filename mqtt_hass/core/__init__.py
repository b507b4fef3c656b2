"""Core infrastructure for MQTT HASS.

Modules:
    config: INI configuration loading and validation
    transport: MQTT transport abstraction and paho-mqtt implementation
    registry: Entity registry and inbound message dispatcher
"""

from .config import build_settings, load_config, read_mqtt_settings
from .registry import MqttHass, ReplayReport
from .transport import PahoTransport, Transport

__all__ = [
    "MqttHass",
    "PahoTransport",
    "ReplayReport",
    "Transport",
    "build_settings",
    "load_config",
    "read_mqtt_settings",
]
