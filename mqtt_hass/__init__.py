"""MQTT HASS - expose Home Assistant entities over MQTT discovery.

Create one :class:`MqttHass` registry per process, pass it to every entity
constructor, register the entities and keep calling
:meth:`MqttHass.publish_availabilities` from the application's loop.
"""

from .const import (
    BinarySensorDeviceClass,
    BinarySensorState,
    ButtonDeviceClass,
    CoverDeviceClass,
    CoverState,
    EntityCategory,
    LockState,
    SensorDeviceClass,
)
from .core import MqttHass, PahoTransport, ReplayReport, Transport
from .entities import BinarySensor, Button, Cover, Device, Entity, Lock, Sensor
from .exceptions import ConfigurationError, MqttHassError, PayloadTooLargeError

__version__ = "0.1.0"

__all__ = [
    "BinarySensor",
    "BinarySensorDeviceClass",
    "BinarySensorState",
    "Button",
    "ButtonDeviceClass",
    "ConfigurationError",
    "Cover",
    "CoverDeviceClass",
    "CoverState",
    "Device",
    "Entity",
    "EntityCategory",
    "Lock",
    "LockState",
    "MqttHass",
    "MqttHassError",
    "PahoTransport",
    "PayloadTooLargeError",
    "ReplayReport",
    "Sensor",
    "SensorDeviceClass",
    "Transport",
]
