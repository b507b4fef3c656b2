"""Home Assistant entity kinds.

Modules:
    base: Device record and the Entity base class
    binary_sensor: ON/OFF sensors
    sensor: Free-form value sensors
    button: Momentary buttons
    lock: Locks
    cover: Covers
"""

from .base import CommandHandler, Device, Entity
from .binary_sensor import BinarySensor
from .button import Button
from .cover import Cover
from .lock import Lock
from .sensor import Sensor

__all__ = [
    "BinarySensor",
    "Button",
    "CommandHandler",
    "Cover",
    "Device",
    "Entity",
    "Lock",
    "Sensor",
]
