"""Utility functions and helpers for MQTT HASS.

Modules:
    platform: Platform detection and host serial number lookup
    formatting: Topic token sanitizing and payload encoding
"""

from .formatting import encode_payload, is_topic_safe, payload_size, sanitize_topic
from .platform import PlatformUtils

__all__ = [
    "PlatformUtils",
    "encode_payload",
    "is_topic_safe",
    "payload_size",
    "sanitize_topic",
]
