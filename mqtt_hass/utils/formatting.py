"""Topic token and payload formatting helpers.

These helpers keep device and entity names safe for use as MQTT topic
levels and render discovery payloads in their wire form.
"""

import json
from typing import Any, Dict

# MQTT wildcards and level separators that may not appear inside a topic level
TOPIC_UNSAFE_CHARS = ("/", "+", "#", "$", "\\", "?")


def sanitize_topic(name: str) -> str:
    """Sanitize a string for use as a single MQTT topic level.

    Replaces whitespace and MQTT special characters with underscores and
    converts to lowercase.

    Args:
        name: String to sanitize.

    Returns:
        Sanitized string safe for MQTT topics.

    Example:
        >>> sanitize_topic("Garage Door")
        'garage_door'
        >>> sanitize_topic("Test/Device")
        'test_device'
        >>> sanitize_topic("Relay #1")
        'relay_1'
    """
    name = "_".join(name.lower().split())

    for char in TOPIC_UNSAFE_CHARS:
        name = name.replace(char, "_")

    # Collapse runs of underscores
    while "__" in name:
        name = name.replace("__", "_")

    return name.strip("_")


def is_topic_safe(name: str) -> bool:
    """Check whether ``name`` can be used verbatim as one topic level.

    Example:
        >>> is_topic_safe("front_door")
        True
        >>> is_topic_safe("front door")
        False
    """
    if not name:
        return False
    if any(char.isspace() for char in name):
        return False
    return not any(char in name for char in TOPIC_UNSAFE_CHARS)


def encode_payload(config: Dict[str, Any]) -> str:
    """Serialize a discovery config to compact JSON, keeping key order."""
    return json.dumps(config, separators=(",", ":"))


def payload_size(payload: str) -> int:
    """Size of ``payload`` in bytes once UTF-8 encoded."""
    return len(payload.encode("utf-8"))
