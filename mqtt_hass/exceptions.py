"""Exceptions raised for programming errors.

Transport failures are never raised; they surface as ``False`` returns.
"""


class MqttHassError(Exception):
    """Base class for all library errors."""


class ConfigurationError(MqttHassError, ValueError):
    """An entity, device or config file was set up incorrectly."""


class PayloadTooLargeError(ConfigurationError):
    """A discovery payload does not fit within the payload size bound."""

    def __init__(self, topic: str, size: int, limit: int):
        self.topic = topic
        self.size = size
        self.limit = limit
        super().__init__(
            f"Discovery payload for {topic} is {size} bytes (limit {limit})"
        )
