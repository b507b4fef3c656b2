"""Device record and the entity base class.

An entity owns one topic namespace::

    homeassistant/<component>/<device prefix><device name>/<entity name>/

under which it publishes ``config`` (discovery), ``state`` and
``availability`` and, when it has a command handler, listens on
``command``. Concrete kinds only declare which of the state/command topics
they use and which extra fields go into their discovery payload.
"""

# Standard library imports
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

# Local imports
from ..const import (
    DEVICE_PREFIX,
    DISCOVERY_PREFIX,
    MAX_PAYLOAD_SIZE,
    PAYLOAD_ONLINE,
    SUFFIX_AVAILABILITY,
    SUFFIX_COMMAND,
    SUFFIX_CONFIG,
    SUFFIX_STATE,
    Component,
)
from ..exceptions import ConfigurationError, PayloadTooLargeError
from ..utils.formatting import encode_payload, is_topic_safe, payload_size

if TYPE_CHECKING:
    from ..core.registry import MqttHass

logger = logging.getLogger(__name__)

# (topic, payload, length)
CommandHandler = Callable[[str, bytes, int], None]


@dataclass(frozen=True)
class Device:
    """Physical unit that groups entities in Home Assistant.

    Attributes:
        name: Topic-safe device name (no whitespace or MQTT wildcards).
        model: Model shown in the Home Assistant device page.
        sw_version: Software version shown in the device page.
        manufacturer: Manufacturer shown in the device page.
        unique_id: Optional serial overriding the host serial number when
            building entity unique ids.
    """

    name: str
    model: str
    sw_version: str = "1.0"
    manufacturer: str = "MQTT HASS"
    unique_id: Optional[str] = None

    def __post_init__(self):
        if not is_topic_safe(self.name):
            raise ConfigurationError(
                f"Device name {self.name!r} must not contain whitespace or MQTT wildcards"
            )

    @property
    def identifier(self) -> str:
        """Device-scoped id used in topics and ``device.identifiers``."""
        return f"{DEVICE_PREFIX}{self.name}"

    def to_discovery(self) -> Dict[str, Any]:
        return {
            "identifiers": [self.identifier],
            "name": self.name,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "sw_version": self.sw_version,
        }


def wire_token(value: Any) -> Optional[str]:
    """Return the wire token for an optional taxonomy value.

    ``None``, empty strings and ``NONE`` enum members all map to ``None``,
    meaning the field is left out of the payload.
    """
    if isinstance(value, Enum):
        value = value.value
    return value or None


class Entity:
    """Base class for every Home Assistant entity kind.

    Subclasses set ``component`` plus the ``has_state``/``has_command``
    flags, call :meth:`init` from their constructor and may extend
    :meth:`discovery_fields`.

    Attributes:
        hass: Registry the entity publishes through.
        device: Device the entity belongs to.
        name: Topic-safe entity name, unique within the device.
        display_name: Human readable name shown in Home Assistant.
        topic_base: Topic prefix ending in ``/``; ``None`` until :meth:`init`.
        command_handler: Callback for inbound commands, or ``None``.
    """

    component: Component
    has_state = True
    has_command = False

    def __init__(self, hass: "MqttHass", device: Device, name: str, display_name: str):
        if not is_topic_safe(name):
            raise ConfigurationError(
                f"Entity name {name!r} must not contain whitespace or MQTT wildcards"
            )
        self.hass = hass
        self.device = device
        self.name = name
        self.display_name = display_name
        self.topic_base: Optional[str] = None
        self.command_handler: Optional[CommandHandler] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.device.name}/{self.name}>"

    def default_topic_base(self) -> str:
        return f"{DISCOVERY_PREFIX}/{self.component.value}/{self.device.identifier}/{self.name}/"

    def init(
        self,
        topic_base: Optional[str] = None,
        command_handler: Optional[CommandHandler] = None,
    ) -> None:
        """Bind the topic namespace and command handler.

        May be called exactly once. The discovery payload is encoded here
        as well so an oversized payload is caught at construction time.

        Args:
            topic_base: Topic prefix ending in ``/``. Defaults to the
                Home Assistant convention for this kind.
            command_handler: Callback invoked with ``(topic, payload, length)``
                for messages on ``topic_base + "command"``.

        Raises:
            ConfigurationError: If the entity was already initialized or
                ``topic_base`` does not end in ``/``.
            PayloadTooLargeError: If the discovery payload exceeds
                ``MAX_PAYLOAD_SIZE`` bytes.
        """
        if self.topic_base is not None:
            raise ConfigurationError(f"{self!r} is already initialized")
        if topic_base is not None and not topic_base.endswith("/"):
            raise ConfigurationError(f"Topic base {topic_base!r} must end with '/'")

        self.topic_base = topic_base or self.default_topic_base()
        self.command_handler = command_handler
        self.encode_discovery()

    # ----------------------------
    # Topics
    # ----------------------------

    def _topic(self, suffix: str) -> str:
        if self.topic_base is None:
            raise ConfigurationError(f"{self!r} used before init()")
        return self.topic_base + suffix

    @property
    def config_topic(self) -> str:
        return self._topic(SUFFIX_CONFIG)

    @property
    def state_topic(self) -> str:
        return self._topic(SUFFIX_STATE)

    @property
    def command_topic(self) -> str:
        return self._topic(SUFFIX_COMMAND)

    @property
    def availability_topic(self) -> str:
        return self._topic(SUFFIX_AVAILABILITY)

    @property
    def unique_id(self) -> str:
        serial = self.device.unique_id or self.hass.serial_number
        return f"{serial}_{self.name}"

    # ----------------------------
    # Discovery
    # ----------------------------

    def discovery_fields(self) -> Dict[str, Any]:
        """Kind-specific fields appended after the common ones."""
        return {}

    def build_discovery_payload(self) -> Dict[str, Any]:
        """Build the discovery config in wire field order.

        Order: name, state/command topics, availability_topic, unique_id,
        device, then kind-specific fields with unset values dropped.
        """
        config: Dict[str, Any] = {"name": self.display_name}
        if self.has_state:
            config["state_topic"] = self.state_topic
        if self.has_command:
            config["command_topic"] = self.command_topic
        config["availability_topic"] = self.availability_topic
        config["unique_id"] = self.unique_id
        config["device"] = self.device.to_discovery()

        for key, value in self.discovery_fields().items():
            token = wire_token(value)
            if token is not None:
                config[key] = token

        return config

    def encode_discovery(self) -> str:
        """Serialize the discovery payload, enforcing the size bound.

        Raises:
            PayloadTooLargeError: If the payload exceeds ``MAX_PAYLOAD_SIZE``.
        """
        payload = encode_payload(self.build_discovery_payload())
        size = payload_size(payload)
        if size > MAX_PAYLOAD_SIZE:
            raise PayloadTooLargeError(self.config_topic, size, MAX_PAYLOAD_SIZE)
        return payload

    # ----------------------------
    # Publishing
    # ----------------------------

    def publish_discovery(self) -> bool:
        """Publish the discovery config and subscribe to the command topic.

        The subscription only happens when a command handler is set. An
        oversized payload is refused rather than truncated.

        Returns:
            False if the publish or the subscription failed.
        """
        try:
            payload = self.encode_discovery()
        except PayloadTooLargeError as e:
            logger.error(f"Refusing to publish discovery: {e}")
            return False

        ok = self.hass.transport.publish(self.config_topic, payload)
        if not ok:
            logger.warning(f"Discovery publish failed for {self!r}")

        if self.command_handler is not None:
            if not self.hass.transport.subscribe(self.command_topic):
                logger.warning(f"Command subscription failed for {self!r}")
                ok = False

        if ok:
            logger.debug(f"Published discovery for {self!r}")
        return ok

    def publish_availability(self) -> bool:
        return self.hass.transport.publish(self.availability_topic, PAYLOAD_ONLINE)

    def publish_state(self, value: str) -> bool:
        if not self.has_state:
            logger.error(f"{self!r} has no state topic")
            return False
        return self.hass.transport.publish(self.state_topic, value)

    def handle_command(self, topic: str, payload: bytes, length: int) -> bool:
        """Invoke the command handler if ``topic`` is this entity's command topic.

        Returns:
            True if the handler was invoked.
        """
        if self.command_handler is None or self.topic_base is None:
            return False
        if topic != self.command_topic:
            return False
        self.command_handler(topic, payload, length)
        return True
