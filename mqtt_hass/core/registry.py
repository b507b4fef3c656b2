"""Entity registry and inbound message dispatcher.

:class:`MqttHass` is the context object an application creates once and
passes to every entity constructor. It owns the list of registered
entities and the transport connection, and it is the single receiver of
inbound MQTT messages:

- ``homeassistant/status`` with payload ``online`` means Home Assistant
  restarted and lost its discovery state; every entity re-announces itself
  and then availability is refreshed.
- Any other topic is routed to the entity whose command topic matches.

Registered entities are never removed, including across reconnects.
"""

# Standard library imports
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Local imports
from ..const import PAYLOAD_ONLINE, STATUS_TOPIC
from ..entities.base import Entity
from ..utils.platform import PlatformUtils
from .transport import Transport

logger = logging.getLogger(__name__)


@dataclass
class ReplayReport:
    """Outcome of a discovery replay after a Home Assistant restart.

    Attributes:
        discovery_failures: Names of entities whose discovery publish failed,
            in registration order.
        availability_ok: Result of the availability pass that followed.
    """

    discovery_failures: List[str] = field(default_factory=list)
    availability_ok: bool = True

    @property
    def ok(self) -> bool:
        return not self.discovery_failures and self.availability_ok


class MqttHass:
    """Registry and dispatcher for Home Assistant MQTT entities.

    The registry registers :meth:`on_inbound_message` as the transport's
    message callback. Inbound messages may arrive on the transport's network
    thread while the application registers entities on another, so the
    entity list is guarded by a lock that is never held across a transport
    call.

    Attributes:
        transport: Transport used for every publish and subscribe.
        serial_number: Host-unique serial used for client ids and entity
            unique ids.

    Example:
        >>> hass = MqttHass(PahoTransport("broker.local"))
        >>> hass.connect("user", "secret")
        True
        >>> device = Device("garage", "Controller")
        >>> door = Cover(hass, device, "door", "Garage Door", on_command)
        >>> hass.register_entity(door)
        True
    """

    def __init__(self, transport: Transport, serial_number: Optional[str] = None):
        self.transport = transport
        self.serial_number = serial_number or PlatformUtils().get_serial_number()
        self._entities: List[Entity] = []
        self._lock = threading.Lock()
        transport.set_message_callback(self.on_inbound_message)
        logger.debug(f"MqttHass initialized with serial '{self.serial_number}'")

    @property
    def entities(self) -> Tuple[Entity, ...]:
        """Registered entities in registration order."""
        with self._lock:
            return tuple(self._entities)

    # ----------------------------
    # Connection
    # ----------------------------

    def generate_client_id(self) -> str:
        """Client id unique per device and connection attempt."""
        return f"{self.serial_number}_{int(time.time())}"

    def connect(self, user: str, password: str) -> bool:
        """Connect to the broker and subscribe to the Home Assistant status topic.

        A no-op returning True when already connected. After a successful
        connect the command topics of already-registered entities are
        subscribed again, since a new broker session starts without them.

        Args:
            user: Broker username.
            password: Broker password.

        Returns:
            False on any transport failure.
        """
        if self.transport.is_connected():
            return True

        client_id = self.generate_client_id()
        if not self.transport.connect(client_id, user, password):
            logger.error("MQTT connection failed")
            return False

        if not self.transport.subscribe(STATUS_TOPIC):
            logger.error(f"Failed to subscribe to {STATUS_TOPIC}")
            return False

        ok = True
        for entity in self.entities:
            if entity.command_handler is None:
                continue
            if not self.transport.subscribe(entity.command_topic):
                logger.warning(f"Failed to re-subscribe command topic for {entity!r}")
                ok = False

        logger.info(f"Connected as {client_id}")
        return ok

    def disconnect(self) -> None:
        self.transport.disconnect()

    def is_connected(self) -> bool:
        return self.transport.is_connected()

    def loop(self) -> bool:
        return self.transport.loop()

    # ----------------------------
    # Registration and publishing
    # ----------------------------

    def register_entity(self, entity: Entity) -> bool:
        """Publish the entity's discovery config and start tracking it.

        The entity is tracked even when discovery fails; a False return
        means discovery should be retried, not that the entity was dropped.
        Entities that were never initialized are rejected.

        Returns:
            Result of the discovery publish.
        """
        if entity.topic_base is None:
            logger.error(f"Rejecting {entity!r}: init() was never called")
            return False

        ok = entity.publish_discovery()

        with self._lock:
            self._entities.append(entity)

        if ok:
            logger.info(f"Registered {entity!r}")
        else:
            logger.warning(f"Registered {entity!r} but discovery publish failed")
        return ok

    def publish_availabilities(self) -> bool:
        """Publish ``online`` for every entity, stopping at the first failure.

        Meant to be called from the application's loop at least every 30
        seconds.
        """
        for entity in self.entities:
            if not entity.publish_availability():
                logger.warning(f"Availability publish failed for {entity!r}")
                return False
        return True

    def rebroadcast(self) -> ReplayReport:
        """Re-announce every entity, then refresh availability.

        Best effort: every entity gets a discovery attempt regardless of
        earlier failures.
        """
        report = ReplayReport()
        for entity in self.entities:
            if not entity.publish_discovery():
                report.discovery_failures.append(entity.name)

        report.availability_ok = self.publish_availabilities()

        if report.ok:
            logger.info("Home Assistant restart handled, all entities re-announced")
        else:
            logger.warning(
                f"Rebroadcast incomplete: discovery failed for {report.discovery_failures}, "
                f"availability ok={report.availability_ok}"
            )
        return report

    # ----------------------------
    # Inbound dispatch
    # ----------------------------

    def on_inbound_message(self, topic: str, payload: bytes, length: int) -> Optional[ReplayReport]:
        """Demultiplex one inbound message.

        Args:
            topic: Topic the message arrived on.
            payload: Raw payload bytes.
            length: Payload length in bytes.

        Returns:
            The :class:`ReplayReport` when the message triggered a rebroadcast,
            otherwise None.
        """
        if topic == STATUS_TOPIC:
            status = payload[:length].decode("utf-8", errors="replace").strip()
            if status == PAYLOAD_ONLINE:
                logger.info("Home Assistant came online, re-announcing entities")
                return self.rebroadcast()
            logger.debug(f"Ignoring Home Assistant status '{status}'")
            return None

        handled = False
        for entity in self.entities:
            try:
                handled = entity.handle_command(topic, payload, length) or handled
            except Exception as e:
                logger.error(f"Error in command handler of {entity!r}: {e}", exc_info=True)
                handled = True

        if not handled:
            logger.debug(f"No entity handles topic {topic}")
        return None
