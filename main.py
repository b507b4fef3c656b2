#!/usr/bin/env python3
"""MQTT HASS demo agent.

Exposes the host it runs on to Home Assistant through MQTT discovery
using the mqtt_hass library:

- ``connectivity`` binary sensor, ON while the agent is connected
- ``cpu_usage`` and ``memory_usage`` diagnostic sensors (psutil)
- ``identify`` button that logs a message when pressed in Home Assistant

MQTT Topics Structure:
    homeassistant/status                                          - Home Assistant birth message
    homeassistant/<kind>/mqtt_hass_<device>/<entity>/config       - Discovery config
    homeassistant/<kind>/mqtt_hass_<device>/<entity>/state        - Entity state
    homeassistant/<kind>/mqtt_hass_<device>/<entity>/availability - "online" heartbeat
    homeassistant/<kind>/mqtt_hass_<device>/<entity>/command      - Commands from Home Assistant

Connection Management:
    The library never reconnects on its own. Every interval the main loop
    checks the connection, calls connect() again when it dropped, then
    publishes availability and sensor states.

Usage:
    python main.py                       # uses data/config.ini
    python main.py path/to/config.ini

Exit Codes:
    0: Clean shutdown
    1: Configuration error
"""

# Standard library imports
import logging
import signal
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

# Third-party imports
import psutil

# Local imports
from mqtt_hass import (
    BinarySensor,
    BinarySensorDeviceClass,
    Button,
    ButtonDeviceClass,
    ConfigurationError,
    Device,
    EntityCategory,
    MqttHass,
    PahoTransport,
    Sensor,
    __version__,
)
from mqtt_hass.core.config import DEFAULT_CONFIG_PATH, build_settings, load_config

logger = logging.getLogger()

exit_flag = threading.Event()


# ----------------------------
# Logging Configuration
# ----------------------------


def setup_logging(log_path: Path = Path("data") / "main.log") -> None:
    """Configure console and rotating file logging on the root logger."""
    logger.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(module)s: %(message)s",
        datefmt="%m/%d/%Y %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=5 * 1024 * 1024,  # 5MB per file
        backupCount=3,
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


# ----------------------------
# Entities
# ----------------------------


def on_identify(topic: str, payload: bytes, length: int) -> None:
    logger.info(f"Identify requested from Home Assistant ({payload[:length].decode(errors='replace')})")


def build_entities(hass: MqttHass, device: Device) -> Dict[str, Any]:
    """Create the demo entities. They are registered by the caller."""
    return {
        "connectivity": BinarySensor(
            hass, device, "connectivity", "Connectivity",
            BinarySensorDeviceClass.CONNECTIVITY,
        ),
        "cpu_usage": Sensor(
            hass, device, "cpu_usage", "CPU Usage",
            unit_of_measurement="%",
            entity_category=EntityCategory.DIAGNOSTIC,
        ),
        "memory_usage": Sensor(
            hass, device, "memory_usage", "Memory Usage",
            unit_of_measurement="%",
            entity_category=EntityCategory.DIAGNOSTIC,
        ),
        "identify": Button(
            hass, device, "identify", "Identify", on_identify,
            ButtonDeviceClass.IDENTIFY,
        ),
    }


def publish_states(entities: Dict[str, Any]) -> bool:
    """Publish the current state of every stateful demo entity."""
    ok = entities["connectivity"].update_state(True)
    ok = entities["cpu_usage"].update_state(f"{psutil.cpu_percent(interval=None):.1f}") and ok
    ok = entities["memory_usage"].update_state(f"{psutil.virtual_memory().percent:.1f}") and ok
    return ok


# ----------------------------
# Main loop
# ----------------------------


def run_once(hass: MqttHass, entities: Dict[str, Any], settings: Dict[str, Any]) -> bool:
    """One pass of the main loop: reconnect if needed, then publish.

    Returns:
        True if the pass completed without a transport failure.
    """
    if not hass.is_connected():
        logger.info("MQTT not connected, attempting to connect...")
        if not hass.connect(settings["MQTT_USER"], settings["MQTT_PASS"]):
            logger.warning(f"Connection failed, retrying in {settings['PUBLISH_INT']}s")
            return False

        # Entities whose discovery failed while offline
        for entity in hass.entities:
            entity.publish_discovery()

    if not hass.publish_availabilities():
        return False
    return publish_states(entities)


def signal_handler(sig, frame):
    """Handle shutdown signals gracefully."""
    logger.info("Shutdown signal received, stopping...")
    exit_flag.set()


def main(argv=None) -> int:
    """
    Entry point for the demo agent.

    Loads configuration, builds the transport, registry, device and
    entities, then runs the publish loop until SIGINT/SIGTERM.
    """
    argv = sys.argv[1:] if argv is None else argv
    config_path = Path(argv[0]) if argv else DEFAULT_CONFIG_PATH

    setup_logging()
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        settings = build_settings(load_config(config_path))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info("Starting MQTT HASS agent...")

    transport = PahoTransport(
        settings["MQTT_BROKER"],
        settings["MQTT_PORT"],
        connect_timeout=settings["MQTT_CONNECTION_TIMEOUT"],
    )
    hass = MqttHass(transport)
    device = Device(
        settings["DEVICE_NAME"],
        settings["DEVICE_MODEL"],
        sw_version=__version__,
        manufacturer=settings["DEVICE_MANUFACTURER"],
    )

    entities = build_entities(hass, device)

    if not hass.connect(settings["MQTT_USER"], settings["MQTT_PASS"]):
        # Entities stay tracked; run_once re-announces them after connecting
        logger.warning("Initial connection failed, entities will be announced later")

    for entity in entities.values():
        hass.register_entity(entity)

    logger.info("=" * 50)
    logger.info("MQTT HASS agent running. Press Ctrl+C to exit...")
    logger.info(f"Device: {device.identifier}")
    logger.info(f"MQTT Broker: {settings['MQTT_BROKER']}:{settings['MQTT_PORT']}")
    logger.info("=" * 50)

    while not exit_flag.is_set():
        try:
            run_once(hass, entities, settings)
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)
        exit_flag.wait(settings["PUBLISH_INT"])

    entities["connectivity"].update_state(False)
    hass.disconnect()
    logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
