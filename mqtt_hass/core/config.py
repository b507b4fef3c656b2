"""Configuration management for MQTT HASS applications.

Settings are read from an INI file. When the file does not exist a default
one is written from ``MH_*`` environment variables so that containers and
CI can start without a prepared file.

Configuration Structure:
    [device]
        name: Topic-safe device name (spaces are converted to underscores)
        model: Device model shown in Home Assistant
        manufacturer: Device manufacturer shown in Home Assistant
        interval: Availability publish interval in seconds (max 30)

    [mqtt]
        broker: MQTT broker hostname or IP address
        port: MQTT broker port (typically 1883)
        username: MQTT authentication username
        password: MQTT authentication password
        connection_timeout: Seconds to wait for the broker to accept a connection

Environment Variables (used only when creating the default file):
    MH_DEVICE_NAME: Device name (default: hostname)
    MH_MQTT_BROKER: MQTT broker hostname (default: localhost)
    MH_MQTT_PORT: MQTT broker port (default: 1883)
    MH_MQTT_USER: MQTT username
    MH_MQTT_PASS: MQTT password

Usage:
    from mqtt_hass.core.config import build_settings, load_config

    settings = build_settings(load_config(Path("data/config.ini")))
    transport = PahoTransport(settings["MQTT_BROKER"], settings["MQTT_PORT"])
"""

# Standard library imports
import configparser
import logging
import os
import socket
from pathlib import Path
from typing import Any, Dict

# Local imports
from ..const import MAX_AVAILABILITY_INTERVAL
from ..exceptions import ConfigurationError
from ..utils.formatting import sanitize_topic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data") / "config.ini"


# ----------------------------
# MQTT section
# ----------------------------


def read_mqtt_settings(config: configparser.ConfigParser) -> Dict[str, Any]:
    """
    Read the [mqtt] section into typed broker settings.

    An empty password is allowed (anonymous or passwordless brokers) but
    logged, since it is usually a leftover from the generated file.

    Raises:
        ConfigurationError: If the broker or username is missing or the
            port is not a valid TCP port.
    """
    broker = config.get("mqtt", "broker", fallback="").strip()
    user = config.get("mqtt", "username", fallback="").strip()
    password = config.get("mqtt", "password", fallback="")
    raw_port = config.get("mqtt", "port", fallback="1883").strip()

    if not broker:
        raise ConfigurationError("[mqtt] broker is not set")
    if not user:
        raise ConfigurationError("[mqtt] username is not set")

    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigurationError(f"[mqtt] port {raw_port!r} is not a number") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"[mqtt] port {port} is outside 1..65535")

    if not password:
        logger.warning(f"[mqtt] password is empty, connecting to {broker} without one")

    return {
        "MQTT_BROKER": broker,
        "MQTT_PORT": port,
        "MQTT_USER": user,
        "MQTT_PASS": password,
        "MQTT_CONNECTION_TIMEOUT": config.getint("mqtt", "connection_timeout", fallback=10),
    }


# ----------------------------
# Default configuration
# ----------------------------


def create_default_config(config_path: Path) -> None:
    """
    Write a default config file populated from environment variables.

    Args:
        config_path: Path where config.ini should be created

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    device_name = os.getenv("MH_DEVICE_NAME", socket.gethostname())
    mqtt_broker = os.getenv("MH_MQTT_BROKER", "localhost")
    mqtt_port = os.getenv("MH_MQTT_PORT", "1883")
    mqtt_user = os.getenv("MH_MQTT_USER", "username")
    mqtt_pass = os.getenv("MH_MQTT_PASS", "password")

    config_content = f"""; ================== MQTT HASS CONFIG ==================
; Generated on first run
; ======================================================

[device]
name = {sanitize_topic(device_name)}
model = MQTT HASS
manufacturer = MQTT HASS
interval = 30

[mqtt]
broker = {mqtt_broker}
port = {mqtt_port}
username = {mqtt_user}
password = {mqtt_pass}
connection_timeout = 10
"""

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config_content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to write config file {config_path}: {e}") from e

    logger.warning(f"Configuration created at {config_path} from environment defaults")
    logger.warning("Edit config.ini with real MQTT credentials before running!")


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> configparser.ConfigParser:
    """
    Load the configuration file, creating a default one if missing.

    Args:
        config_path: Path to config.ini

    Returns:
        Loaded ConfigParser object

    Raises:
        ConfigurationError: If the file is unreadable or has no [mqtt] section.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        create_default_config(config_path)

    config = configparser.ConfigParser()

    try:
        files_read = config.read(config_path, encoding="utf-8")
        if not files_read:
            raise ValueError("Config file exists but couldn't be read")

        if not config.has_section("mqtt"):
            raise ValueError("Config file missing [mqtt] section")

    except (configparser.Error, ValueError) as e:
        logger.error(f"Configuration file is corrupt: {e}")
        logger.error(f"Location: {config_path}")
        raise ConfigurationError(f"Corrupt configuration file {config_path}: {e}") from e

    return config


def build_settings(config: configparser.ConfigParser) -> Dict[str, Any]:
    """
    Turn a loaded config into typed settings.

    Raises:
        ConfigurationError: If the MQTT settings are invalid.
    """
    mqtt_settings = read_mqtt_settings(config)

    raw_name = config.get("device", "name", fallback=socket.gethostname())
    device_name = sanitize_topic(raw_name)
    if device_name != raw_name:
        logger.info(f"Device name '{raw_name}' normalized to '{device_name}'")

    interval = config.getint("device", "interval", fallback=MAX_AVAILABILITY_INTERVAL)
    if interval > MAX_AVAILABILITY_INTERVAL:
        logger.warning(
            f"Availability interval {interval}s exceeds {MAX_AVAILABILITY_INTERVAL}s, clamping"
        )
        interval = MAX_AVAILABILITY_INTERVAL
    elif interval < 1:
        logger.warning(f"Availability interval {interval}s is invalid, using 1s")
        interval = 1

    return {
        "DEVICE_NAME": device_name,
        "DEVICE_MODEL": config.get("device", "model", fallback="MQTT HASS"),
        "DEVICE_MANUFACTURER": config.get("device", "manufacturer", fallback="MQTT HASS"),
        "PUBLISH_INT": interval,
        **mqtt_settings,
    }
