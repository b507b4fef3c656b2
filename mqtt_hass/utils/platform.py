"""Platform detection and host identity.

This module centralizes the platform-specific lookups needed to identify
the host, in particular a stable serial number used to derive MQTT client
ids and Home Assistant unique ids.
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MACHINE_ID_PATHS = (
    Path("/etc/machine-id"),
    Path("/var/lib/dbus/machine-id"),
)


class PlatformUtils:
    """Utilities for platform detection and host identification.

    Attributes:
        _platform: Cached platform name ("linux", "windows", or "unknown").
        _serial_number: Cached host serial number.

    Example:
        >>> utils = PlatformUtils()
        >>> utils.get_serial_number()
        '4c4c4544003...'
    """

    def __init__(self):
        """Initialize platform utilities with empty cache."""
        self._platform: Optional[str] = None
        self._serial_number: Optional[str] = None

    def get_platform(self) -> str:
        """Get the current platform.

        Returns:
            Platform name: "linux", "windows", or "unknown".
        """
        if self._platform is None:
            if sys.platform.startswith("linux"):
                self._platform = "linux"
            elif sys.platform.startswith("win"):
                self._platform = "windows"
            else:
                self._platform = "unknown"
                logger.warning(f"Unknown platform: {sys.platform}")
        return self._platform

    def is_linux(self) -> bool:
        return self.get_platform() == "linux"

    def is_windows(self) -> bool:
        return self.get_platform() == "windows"

    def get_serial_number(self) -> str:
        """Get a stable, host-unique serial number.

        Lookup order:
        - Linux: systemd/dbus machine-id
        - Windows: the MachineGuid registry value
        - Fallback: the MAC-derived node id from ``uuid.getnode()``

        Returns:
            Lowercase serial string without separators.
        """
        if self._serial_number is not None:
            return self._serial_number

        serial = None
        if self.is_linux():
            serial = self._read_machine_id()
        elif self.is_windows():
            serial = self._read_machine_guid()

        if not serial:
            serial = f"{uuid.getnode():012x}"
            logger.debug(f"Using MAC-derived serial number: {serial}")

        self._serial_number = serial.lower().replace("-", "")
        return self._serial_number

    def _read_machine_id(self) -> Optional[str]:
        for path in MACHINE_ID_PATHS:
            try:
                value = path.read_text(encoding="utf-8").strip()
            except OSError as e:
                logger.debug(f"Could not read {path}: {e}")
                continue
            if value:
                return value
        return None

    def _read_machine_guid(self) -> Optional[str]:
        try:
            import winreg

            key = winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE,
                r"SOFTWARE\Microsoft\Cryptography",
            )
            guid, _ = winreg.QueryValueEx(key, "MachineGuid")
            winreg.CloseKey(key)
            return guid
        except (ImportError, OSError) as e:
            logger.debug(f"Error getting MachineGuid from registry: {e}")
            return None
