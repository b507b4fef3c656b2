"""Binary sensor entity (read-only ON/OFF state)."""

from typing import Any, Dict, Union

from ..const import BinarySensorDeviceClass, BinarySensorState, Component
from .base import Device, Entity


class BinarySensor(Entity):
    """Two-state sensor such as a door contact or motion detector.

    Example:
        >>> door = BinarySensor(hass, device, "front_door", "Front Door",
        ...                     BinarySensorDeviceClass.DOOR)
        >>> hass.register_entity(door)
        >>> door.update_state(BinarySensorState.ON)
    """

    component = Component.BINARY_SENSOR

    def __init__(
        self,
        hass,
        device: Device,
        name: str,
        display_name: str,
        device_class: BinarySensorDeviceClass = BinarySensorDeviceClass.NONE,
    ):
        super().__init__(hass, device, name, display_name)
        self.device_class = BinarySensorDeviceClass(device_class or "")
        self.init()

    def discovery_fields(self) -> Dict[str, Any]:
        return {"device_class": self.device_class}

    def update_state(self, value: Union[BinarySensorState, bool]) -> bool:
        """Publish ``"ON"`` or ``"OFF"``; plain booleans are accepted too."""
        if isinstance(value, bool):
            state = BinarySensorState.ON if value else BinarySensorState.OFF
        else:
            state = BinarySensorState(value)
        return self.publish_state(state.value)
