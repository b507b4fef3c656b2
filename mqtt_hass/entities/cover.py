"""Cover entity (blinds, garage doors, gates...)."""

from typing import Any, Dict, Optional, Union

from ..const import Component, CoverDeviceClass, CoverState
from .base import CommandHandler, Device, Entity


class Cover(Entity):
    """Cover with state reporting and open/close/stop commands.

    Cover states go out lowercase ("open"), unlike lock and binary sensor
    states.
    """

    component = Component.COVER
    has_command = True

    def __init__(
        self,
        hass,
        device: Device,
        name: str,
        display_name: str,
        command_handler: Optional[CommandHandler] = None,
        device_class: CoverDeviceClass = CoverDeviceClass.NONE,
    ):
        super().__init__(hass, device, name, display_name)
        self.device_class = CoverDeviceClass(device_class or "")
        self.init(command_handler=command_handler)

    def discovery_fields(self) -> Dict[str, Any]:
        return {"device_class": self.device_class}

    def update_state(self, value: Union[CoverState, str]) -> bool:
        return self.publish_state(CoverState(value).value)
