"""Button entity (momentary action, no state)."""

from typing import Any, Dict, Optional

from ..const import ButtonDeviceClass, Component
from .base import CommandHandler, Device, Entity


class Button(Entity):
    """Stateless button; presses arrive on the command topic.

    Example:
        >>> def on_press(topic, payload, length):
        ...     print("pressed")
        >>> restart = Button(hass, device, "restart", "Restart", on_press,
        ...                  ButtonDeviceClass.RESTART)
    """

    component = Component.BUTTON
    has_state = False
    has_command = True

    def __init__(
        self,
        hass,
        device: Device,
        name: str,
        display_name: str,
        command_handler: Optional[CommandHandler] = None,
        device_class: ButtonDeviceClass = ButtonDeviceClass.NONE,
    ):
        super().__init__(hass, device, name, display_name)
        self.device_class = ButtonDeviceClass(device_class or "")
        self.init(command_handler=command_handler)

    def discovery_fields(self) -> Dict[str, Any]:
        return {"device_class": self.device_class}
