"""Lock entity."""

from typing import Optional, Union

from ..const import Component, LockState
from .base import CommandHandler, Device, Entity


class Lock(Entity):
    """Lock with state reporting and lock/unlock commands.

    Home Assistant sends ``LOCK``, ``UNLOCK`` or ``OPEN`` on the command
    topic; the application reports back with :meth:`update_state`.
    """

    component = Component.LOCK
    has_command = True

    def __init__(
        self,
        hass,
        device: Device,
        name: str,
        display_name: str,
        command_handler: Optional[CommandHandler] = None,
    ):
        super().__init__(hass, device, name, display_name)
        self.init(command_handler=command_handler)

    def update_state(self, value: Union[LockState, str]) -> bool:
        return self.publish_state(LockState(value).value)
