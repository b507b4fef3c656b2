"""Sensor entity with a free-form state value."""

from typing import Any, Dict, Optional

from ..const import Component, EntityCategory, SensorDeviceClass
from .base import Device, Entity


class Sensor(Entity):
    """Read-only sensor reporting an arbitrary value.

    Args:
        hass: Registry the sensor publishes through.
        device: Owning device.
        name: Topic-safe entity name.
        display_name: Name shown in Home Assistant.
        device_class: Optional Home Assistant sensor device class.
        unit_of_measurement: Optional unit (e.g. "°C", "%").
        entity_category: Optional category ("config" or "diagnostic").
    """

    component = Component.SENSOR

    def __init__(
        self,
        hass,
        device: Device,
        name: str,
        display_name: str,
        device_class: SensorDeviceClass = SensorDeviceClass.NONE,
        unit_of_measurement: Optional[str] = None,
        entity_category: EntityCategory = EntityCategory.NONE,
    ):
        super().__init__(hass, device, name, display_name)
        self.device_class = SensorDeviceClass(device_class or "")
        self.unit_of_measurement = unit_of_measurement
        self.entity_category = EntityCategory(entity_category or "")
        self.init()

    def discovery_fields(self) -> Dict[str, Any]:
        return {
            "device_class": self.device_class,
            "unit_of_measurement": self.unit_of_measurement,
            "entity_category": self.entity_category,
        }

    def update_state(self, value: Any) -> bool:
        return self.publish_state(str(value))
