"""Topic conventions and Home Assistant taxonomies.

Every taxonomy is a closed ``str`` enumeration whose values are the exact
wire tokens Home Assistant expects. Each one carries a ``NONE`` member whose
value is the empty string; payload builders drop a field entirely when it is
set to ``NONE`` so the literal "none" never reaches the hub.
"""

from enum import Enum

# ----------------------------
# Topics
# ----------------------------

DISCOVERY_PREFIX = "homeassistant"
STATUS_TOPIC = f"{DISCOVERY_PREFIX}/status"
DEVICE_PREFIX = "mqtt_hass_"

PAYLOAD_ONLINE = "online"

SUFFIX_CONFIG = "config"
SUFFIX_STATE = "state"
SUFFIX_COMMAND = "command"
SUFFIX_AVAILABILITY = "availability"

# Discovery payloads larger than this are refused, never truncated
MAX_PAYLOAD_SIZE = 2048

# Upper bound for the application's availability refresh loop (seconds)
MAX_AVAILABILITY_INTERVAL = 30


class Component(str, Enum):
    """Home Assistant MQTT platforms supported by this library."""

    BINARY_SENSOR = "binary_sensor"
    SENSOR = "sensor"
    BUTTON = "button"
    LOCK = "lock"
    COVER = "cover"


# ----------------------------
# States
# ----------------------------


class BinarySensorState(str, Enum):
    OFF = "OFF"
    ON = "ON"


class LockState(str, Enum):
    UNLOCKED = "UNLOCKED"
    UNLOCKING = "UNLOCKING"
    LOCKED = "LOCKED"
    LOCKING = "LOCKING"
    JAMMED = "JAMMED"


class CoverState(str, Enum):
    # Lowercase on the wire, unlike lock and binary sensor states
    OPEN = "open"
    CLOSED = "closed"
    OPENING = "opening"
    CLOSING = "closing"
    STOPPED = "stopped"


# ----------------------------
# Device classes
# ----------------------------


class BinarySensorDeviceClass(str, Enum):
    NONE = ""
    BATTERY = "battery"
    BATTERY_CHARGING = "battery_charging"
    CARBON_MONOXIDE = "carbon_monoxide"
    COLD = "cold"
    CONNECTIVITY = "connectivity"
    DOOR = "door"
    GARAGE_DOOR = "garage_door"
    GAS = "gas"
    HEAT = "heat"
    LIGHT = "light"
    LOCK = "lock"
    MOISTURE = "moisture"
    MOTION = "motion"
    MOVING = "moving"
    OCCUPANCY = "occupancy"
    OPENING = "opening"
    PLUG = "plug"
    POWER = "power"
    PRESENCE = "presence"
    PROBLEM = "problem"
    RUNNING = "running"
    SAFETY = "safety"
    SMOKE = "smoke"
    SOUND = "sound"
    TAMPER = "tamper"
    UPDATE = "update"
    VIBRATION = "vibration"
    WINDOW = "window"


class SensorDeviceClass(str, Enum):
    NONE = ""
    APPARENT_POWER = "apparent_power"
    AQI = "aqi"
    ATMOSPHERIC_PRESSURE = "atmospheric_pressure"
    BATTERY = "battery"
    CARBON_DIOXIDE = "carbon_dioxide"
    CARBON_MONOXIDE = "carbon_monoxide"
    CURRENT = "current"
    DATA_RATE = "data_rate"
    DATA_SIZE = "data_size"
    DATE = "date"
    DISTANCE = "distance"
    DURATION = "duration"
    ENERGY = "energy"
    ENERGY_STORAGE = "energy_storage"
    ENUM = "enum"
    FREQUENCY = "frequency"
    GAS = "gas"
    HUMIDITY = "humidity"
    ILLUMINANCE = "illuminance"
    IRRADIANCE = "irradiance"
    MOISTURE = "moisture"
    MONETARY = "monetary"
    NITROGEN_DIOXIDE = "nitrogen_dioxide"
    NITROGEN_MONOXIDE = "nitrogen_monoxide"
    NITROUS_OXIDE = "nitrous_oxide"
    OZONE = "ozone"
    PH = "ph"
    PM1 = "pm1"
    PM10 = "pm10"
    PM25 = "pm25"
    POWER_FACTOR = "power_factor"
    POWER = "power"
    PRECIPITATION = "precipitation"
    PRECIPITATION_INTENSITY = "precipitation_intensity"
    PRESSURE = "pressure"
    REACTIVE_POWER = "reactive_power"
    SIGNAL_STRENGTH = "signal_strength"
    SOUND_PRESSURE = "sound_pressure"
    SPEED = "speed"
    SULPHUR_DIOXIDE = "sulphur_dioxide"
    TEMPERATURE = "temperature"
    TIMESTAMP = "timestamp"
    VOLATILE_ORGANIC_COMPOUNDS = "volatile_organic_compounds"
    VOLATILE_ORGANIC_COMPOUNDS_PARTS = "volatile_organic_compounds_parts"
    VOLTAGE = "voltage"
    VOLUME = "volume"
    VOLUME_STORAGE = "volume_storage"
    WATER = "water"
    WEIGHT = "weight"
    WIND_SPEED = "wind_speed"


class ButtonDeviceClass(str, Enum):
    NONE = ""
    IDENTIFY = "identify"
    RESTART = "restart"
    UPDATE = "update"


class CoverDeviceClass(str, Enum):
    NONE = ""
    AWNING = "awning"
    BLIND = "blind"
    CURTAIN = "curtain"
    DAMPER = "damper"
    DOOR = "door"
    GARAGE = "garage"
    GATE = "gate"
    SHADE = "shade"
    SHUTTER = "shutter"
    WINDOW = "window"


class EntityCategory(str, Enum):
    NONE = ""
    CONFIG = "config"
    DIAGNOSTIC = "diagnostic"
