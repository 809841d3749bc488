"""Internal constants shared across the package."""

# 61% = 334.87 km of rated range with 73.5 kWh usable.
RATED_KM_PER_KWH = 7.47
KM_PER_MILE = 1.61

DEFAULT_MQTT_HOST = "mqtt"
DEFAULT_MQTT_PORT = 1883
DEFAULT_TOPIC_PREFIX = "teslamate/cars"

NOMINATIM_URL = "https://nominatim.openstreetmap.org"
TELEGRAM_API_URL = "https://api.telegram.org"
USER_AGENT = "teslamate-telegram/1.0"

PLACE_NAME_LIMIT = 20
UNKNOWN_PLACE = "?"

# Shift states in which the car is considered to be driving.
DRIVE_SHIFT_STATES: frozenset[str] = frozenset({"D", "R"})
