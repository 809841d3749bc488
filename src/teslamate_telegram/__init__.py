"""teslamate-telegram - TeslaMate charging and driving summaries on Telegram."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("teslamate-telegram")
except PackageNotFoundError:
    __version__ = "0+local"
from teslamate_telegram.config import BotConfig
from teslamate_telegram.exceptions import (
    ConfigError,
    GeocodeError,
    MqttConnectError,
    TelegramError,
    TeslaMateTelegramError,
    TransportError,
)
from teslamate_telegram.formatting import NotificationFormatter, format_status
from teslamate_telegram.models import LookupResult, VehicleSnapshot
from teslamate_telegram.places import PlaceResolver, truncate
from teslamate_telegram.state.registry import VehicleRegistry
from teslamate_telegram.state.vehicle import Vehicle

__all__ = [
    "__version__",
    "BotConfig",
    "ConfigError",
    "GeocodeError",
    "LookupResult",
    "MqttConnectError",
    "NotificationFormatter",
    "PlaceResolver",
    "TelegramError",
    "TeslaMateTelegramError",
    "TransportError",
    "Vehicle",
    "VehicleRegistry",
    "VehicleSnapshot",
    "format_status",
    "truncate",
]
