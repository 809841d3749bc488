"""Typed data models."""

from teslamate_telegram.models.geocode import LookupResult
from teslamate_telegram.models.snapshot import VehicleSnapshot
from teslamate_telegram.models.telegram import TelegramChat, TelegramMessage, TelegramUpdate, TelegramUser

__all__ = [
    "LookupResult",
    "TelegramChat",
    "TelegramMessage",
    "TelegramUpdate",
    "TelegramUser",
    "VehicleSnapshot",
]
