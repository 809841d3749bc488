"""Custom exception hierarchy for teslamate-telegram."""

from __future__ import annotations


class TeslaMateTelegramError(Exception):
    """Base exception for all teslamate-telegram errors."""


class ConfigError(TeslaMateTelegramError):
    """Invalid or missing configuration."""


class TransportError(TeslaMateTelegramError):
    """Network-level failure (connection, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GeocodeError(TransportError):
    """Reverse geocoding lookup failed."""


class TelegramError(TransportError):
    """Telegram Bot API call failed or returned ``ok: false``."""


class MqttConnectError(TransportError):
    """Could not connect to the MQTT broker."""
