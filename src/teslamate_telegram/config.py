"""Runtime configuration for teslamate-telegram."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from teslamate_telegram._constants import (
    DEFAULT_MQTT_HOST,
    DEFAULT_MQTT_PORT,
    DEFAULT_TOPIC_PREFIX,
    NOMINATIM_URL,
    TELEGRAM_API_URL,
)
from teslamate_telegram.exceptions import ConfigError


def _convert(env_key: str, value: str, converter: Callable[[str], Any]) -> Any:
    try:
        return converter(value)
    except ValueError as exc:
        raise ConfigError(f"{env_key} has an invalid value: {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class BotConfig:
    """Bot configuration.

    Parameters
    ----------
    telegram_token : str
        Bot token issued by BotFather.
    telegram_chat_id : int
        Chat that receives session notifications.  ``0`` until the user
        has messaged the bot and copied the id it replies with.
    telegram_api_url : str
        Bot API base URL.
    telegram_poll_timeout : int
        Long-poll timeout for ``getUpdates`` in seconds.
    mqtt_host : str
        MQTT broker host (TeslaMate's broker).
    mqtt_port : int
        MQTT broker port.
    mqtt_topic_prefix : str
        Topic prefix under which TeslaMate publishes ``<id>/<field>``.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    nominatim_url : str
        Nominatim base URL used for reverse geocoding.
    geocode_timeout : float
        Total timeout in seconds for a single reverse lookup.
    debounce_seconds : float
        Quiet period after a burst of updates before a vehicle's
        sessions are evaluated.  ``0`` evaluates after every update.
    time_zone : str
        IANA time zone for clock times in messages.  Empty uses the
        process local time zone.
    """

    telegram_token: str
    telegram_chat_id: int = 0
    telegram_api_url: str = TELEGRAM_API_URL
    telegram_poll_timeout: int = 60
    mqtt_host: str = DEFAULT_MQTT_HOST
    mqtt_port: int = DEFAULT_MQTT_PORT
    mqtt_topic_prefix: str = DEFAULT_TOPIC_PREFIX
    mqtt_keepalive: int = 60
    nominatim_url: str = NOMINATIM_URL
    geocode_timeout: float = 10.0
    debounce_seconds: float = 1.0
    time_zone: str = ""

    def __post_init__(self) -> None:
        if not self.telegram_token:
            raise ConfigError("telegram_token is required (set TELEGRAM_TOKEN)")
        if self.debounce_seconds < 0:
            raise ConfigError("debounce_seconds must not be negative")

    def tz(self) -> tzinfo | None:
        """Time zone for rendering clock times, ``None`` for local time."""
        if not self.time_zone:
            return None
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown time zone: {self.time_zone!r}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> BotConfig:
        """Create configuration from environment variables.

        Reads ``TELEGRAM_TOKEN`` and ``TELEGRAM_CHAT_ID`` plus optional
        ``MQTT_*``/``NOMINATIM_URL``/``GEOCODE_TIMEOUT``/
        ``DEBOUNCE_SECONDS``/``TIME_ZONE`` variables.  Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "TELEGRAM_TOKEN": ("telegram_token", str),
            "TELEGRAM_CHAT_ID": ("telegram_chat_id", int),
            "TELEGRAM_API_URL": ("telegram_api_url", str),
            "TELEGRAM_POLL_TIMEOUT": ("telegram_poll_timeout", int),
            "MQTT_HOST": ("mqtt_host", str),
            "MQTT_PORT": ("mqtt_port", int),
            "MQTT_TOPIC_PREFIX": ("mqtt_topic_prefix", str),
            "MQTT_KEEPALIVE": ("mqtt_keepalive", int),
            "NOMINATIM_URL": ("nominatim_url", str),
            "GEOCODE_TIMEOUT": ("geocode_timeout", float),
            "DEBOUNCE_SECONDS": ("debounce_seconds", float),
            "TIME_ZONE": ("time_zone", str),
        }
        config_kwargs: dict[str, Any] = {"telegram_token": ""}
        for env_key, (field_name, converter) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _convert(env_key, val.strip(), converter)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
