"""Process wiring: MQTT in, Telegram out."""

from __future__ import annotations

import asyncio
import contextlib
import logging

import aiohttp

from teslamate_telegram._geocode import NominatimClient
from teslamate_telegram._mqtt import TeslaMateMqttRuntime
from teslamate_telegram._telegram import TelegramBot
from teslamate_telegram.config import BotConfig
from teslamate_telegram.dispatch import VehicleDispatcher
from teslamate_telegram.formatting import NotificationFormatter, format_status
from teslamate_telegram.models.telegram import TelegramUpdate
from teslamate_telegram.places import PlaceResolver
from teslamate_telegram.state.registry import VehicleRegistry

_logger = logging.getLogger(__name__)

NO_VEHICLE_TEXT = "No vehicles discovered yet."


class TeslaMateTelegram:
    """Bot application: session notifications plus the ``/status`` command."""

    def __init__(
        self,
        config: BotConfig,
        bot: TelegramBot,
        formatter: NotificationFormatter,
        *,
        registry: VehicleRegistry | None = None,
    ) -> None:
        self._config = config
        self._bot = bot
        self.registry = registry or VehicleRegistry()
        self.dispatcher = VehicleDispatcher(
            self.registry,
            formatter,
            self.notify,
            debounce_seconds=config.debounce_seconds,
        )

    async def notify(self, text: str) -> None:
        """Send a session notification to the configured chat."""
        await self._bot.send_message(self._config.telegram_chat_id, text, parse_mode="HTML")

    def status_text(self) -> str:
        vehicle = self.registry.default_vehicle
        if vehicle is None:
            return NO_VEHICLE_TEXT
        return format_status(vehicle)

    async def handle_update(self, update: TelegramUpdate) -> None:
        message = update.message
        if message is None:
            return
        _logger.info("[%s] %s", message.username, message.text)

        if message.command == "status":
            await self._bot.send_message(message.chat.id, self.status_text())
            return
        await self._bot.send_message(
            message.chat.id,
            f"Hello. Set TELEGRAM_CHAT_ID={message.chat.id}",
            reply_to_message_id=message.message_id,
        )


async def run(config: BotConfig, stop_event: asyncio.Event | None = None) -> None:
    """Run the bot until *stop_event* is set (or forever).

    Telegram authentication and the MQTT connection are established
    before anything else; failures there propagate to the caller.
    """
    loop = asyncio.get_running_loop()
    stop = stop_event or asyncio.Event()

    async with aiohttp.ClientSession() as http_session:
        bot = TelegramBot(
            http_session,
            config.telegram_token,
            base_url=config.telegram_api_url,
            poll_timeout=config.telegram_poll_timeout,
        )
        await bot.get_me()
        _logger.info("Telegram authorized on account %s", bot.username)

        geocoder = NominatimClient(http_session, base_url=config.nominatim_url, timeout=config.geocode_timeout)
        formatter = NotificationFormatter(PlaceResolver(geocoder), tz=config.tz())
        app = TeslaMateTelegram(config, bot, formatter)

        runtime = TeslaMateMqttRuntime(
            loop=loop,
            on_update=app.dispatcher.submit,
            topic_prefix=config.mqtt_topic_prefix,
            keepalive=config.mqtt_keepalive,
            logger=logging.getLogger("teslamate_telegram.mqtt"),
        )
        await loop.run_in_executor(None, runtime.start, config.mqtt_host, config.mqtt_port)

        poll_task = loop.create_task(bot.poll(app.handle_update), name="telegram-poll")
        try:
            await stop.wait()
        finally:
            poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poll_task
            await loop.run_in_executor(None, runtime.stop)
            await app.dispatcher.stop()
