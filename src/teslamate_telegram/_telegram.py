"""Telegram Bot API transport over aiohttp."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from teslamate_telegram._constants import TELEGRAM_API_URL
from teslamate_telegram.exceptions import TelegramError
from teslamate_telegram.models.telegram import TelegramUpdate

_logger = logging.getLogger(__name__)

_UPDATES_ADAPTER = TypeAdapter(list[TelegramUpdate])


class TelegramBot:
    """Minimal Bot API client: identity, sending and long polling."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        token: str,
        *,
        base_url: str = TELEGRAM_API_URL,
        poll_timeout: int = 60,
        error_delay: float = 5.0,
    ) -> None:
        self._http = http_session
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._poll_timeout = poll_timeout
        self._error_delay = error_delay
        self._offset = 0
        self.username = ""

    async def _call(self, method: str, payload: dict[str, Any] | None = None, *, timeout: float = 30.0) -> Any:
        """POST *payload* to a Bot API method and return its ``result``.

        The token is part of the URL, so only the method name is logged.
        """
        url = f"{self._base_url}/bot{self._token}/{method}"
        _logger.debug("Telegram %s %s", method, payload)

        try:
            async with self._http.post(
                url,
                json=payload or {},
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exc:
            raise TelegramError(f"Request to {method} failed: {exc}", endpoint=method) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TelegramError(
                f"Invalid JSON from {method}: {text[:200]}",
                status_code=status,
                endpoint=method,
            ) from exc

        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description", "") if isinstance(body, dict) else ""
            raise TelegramError(
                f"HTTP {status} from {method}: {description or text[:200]}",
                status_code=status,
                endpoint=method,
            )
        return body.get("result")

    async def get_me(self) -> dict[str, Any]:
        """Verify the token and remember the bot's username."""
        result = await self._call("getMe")
        if not isinstance(result, dict):
            raise TelegramError("getMe returned no bot user", endpoint="getMe")
        self.username = str(result.get("username") or "")
        return result

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: str | None = None,
        reply_to_message_id: int | None = None,
    ) -> None:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        if reply_to_message_id is not None:
            payload["reply_to_message_id"] = reply_to_message_id
        await self._call("sendMessage", payload)

    async def get_updates(self) -> list[TelegramUpdate]:
        """Long-poll for updates newer than the last one returned."""
        result = await self._call(
            "getUpdates",
            {"offset": self._offset, "timeout": self._poll_timeout},
            timeout=self._poll_timeout + 10,
        )
        try:
            updates = _UPDATES_ADAPTER.validate_python(result or [])
        except ValidationError as exc:
            raise TelegramError("Malformed getUpdates result", endpoint="getUpdates") from exc
        if updates:
            self._offset = max(update.update_id for update in updates) + 1
        return updates

    async def poll(self, handler: Callable[[TelegramUpdate], Awaitable[None]]) -> None:
        """Feed every incoming update to *handler* until cancelled."""
        while True:
            try:
                updates = await self.get_updates()
            except TelegramError:
                _logger.warning("Telegram getUpdates failed", exc_info=True)
                await asyncio.sleep(self._error_delay)
                continue
            except Exception:
                _logger.exception("Unexpected error while polling Telegram")
                await asyncio.sleep(self._error_delay)
                continue
            for update in updates:
                try:
                    await handler(update)
                except TelegramError:
                    _logger.warning("Failed to handle update %s", update.update_id, exc_info=True)
                except Exception:
                    _logger.exception("Unhandled error for update %s", update.update_id)
