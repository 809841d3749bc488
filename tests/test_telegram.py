from __future__ import annotations

import asyncio

import aiohttp
import pytest
from fakes import FakeHttpSession

from teslamate_telegram._telegram import TelegramBot
from teslamate_telegram.exceptions import TelegramError
from teslamate_telegram.models.telegram import TelegramUpdate


def _update(update_id: int, text: str, chat_id: int = 42) -> dict:
    return {
        "update_id": update_id,
        "message": {
            "message_id": update_id * 10,
            "from": {"id": 7, "is_bot": False, "username": "driver"},
            "chat": {"id": chat_id, "type": "private"},
            "date": 1617950340,
            "text": text,
        },
    }


@pytest.mark.asyncio
async def test_get_me_records_username(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"ok": True, "result": {"id": 1, "is_bot": True, "username": "tesla_bot"}})
    bot = TelegramBot(http_session, "123:abc", base_url="https://tg.example")

    await bot.get_me()

    assert bot.username == "tesla_bot"
    assert http_session.calls[0][1] == "https://tg.example/bot123:abc/getMe"


@pytest.mark.asyncio
async def test_get_me_unauthorized(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"ok": False, "error_code": 401, "description": "Unauthorized"}, status=401)
    bot = TelegramBot(http_session, "bad")

    with pytest.raises(TelegramError) as excinfo:
        await bot.get_me()
    assert excinfo.value.status_code == 401
    assert "Unauthorized" in str(excinfo.value)


@pytest.mark.asyncio
async def test_send_message_payload(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"ok": True, "result": {"message_id": 1}})
    bot = TelegramBot(http_session, "123:abc")

    await bot.send_message(42, "<code>6.2</code>", parse_mode="HTML")

    _method, url, kwargs = http_session.calls[0]
    assert url.endswith("/sendMessage")
    assert kwargs["json"] == {"chat_id": 42, "text": "<code>6.2</code>", "parse_mode": "HTML"}


@pytest.mark.asyncio
async def test_get_updates_advances_offset(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"ok": True, "result": [_update(5, "/status"), _update(6, "hi")]})
    http_session.queue_json({"ok": True, "result": []})
    bot = TelegramBot(http_session, "123:abc", poll_timeout=1)

    updates = await bot.get_updates()
    await bot.get_updates()

    assert [u.update_id for u in updates] == [5, 6]
    assert updates[0].message is not None
    assert updates[0].message.command == "status"
    assert updates[0].message.username == "driver"
    assert updates[1].message is not None
    assert updates[1].message.command == ""
    assert http_session.calls[0][2]["json"] == {"offset": 0, "timeout": 1}
    assert http_session.calls[1][2]["json"] == {"offset": 7, "timeout": 1}


@pytest.mark.asyncio
async def test_network_error_is_telegram_error(http_session: FakeHttpSession) -> None:
    http_session.responses.append(aiohttp.ClientConnectionError("down"))

    with pytest.raises(TelegramError):
        await TelegramBot(http_session, "123:abc").send_message(1, "x")


def test_command_strips_bot_name() -> None:
    update = TelegramUpdate.model_validate(_update(1, "/status@tesla_bot now"))

    assert update.message is not None
    assert update.message.command == "status"


@pytest.mark.asyncio
async def test_undecodable_body_is_telegram_error(http_session: FakeHttpSession) -> None:
    http_session.queue_text(b'{"ok": true, "result": "\xff"}')

    with pytest.raises(TelegramError):
        await TelegramBot(http_session, "123:abc").get_me()


@pytest.mark.asyncio
async def test_poll_survives_handler_error(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"ok": True, "result": [_update(1, "/status")]})
    http_session.queue_json({"ok": True, "result": [_update(2, "/status")]})
    bot = TelegramBot(http_session, "123:abc", poll_timeout=1)
    handled: list[int] = []
    done = asyncio.Event()

    async def handler(update: TelegramUpdate) -> None:
        if update.update_id == 1:
            raise ValueError("broken handler")
        handled.append(update.update_id)
        done.set()

    task = asyncio.create_task(bot.poll(handler))
    try:
        await asyncio.wait_for(done.wait(), timeout=1)
        assert not task.done()
    finally:
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert handled == [2]
    assert http_session.calls[1][2]["json"]["offset"] == 2


@pytest.mark.asyncio
async def test_poll_retries_after_get_updates_failure(http_session: FakeHttpSession) -> None:
    http_session.queue_text(b"\xff\xfe")
    http_session.queue_json({"ok": True, "result": [_update(3, "hi")]})
    bot = TelegramBot(http_session, "123:abc", poll_timeout=1, error_delay=0)
    done = asyncio.Event()

    async def handler(update: TelegramUpdate) -> None:
        done.set()

    task = asyncio.create_task(bot.poll(handler))
    try:
        await asyncio.wait_for(done.wait(), timeout=1)
    finally:
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert len(http_session.calls) >= 2
