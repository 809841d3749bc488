"""Telegram Bot API update models.

Only the parts of ``getUpdates`` results the bot reads are modelled;
everything else is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _TelegramModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class TelegramUser(_TelegramModel):
    id: int
    username: str = ""


class TelegramChat(_TelegramModel):
    id: int


class TelegramMessage(_TelegramModel):
    message_id: int
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str = ""

    @property
    def command(self) -> str:
        """Bot command without the leading slash or ``@botname`` suffix.

        Empty when the message is not a command.
        """
        if not self.text.startswith("/"):
            return ""
        word = self.text.split(maxsplit=1)[0][1:]
        return word.split("@", 1)[0]

    @property
    def username(self) -> str:
        return self.from_user.username if self.from_user is not None else ""


class TelegramUpdate(_TelegramModel):
    update_id: int
    message: TelegramMessage | None = None
