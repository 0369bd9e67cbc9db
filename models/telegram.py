# models/telegram.py
"""
Subset of the Telegram Bot API update payload that the webhook reads.
Unknown keys are ignored so new Bot API fields never break parsing.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramUser(BaseModel):
    id: int
    username: Optional[str] = None


class TelegramChat(BaseModel):
    id: int


class PhotoSize(BaseModel):
    file_id: str
    width: int = 0
    height: int = 0
    file_size: Optional[int] = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(None, alias="from")
    text: Optional[str] = None
    caption: Optional[str] = None
    photo: Optional[List[PhotoSize]] = None

    @property
    def chat_id(self) -> int:
        return self.chat.id

    @property
    def chat_user_id(self) -> Optional[str]:
        return str(self.from_user.id) if self.from_user else None

    @property
    def photo_file_id(self) -> Optional[str]:
        # Telegram lists sizes smallest first
        if not self.photo:
            return None
        return self.photo[-1].file_id

    @property
    def command(self) -> Optional[str]:
        if not self.text or not self.text.startswith("/"):
            return None
        head = self.text.split(maxsplit=1)[0]
        # "/start@MyBot" → "/start"
        return head.split("@", 1)[0].lower()

    @property
    def command_args(self) -> str:
        parts = (self.text or "").split(maxsplit=1)
        return parts[1].strip() if len(parts) > 1 else ""


class TelegramUpdate(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None


@dataclass(frozen=True)
class Reply:
    """The single outbound chat reply produced for one inbound message."""

    text: str
    parse_mode: Optional[str] = None
