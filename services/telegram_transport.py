# services/telegram_transport.py
"""
Chat transport: thin wrapper over python-telegram-bot's Bot.

send_message never raises; a failed reply is logged and dropped,
since the webhook has already accepted the update.
"""

import logging
from typing import Optional

from telegram import Bot
from telegram.error import TelegramError

from core.errors import UpstreamError

logger = logging.getLogger("telegram_transport")


class TelegramTransport:
    def __init__(self, bot: Bot):
        self.bot = bot

    async def start(self) -> None:
        await self.bot.initialize()

    async def stop(self) -> None:
        await self.bot.shutdown()

    async def send_message(self, chat_id: int, text: str, parse_mode: Optional[str] = None) -> None:
        try:
            await self.bot.send_message(chat_id=chat_id, text=text, parse_mode=parse_mode)
        except TelegramError:
            logger.exception("[SEND_FAILED] chat_id=%s", chat_id)
            return
        logger.info(f"[REPLY_SENT] chat_id={chat_id}, length={len(text)}")

    async def download_photo(self, file_id: str) -> bytes:
        try:
            tg_file = await self.bot.get_file(file_id)
            data = await tg_file.download_as_bytearray()
        except TelegramError as e:
            logger.exception("[DOWNLOAD_FAILED] file_id=%s", file_id)
            raise UpstreamError("Failed to fetch file from Telegram") from e
        return bytes(data)
