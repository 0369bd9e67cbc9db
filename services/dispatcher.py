# FILE: services/dispatcher.py
"""
Conversation Dispatcher

One inbound Telegram message in, exactly one Reply out.
No conversation state is kept between messages.

    receive -> (command?) -> classify -> executor[intent] -> Reply

The executor table must cover every Intent; anything that escapes an
executor becomes a generic failure reply instead of silence.
"""

import logging
from typing import Callable, Dict

from config import APP_URL
from core.errors import UpstreamError
from core.intent import Intent
from executors import replies
from executors.base import BaseExecutor
from executors.commands import CommandExecutor
from executors.expense import LogExecutor
from executors.query import QueryExecutor
from models.telegram import Reply, TelegramMessage
from services.dates import get_today

logger = logging.getLogger("dispatcher")


class ConversationDispatcher:
    def __init__(
        self,
        engine,
        store,
        linker,
        transport,
        *,
        app_url: str = APP_URL,
        today: Callable = get_today,
    ):
        self.engine = engine
        # Intent → executor (SINGLE SOURCE OF TRUTH)
        self.executors: Dict[Intent, BaseExecutor] = {
            Intent.LOG: LogExecutor(engine, store, linker, transport),
            Intent.QUERY: QueryExecutor(engine, store, linker, today=today),
        }
        missing = set(Intent) - set(self.executors)
        if missing:
            raise RuntimeError(f"No executor registered for intents: {sorted(missing)}")
        self.commands = CommandExecutor(store, linker, app_url=app_url)

    async def handle(self, message: TelegramMessage) -> Reply:
        try:
            return await self._handle(message)
        except Exception:
            logger.exception(
                f"[DISPATCH_ERROR] chat_id={message.chat_id}, message_id={message.message_id}"
            )
            return Reply(replies.GENERIC_FAILURE)

    async def _handle(self, message: TelegramMessage) -> Reply:
        has_image = message.photo_file_id is not None
        has_text = bool(message.text and message.text.strip())

        # -----------------
        # Receive
        # -----------------
        if message.chat_user_id is None or not (has_image or has_text):
            return Reply(replies.UNRECOGNIZED_INPUT)

        if not has_image and message.command:
            return await self.commands.execute(message)

        # -----------------
        # Classify
        # -----------------
        if has_image:
            # Receipt photos are always logged
            intent = Intent.LOG
        else:
            try:
                intent = await self.engine.classify_intent(message.text)
            except UpstreamError:
                intent = None
        if intent is None:
            return Reply(replies.DIDNT_UNDERSTAND)

        logger.info(
            f"[INTENT] chat_user_id={message.chat_user_id}, intent={intent.value}, "
            f"has_image={has_image}"
        )

        # -----------------
        # Execution
        # -----------------
        return await self.executors[intent].execute(message)
