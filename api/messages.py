# api/messages.py
"""
Text chat over HTTP: the same pipeline as the Telegram webhook, but the
single reply comes back in the response body instead of through the bot.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as SchemaError

from api.dependencies import Services, get_services, require_api_key
from core.errors import ValidationError
from models.telegram import TelegramMessage

logger = logging.getLogger("messages_api")

router = APIRouter(dependencies=[Depends(require_api_key)])


def _missing(field: str) -> ValidationError:
    return ValidationError(
        [{"field": field, "message": f"{field} is required"}],
        message="Missing telegramUserId or message",
    )


@router.post("/messages")
async def post_message(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> Dict[str, str]:
    telegram_user_id = body.get("telegramUserId")
    text = body.get("message")
    if telegram_user_id in (None, ""):
        raise _missing("telegramUserId")
    if not isinstance(text, str) or not text.strip():
        raise _missing("message")

    # Private chats share the user's id
    try:
        message = TelegramMessage.model_validate(
            {
                "message_id": 0,
                "chat": {"id": telegram_user_id},
                "from": {"id": telegram_user_id},
                "text": text,
            }
        )
    except SchemaError:
        raise ValidationError(
            [{"field": "telegramUserId", "message": "telegramUserId must be a Telegram user id"}],
            message="Invalid telegramUserId",
        )

    reply = await services.dispatcher.handle(message)
    logger.info(f"[MESSAGE] chat_user_id={message.chat_user_id}, length={len(text)}")
    return {"reply": reply.text}
