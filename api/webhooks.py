# api/webhooks.py
"""
Telegram webhook.

Always answers 200 {"status": "Update handled"}: outcomes reach the user as a
chat reply, never as an HTTP status (a non-2xx makes Telegram redeliver).
Repeated deliveries of the same update are processed again.
"""

import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError as SchemaError

from models.telegram import TelegramUpdate

logger = logging.getLogger("telegram_webhook")

router = APIRouter()

HANDLED = {"status": "Update handled"}


@router.post("/webhooks/telegram")
async def telegram_webhook(request: Request):
    try:
        update = TelegramUpdate.model_validate(await request.json())
    except (ValueError, SchemaError):
        logger.warning("[WEBHOOK] unparseable update payload")
        return HANDLED

    if update.message is None:
        logger.info(f"[WEBHOOK] update_id={update.update_id} has no message; ignored")
        return HANDLED

    services = getattr(request.app.state, "services", None)
    if services is None:
        logger.error(f"[WEBHOOK] services not ready; update_id={update.update_id} dropped")
        return HANDLED

    message = update.message
    logger.info(
        f"[WEBHOOK] update_id={update.update_id}, chat_id={message.chat_id}, "
        f"has_photo={message.photo_file_id is not None}"
    )

    reply = await services.dispatcher.handle(message)
    await services.transport.send_message(message.chat_id, reply.text, reply.parse_mode)
    return HANDLED
