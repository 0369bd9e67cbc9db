# api/wiring.py
"""Production collaborators: Prisma, Telegram Bot, Gemini."""

import logging

from telegram import Bot

import config
from agents.extraction_engine import ExtractionEngine
from agents.model import build_model
from api.dependencies import Services
from services.dispatcher import ConversationDispatcher
from services.expense_store import ExpenseStore
from services.identity_linker import IdentityLinker
from services.telegram_transport import TelegramTransport

logger = logging.getLogger("gastos_api")


async def build_services() -> Services:
    for name in config.REQUIRED_VARS:
        config.get_env_var(name)

    # The generated Prisma client only exists after `prisma generate`
    from prisma import Prisma

    db = Prisma()
    await db.connect()
    logger.info("✅ Prisma DB connected")

    transport = None
    try:
        transport = TelegramTransport(Bot(token=config.TELEGRAM_BOT_TOKEN))
        await transport.start()
        engine = ExtractionEngine(build_model())
    except Exception:
        if transport is not None:
            await transport.stop()
        await db.disconnect()
        logger.warning("❌ Startup failed; Prisma DB disconnected")
        raise

    store = ExpenseStore(db)
    linker = IdentityLinker(db)
    dispatcher = ConversationDispatcher(engine, store, linker, transport, app_url=config.APP_URL)

    return Services(
        store=store,
        linker=linker,
        engine=engine,
        transport=transport,
        dispatcher=dispatcher,
        db=db,
    )


async def close_services(services: Services) -> None:
    await services.transport.stop()
    if services.db is not None:
        await services.db.disconnect()
        logger.info("✅ Prisma DB disconnected")
