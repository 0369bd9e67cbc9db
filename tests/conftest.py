# tests/conftest.py
import sys
from pathlib import Path

# ---------------------------------------------------------
# Ensure project root (and tests/ for fakes) are on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for path in (PROJECT_ROOT, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# ---------------------------------------------------------
# Now safe to import app + dependencies
# ---------------------------------------------------------
import asyncio
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient
from pydantic_ai import models

from api.app import create_app
from api.dependencies import Services
from fakes import FakeEngine, FakePrisma, FakeTransport, MutableClock
from services.dispatcher import ConversationDispatcher
from services.expense_store import ExpenseStore
from services.identity_linker import IdentityLinker

# Tests must never reach the hosted model
models.ALLOW_MODEL_REQUESTS = False

API_KEY = "test-key"
APP_URL = "https://gastos.test"
TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

CHAT_USER = "111"
ACCOUNT = "acct-1"


@pytest.fixture
def clock():
    return MutableClock(NOW)


@pytest.fixture
def fake_db():
    return FakePrisma()


@pytest.fixture
def store(fake_db, clock):
    return ExpenseStore(fake_db, clock=clock)


@pytest.fixture
def linker(fake_db, clock):
    return IdentityLinker(fake_db, clock=clock)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def dispatcher(engine, store, linker, transport):
    return ConversationDispatcher(
        engine, store, linker, transport, app_url=APP_URL, today=lambda: TODAY
    )


@pytest.fixture
def services(engine, store, linker, transport, dispatcher, fake_db):
    return Services(
        store=store,
        linker=linker,
        engine=engine,
        transport=transport,
        dispatcher=dispatcher,
        db=fake_db,
    )


@pytest.fixture
def client(services):
    """API client wired to in-memory fakes; no Prisma, Telegram or Gemini."""
    return TestClient(create_app(services, api_key=API_KEY))


@pytest.fixture
def linked(fake_db):
    """Link CHAT_USER to ACCOUNT; returns a helper for linking more users."""

    def link(chat_user_id: str = CHAT_USER, account_id: str = ACCOUNT) -> None:
        asyncio.run(
            fake_db.usermapping.create(
                data={"chat_user_id": chat_user_id, "account_id": account_id, "linked": True}
            )
        )

    link()
    return link
