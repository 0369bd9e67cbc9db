# tests/api/test_webhook.py

from fastapi.testclient import TestClient

from api.app import create_app
from core.intent import Intent
from executors import replies

HANDLED = {"status": "Update handled"}


def _update(text=None, **message):
    payload = {"message_id": 1, "chat": {"id": 555}, "from": {"id": 111}, **message}
    if text is not None:
        payload["text"] = text
    return {"update_id": 9001, "message": payload}


# ---------------------------------------------------------------------
# Exactly one reply per update
# ---------------------------------------------------------------------

def test_logged_expense_gets_one_reply(client, engine, transport, linked):
    engine.intent = Intent.LOG
    engine.expense = {"amount": 12.5, "category": "Food", "description": "lunch"}

    response = client.post("/webhooks/telegram", json=_update("lunch 12.50"))

    assert response.status_code == 200
    assert response.json() == HANDLED
    assert transport.sent == [
        {
            "chat_id": 555,
            "text": 'Logged your spending of $12.50 on Food with description: "lunch".',
            "parse_mode": None,
        }
    ]


def test_start_reply_uses_markdown(client, transport):
    client.post("/webhooks/telegram", json=_update("/start"))

    [sent] = transport.sent
    assert sent["parse_mode"] == "Markdown"


def test_failure_still_answers_200_with_one_reply(client, engine, transport):
    engine.intent = RuntimeError("boom")

    response = client.post("/webhooks/telegram", json=_update("hello"))

    assert response.status_code == 200
    assert [s["text"] for s in transport.sent] == [replies.GENERIC_FAILURE]


def test_sticker_gets_unrecognized_reply(client, transport):
    client.post("/webhooks/telegram", json=_update(sticker={"file_id": "s1"}))

    assert [s["text"] for s in transport.sent] == [replies.UNRECOGNIZED_INPUT]


# ---------------------------------------------------------------------
# Nothing to answer
# ---------------------------------------------------------------------

def test_update_without_message_is_ignored(client, transport):
    response = client.post("/webhooks/telegram", json={"update_id": 1, "edited_message": {}})

    assert response.json() == HANDLED
    assert transport.sent == []


def test_garbage_payload_is_acknowledged(client, transport):
    response = client.post(
        "/webhooks/telegram", content=b"not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 200
    assert transport.sent == []


def test_webhook_before_startup_is_acknowledged():
    client = TestClient(create_app(None, api_key="test-key"))

    response = client.post("/webhooks/telegram", json=_update("hello"))

    assert response.status_code == 200
    assert response.json() == HANDLED


# ---------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------

def test_health_reports_ready(client):
    response = client.get("/health")

    assert response.json() == {"status": "ok", "ready": True}
