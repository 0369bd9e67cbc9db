# api/expenses.py
"""
Expense CRUD for service-to-service callers (the bot, the web app backend).

Every route requires the shared `x-api-key`. The owner of a record is always
resolved from `telegramUserId` through the Identity Linker, never taken from
the body.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import Services, get_services, require_api_key
from core.errors import NotFoundError, ValidationError
from models.expense import Expense
from services.expense_validator import validate_expense, validate_expense_update, validate_query

logger = logging.getLogger("expenses_api")

router = APIRouter(dependencies=[Depends(require_api_key)])

OWNER_KEY = "telegramUserId"


def _dump(expense: Expense) -> Dict[str, Any]:
    return expense.model_dump(mode="json", by_alias=True)


def _chat_user_id(value: Any) -> str:
    if value is None or value == "":
        raise ValidationError(
            [{"field": OWNER_KEY, "message": "Missing Telegram user ID"}],
            message="Missing Telegram user ID",
        )
    return str(value)


def _expense_id(body: Dict[str, Any]) -> str:
    expense_id = body.get("id")
    if not expense_id or not isinstance(expense_id, str):
        raise ValidationError(
            [{"field": "id", "message": "Missing expense ID"}], message="Missing expense ID"
        )
    return expense_id


async def _check_owner(services: Services, expense_id: str, body: Dict[str, Any]) -> None:
    """Callers that name a Telegram user may only touch that user's records."""
    if body.get(OWNER_KEY) in (None, ""):
        return
    owner_id = await services.linker.require_account_id(str(body[OWNER_KEY]))
    existing = await services.store.get_by_id(expense_id)
    if existing is None or existing.owner_id != owner_id:
        raise NotFoundError(f"Expense {expense_id} not found")


@router.get("/expenses")
async def list_expenses(
    telegram_user_id: Optional[str] = Query(None, alias=OWNER_KEY),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    services: Services = Depends(get_services),
) -> List[Dict[str, Any]]:
    owner_id = await services.linker.require_account_id(_chat_user_id(telegram_user_id))
    query = validate_query(
        {"start_date": start_date, "end_date": end_date, "category": category}
    )
    expenses = await services.store.get(owner_id, query.start_date, query.end_date, query.category)
    logger.info(f"[LIST] owner_id={owner_id}, count={len(expenses)}")
    return [_dump(e) for e in expenses]


@router.post("/expenses", status_code=201)
async def create_expense(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    expense = validate_expense(body)
    owner_id = await services.linker.require_account_id(_chat_user_id(body.get(OWNER_KEY)))
    created = await services.store.create(expense, owner_id)
    return _dump(created)


@router.put("/expenses")
async def update_expense(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    expense_id = _expense_id(body)
    fields = validate_expense_update(
        {k: v for k, v in body.items() if k not in ("id", OWNER_KEY)}
    )
    await _check_owner(services, expense_id, body)
    updated = await services.store.update(expense_id, fields)
    return _dump(updated)


@router.delete("/expenses")
async def delete_expense(
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
) -> Dict[str, str]:
    expense_id = _expense_id(body)
    await _check_owner(services, expense_id, body)
    await services.store.delete(expense_id)
    return {"message": "Expense deleted successfully"}
