# FILE: services/expense_store.py
"""
Expense Store Adapter

- CRUD over the Prisma `expense` model, scoped by owner id
- Builds the Prisma "where" dict for date-range / category filtering
- Wraps every database failure in UpstreamError (no retries)

Ownership is NOT checked here; callers compare Expense.owner_id themselves.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional

from core.errors import NotFoundError, UpstreamError
from models.expense import ALL_CATEGORIES, Expense, ExpenseInput
from services.dates import end_of_day, start_of_day, utcnow

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger("expense_store")


# -----------------------------
# Helper: Prisma record -> Expense
# -----------------------------
def _to_expense(record: Any) -> Expense:
    return Expense(
        id=record.id,
        amount=record.amount,
        category=record.category,
        date=record.date,
        description=getattr(record, "description", None),
        owner_id=record.owner_id,
        created_at=record.created_at,
    )


# -----------------------------
# Helper: build Prisma "where" filter
# -----------------------------
def _build_where(
    owner_id: str,
    start_date: Optional[date],
    end_date: Optional[date],
    category: Optional[str],
) -> Dict[str, Any]:
    where: Dict[str, Any] = {"owner_id": owner_id}

    date_cond: Dict[str, Any] = {}
    if start_date:
        date_cond["gte"] = start_of_day(start_date)
    if end_date:
        date_cond["lte"] = end_of_day(end_date)
    if date_cond:
        where["date"] = date_cond

    if category and category != ALL_CATEGORIES:
        where["category"] = category

    return where


def sum_amounts(expenses: Iterable[Expense]) -> float:
    """Sum with Decimal so 0.1 + 0.2 style drift never reaches a reply."""
    return float(sum((Decimal(str(e.amount)) for e in expenses), Decimal("0")))


class ExpenseStore:
    def __init__(self, db: "Prisma", *, clock: Callable = utcnow):
        self.db = db
        self.clock = clock

    async def create(self, expense: ExpenseInput, owner_id: str) -> Expense:
        now = self.clock()
        data = {
            "id": uuid.uuid4().hex,
            "amount": expense.amount,
            "category": expense.category.value,
            "date": expense.date or now,
            "description": expense.description,
            "owner_id": owner_id,
            "created_at": now,
        }
        try:
            record = await self.db.expense.create(data=data)
        except Exception as e:
            logger.exception("[STORE_CREATE_FAILED] owner_id=%s", owner_id)
            raise UpstreamError("Unable to add expense.") from e

        logger.info(f"[EXPENSE_CREATED] id={record.id}, owner_id={owner_id}")
        return _to_expense(record)

    async def update(self, expense_id: str, fields: Dict[str, Any]) -> Expense:
        data = dict(fields)
        if "category" in data and data["category"] is not None:
            data["category"] = getattr(data["category"], "value", data["category"])
        # createdAt and owner are immutable through this path
        for key in ("id", "owner_id", "created_at"):
            data.pop(key, None)

        try:
            record = await self.db.expense.update(where={"id": expense_id}, data=data)
        except Exception as e:
            logger.exception("[STORE_UPDATE_FAILED] id=%s", expense_id)
            raise UpstreamError("Unable to update expense.") from e

        if record is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        logger.info(f"[EXPENSE_UPDATED] id={expense_id}, fields={sorted(data)}")
        return _to_expense(record)

    async def delete(self, expense_id: str) -> None:
        try:
            record = await self.db.expense.delete(where={"id": expense_id})
        except Exception as e:
            logger.exception("[STORE_DELETE_FAILED] id=%s", expense_id)
            raise UpstreamError("Unable to delete expense.") from e

        if record is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        logger.info(f"[EXPENSE_DELETED] id={expense_id}")

    async def get_by_id(self, expense_id: str) -> Optional[Expense]:
        try:
            record = await self.db.expense.find_unique(where={"id": expense_id})
        except Exception as e:
            logger.exception("[STORE_READ_FAILED] id=%s", expense_id)
            raise UpstreamError("Unable to retrieve expense.") from e
        return _to_expense(record) if record else None

    async def get(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> List[Expense]:
        """
        All of an owner's expenses, optionally narrowed to
        start_date <= date <= end_of_day(end_date) and a category.
        No pagination; ordering is whatever the database returns.
        """
        where = _build_where(owner_id, start_date, end_date, category)
        try:
            records = await self.db.expense.find_many(where=where)
        except Exception as e:
            logger.exception("[STORE_READ_FAILED] owner_id=%s", owner_id)
            raise UpstreamError("Unable to retrieve expenses.") from e

        logger.info(f"[EXPENSES_FETCHED] owner_id={owner_id}, count={len(records)}")
        return [_to_expense(r) for r in records]
