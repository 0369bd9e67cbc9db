# services/expense_validator.py
"""
Expense / query validation

Every candidate record goes through here: HTTP bodies and LLM output alike.

Rules:
- No DB access
- No LLM calls
- No coercion of categories
- Report EVERY failing field, not just the first
"""

import math
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from core.errors import ValidationError
from models.expense import ALL_CATEGORIES, LEGACY_CATEGORIES, ExpenseCategory, ExpenseInput
from models.query import ExpenseQuery
from services.dates import first_day_of_month, parse_day, parse_timestamp

EXPENSE_CATEGORIES = tuple(c.value for c in ExpenseCategory)
QUERY_CATEGORIES = (ALL_CATEGORIES,) + EXPENSE_CATEGORIES + LEGACY_CATEGORIES

UPDATABLE_FIELDS = ("amount", "category", "date", "description")


def _error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


# -----------------------------
# Field checks
# -----------------------------
def _check_amount(value: Any, errors: List[Dict[str, str]]) -> Optional[float]:
    if value is None:
        errors.append(_error("amount", "amount is required"))
        return None
    # bool is an int subclass; "12.5" is not a number
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        errors.append(_error("amount", "amount must be a number"))
        return None
    amount = float(value)
    if math.isnan(amount) or math.isinf(amount):
        errors.append(_error("amount", "amount must be a finite number"))
        return None
    if amount < 0:
        errors.append(_error("amount", "amount must not be negative"))
        return None
    return amount


def _check_category(value: Any, errors: List[Dict[str, str]]) -> Optional[ExpenseCategory]:
    if value is None or value == "":
        errors.append(_error("category", "category is required"))
        return None
    if not isinstance(value, str) or value not in EXPENSE_CATEGORIES:
        errors.append(
            _error("category", f"category must be one of: {', '.join(EXPENSE_CATEGORIES)}")
        )
        return None
    return ExpenseCategory(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_date(value: Any, errors: List[Dict[str, str]]):
    # "" from a model that left the field empty means no date was given
    if _is_blank(value):
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        errors.append(_error("date", "date must be a parseable timestamp"))
        return None


def _check_description(value: Any, errors: List[Dict[str, str]]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(_error("description", "description must be a string"))
        return None
    return value.strip()


# -----------------------------
# Public API
# -----------------------------
def validate_expense(candidate: Mapping[str, Any]) -> ExpenseInput:
    """
    Validate a full expense candidate.
    Raises ValidationError listing every failing field.
    """
    if not isinstance(candidate, Mapping):
        raise ValidationError([_error("body", "expense must be an object")])

    errors: List[Dict[str, str]] = []
    amount = _check_amount(candidate.get("amount"), errors)
    category = _check_category(candidate.get("category"), errors)
    when = _check_date(candidate.get("date"), errors)
    description = _check_description(candidate.get("description"), errors)

    if errors:
        raise ValidationError(errors)

    return ExpenseInput(amount=amount, category=category, date=when, description=description)


def validate_expense_update(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate only the fields that were supplied (partial update).
    Returns the cleaned subset; unknown keys are dropped.
    """
    if not isinstance(candidate, Mapping):
        raise ValidationError([_error("body", "expense must be an object")])

    errors: List[Dict[str, str]] = []
    cleaned: Dict[str, Any] = {}

    if "amount" in candidate:
        cleaned["amount"] = _check_amount(candidate["amount"], errors)
    if "category" in candidate:
        cleaned["category"] = _check_category(candidate["category"], errors)
    if "date" in candidate and candidate["date"] is None:
        errors.append(_error("date", "date cannot be cleared"))
    elif not _is_blank(candidate.get("date")):
        # A blank string leaves the stored date as it is
        cleaned["date"] = _check_date(candidate["date"], errors)
    if "description" in candidate:
        cleaned["description"] = _check_description(candidate["description"], errors)

    if errors:
        raise ValidationError(errors)
    if not cleaned:
        raise ValidationError(
            [_error("body", f"supply at least one of: {', '.join(UPDATABLE_FIELDS)}")]
        )
    return cleaned


def validate_query(candidate: Mapping[str, Any], today: Optional[date] = None) -> ExpenseQuery:
    """
    Validate a spending query.
    With `today` (chat queries): missing start → first day of today's month,
    missing end → today. Without it (HTTP filters): missing dates stay open.
    Missing category → "All".
    """
    errors: List[Dict[str, str]] = []

    start = end = None
    raw_start = candidate.get("start_date")
    raw_end = candidate.get("end_date")
    try:
        if raw_start:
            start = parse_day(raw_start)
        elif today:
            start = first_day_of_month(today)
    except ValueError:
        errors.append(_error("start_date", "start_date must be a date"))
    try:
        if raw_end:
            end = parse_day(raw_end)
        elif today:
            end = today
    except ValueError:
        errors.append(_error("end_date", "end_date must be a date"))

    category = candidate.get("category") or ALL_CATEGORIES
    if category not in QUERY_CATEGORIES:
        errors.append(
            _error("category", f"category must be one of: {', '.join(QUERY_CATEGORIES)}")
        )

    if start and end and start > end:
        errors.append(_error("date_range", "start_date must not be after end_date"))

    if errors:
        raise ValidationError(errors, message="Invalid expense query")

    return ExpenseQuery(start_date=start, end_date=end, category=category)
