"""
Date helpers

- One clock for the whole service (UTC, timezone-aware)
- Parses loosely formatted dates coming from HTTP bodies and LLM output
- Day boundaries used by the store's range filter
"""

from datetime import date, datetime, time, timezone
from typing import Any

from dateutil import parser


def utcnow() -> datetime:
    """Return the current time (system clock, UTC)."""
    return datetime.now(timezone.utc)


def get_today() -> date:
    return utcnow().date()


def parse_timestamp(value: Any) -> datetime:
    """
    Coerce a datetime, date or date string into an aware UTC datetime.
    Naive values are taken to be UTC. Raises ValueError when unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = parser.isoparse(value.strip())
        except ValueError:
            try:
                parsed = parser.parse(value.strip())
            except (ValueError, OverflowError) as e:
                raise ValueError(f"Unparseable date: {value!r}") from e
    else:
        raise ValueError(f"Unparseable date: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_day(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_timestamp(value).date()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last representable instant of the day, so 23:59:59.999 is included."""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def first_day_of_month(day: date) -> date:
    return day.replace(day=1)
