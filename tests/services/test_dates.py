# tests/services/test_dates.py

from datetime import date, datetime, timedelta, timezone

import pytest

from services.dates import end_of_day, parse_day, parse_timestamp, start_of_day


def test_naive_timestamps_are_utc():
    assert parse_timestamp("2024-05-01T10:30:00") == datetime(
        2024, 5, 1, 10, 30, tzinfo=timezone.utc
    )


def test_offsets_are_normalized_to_utc():
    parsed = parse_timestamp("2024-05-01T10:30:00+02:00")

    assert parsed == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_loose_formats_are_accepted():
    assert parse_day("May 1, 2024") == date(2024, 5, 1)


@pytest.mark.parametrize("value", ["", "yesterday-ish", 42, None])
def test_unparseable_values_raise_value_error(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_day_bounds_cover_the_whole_day():
    day = date(2026, 10, 19)

    assert start_of_day(day) == datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert end_of_day(day) >= datetime(2026, 10, 19, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert end_of_day(day) < datetime(2026, 10, 20, tzinfo=timezone.utc)
