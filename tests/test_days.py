from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from persistence.days import is_overdue, is_same_day, normalize_to_day, start_of_today

UTC = timezone.utc
MINUS_FIVE = timezone(timedelta(hours=-5))


def test_normalize_datetime_to_start_of_day():
    assert normalize_to_day(datetime(2024, 1, 10, 15, 30, tzinfo=UTC)) == datetime(2024, 1, 10, tzinfo=UTC)


def test_normalize_plain_date_and_naive_datetime():
    assert normalize_to_day(date(2024, 1, 10)) == datetime(2024, 1, 10, tzinfo=UTC)
    assert normalize_to_day(datetime(2024, 1, 10, 23, 59)) == datetime(2024, 1, 10, tzinfo=UTC)


def test_normalize_uses_local_calendar_day():
    # 02:00 UTC on the 11th is still the 10th five hours west.
    value = datetime(2024, 1, 11, 2, 0, tzinfo=UTC)
    assert normalize_to_day(value, MINUS_FIVE) == datetime(2024, 1, 10, 5, 0, tzinfo=UTC)
    assert normalize_to_day(date(2024, 1, 10), MINUS_FIVE) == datetime(2024, 1, 10, 5, 0, tzinfo=UTC)


def test_is_same_day():
    assert is_same_day(datetime(2024, 1, 10, 1, tzinfo=UTC), datetime(2024, 1, 10, 23, tzinfo=UTC))
    assert not is_same_day(datetime(2024, 1, 10, tzinfo=UTC), date(2024, 1, 11))


def test_overdue_is_before_start_of_today():
    now = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)
    assert start_of_today(now=now) == datetime(2024, 1, 10, tzinfo=UTC)
    assert is_overdue(datetime(2024, 1, 9, 23, 59, tzinfo=UTC), now=now)
    assert not is_overdue(datetime(2024, 1, 10, tzinfo=UTC), now=now)
