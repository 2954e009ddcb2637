from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def _zone(tz: str | tzinfo) -> tzinfo:
    if not isinstance(tz, str):
        return tz
    # Avoid needing a tz database for the default.
    if tz.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(tz)


def normalize_to_day(value: datetime | date, tz: str | tzinfo = "UTC") -> datetime:
    """
    Start of the calendar day containing ``value`` in ``tz``, as an aware UTC datetime.

    Plain dates are taken as that calendar day in ``tz``; naive datetimes as UTC.
    """
    zone = _zone(tz)
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        day = aware.astimezone(zone).date()
    else:
        day = value
    return datetime(day.year, day.month, day.day, tzinfo=zone).astimezone(timezone.utc)


def is_same_day(a: datetime | date, b: datetime | date, tz: str | tzinfo = "UTC") -> bool:
    return normalize_to_day(a, tz) == normalize_to_day(b, tz)


def start_of_today(tz: str | tzinfo = "UTC", *, now: datetime | None = None) -> datetime:
    return normalize_to_day(now or datetime.now(timezone.utc), tz)


def is_overdue(value: datetime, tz: str | tzinfo = "UTC", *, now: datetime | None = None) -> bool:
    aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    return aware < start_of_today(tz, now=now)
