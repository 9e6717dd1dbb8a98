from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def parse_time_of_day(value: str) -> time:
    """Parse an HH:MM string (as produced by <input type="time">) into time."""
    v = (value or "").strip()
    try:
        return datetime.strptime(v[:5], "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Horário inválido (HH:MM): {value!r}")


def format_time_of_day(value: time) -> str:
    return value.strftime("%H:%M")


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    return time(hour=minutes // 60, minute=minutes % 60)


def day_of_week(value: date) -> int:
    """Weekday number with Sunday as 0, the convention stored in opening hours."""
    return (value.weekday() + 1) % 7


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def to_calendar_date(value: Any) -> Optional[date]:
    """Normalize a stored date field to a calendar day.

    Firestore can hand back:
    - a timestamp (DatetimeWithNanoseconds, timezone-aware UTC)
    - a plain date
    - a string, either YYYY-MM-DD or a full ISO instant
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        return parse_iso_date(value.split("T")[0].strip())

    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def to_iso_instant(value: Any) -> Optional[str]:
    """Normalize createdAt/updatedAt style fields to an ISO-8601 string."""

    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    return str(value)


def to_time_of_day(value: Any) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return parse_time_of_day(value)
    raise TypeError(f"Unsupported time value type: {type(value)!r}")
