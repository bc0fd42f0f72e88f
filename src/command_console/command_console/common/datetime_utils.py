from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value, field_name: str = "date") -> Optional[date]:
    """Accept date, datetime, 'YYYY-MM-DD' or a full ISO timestamp; '' and None give None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return parse_iso_date(text[:10])
        except ValueError:
            raise ValidationError(f"{field_name} is not a valid date (YYYY-MM-DD)")
    raise ValidationError(f"{field_name} is not a valid date")


def parse_hhmm(value: str, field_name: str = "time") -> str:
    """Validate an HH:MM clock string and return it normalized."""
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").strftime("%H:%M")
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid time (HH:MM)")


def today_local() -> date:
    return now_local().date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_until(target: date, today: date) -> int:
    return (target - today).days


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)
