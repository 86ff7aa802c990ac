from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..core.enums import DayOfWeek
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def iter_weekday_dates(day_of_week: DayOfWeek, start: date, end: date) -> Iterator[date]:
    """Yield every date in [start, end] falling on ``day_of_week``."""
    offset = (day_of_week.index - start.weekday()) % 7
    current = start + timedelta(days=offset)
    while current <= end:
        yield current
        current += timedelta(days=7)
