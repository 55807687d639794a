"""Calendar helpers shared by the state machine, the closer and payroll.

All datetimes handled by the engine are naive and expressed in the server's
reference timezone; ``now_local`` is the only place a clock is read.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Iterator
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError

SUNDAY = 6


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the reference timezone, tzinfo stripped.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def day_window(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[start, next_start)`` window for one calendar day."""
    start = start_of_day(day)
    return start, start + timedelta(days=1)


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open ``[first day 00:00, first day of next month 00:00)``."""
    _validate_month(year, month)
    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)


def days_in_month(year: int, month: int) -> int:
    _validate_month(year, month)
    return calendar.monthrange(year, month)[1]


def iter_month_days(year: int, month: int) -> Iterator[date]:
    for day in range(1, days_in_month(year, month) + 1):
        yield date(year, month, day)


def is_sunday(value: date | datetime) -> bool:
    return value.weekday() == SUNDAY


def working_days_in_month(year: int, month: int, holidays: Iterable[date] = ()) -> list[date]:
    """Days of the month that are neither a Sunday nor a listed holiday."""
    off = set(holidays)
    return [d for d in iter_month_days(year, month) if not is_sunday(d) and d not in off]


def in_month(value: datetime, year: int, month: int) -> bool:
    return value.year == year and value.month == month


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Signed elapsed hours between two instants, as a Decimal."""
    seconds = (end - start).total_seconds()
    return Decimal(str(seconds)) / Decimal(3600)


def format_duration(hours: Decimal | float | int) -> str:
    """Render hours as ``"Xh Ym"``; non-positive durations render ``"0m"``."""
    total_minutes = int(Decimal(str(hours)) * 60)
    if total_minutes <= 0:
        return "0m"
    h, m = divmod(total_minutes, 60)
    if h:
        return f"{h}h {m}m"
    return f"{m}m"


def _validate_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not 1 <= int(year) <= 9999:
        raise ValidationError(f"Invalid year: {year}")
