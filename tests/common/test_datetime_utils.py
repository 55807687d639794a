from datetime import date, datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.common.datetime_utils import (
    day_window,
    days_in_month,
    format_duration,
    hours_between,
    is_sunday,
    month_window,
    working_days_in_month,
)
from src.payroll_engine.payroll_engine.core.exceptions import ValidationError

def test_working_days_exclude_every_sunday():
    # February 2026 has 28 days and 4 Sundays.
    days = working_days_in_month(2026, 2)

    assert len(days) == 24
    assert not any(is_sunday(d) for d in days)

def test_working_days_exclude_holidays_but_ignore_holiday_on_sunday():
    holidays = [date(2026, 2, 2), date(2026, 2, 8)]  # Monday, Sunday

    days = working_days_in_month(2026, 2, holidays)

    assert len(days) == 23
    assert date(2026, 2, 2) not in days

def test_month_window_wraps_december():
    start, end = month_window(2025, 12)

    assert start == datetime(2025, 12, 1)
    assert end == datetime(2026, 1, 1)

def test_days_in_leap_february():
    assert days_in_month(2024, 2) == 29

def test_invalid_month_raises():
    with pytest.raises(ValidationError):
        month_window(2026, 13)

def test_day_window_is_half_open_across_month_end():
    start, end = day_window(date(2026, 2, 28))

    assert start == datetime(2026, 2, 28, 0, 0)
    assert end == datetime(2026, 3, 1, 0, 0)

def test_hours_between_is_signed():
    assert hours_between(datetime(2026, 1, 5, 9), datetime(2026, 1, 5, 17)) == Decimal(8)
    assert hours_between(datetime(2026, 1, 5, 9), datetime(2026, 1, 5, 8, 30)) == Decimal("-0.5")

def test_format_duration():
    assert format_duration(Decimal("8.5")) == "8h 30m"
    assert format_duration(Decimal("0.25")) == "15m"
    assert format_duration(0) == "0m"
    assert format_duration(-2) == "0m"
