from __future__ import annotations

from decimal import Decimal

from ..model import MonthAttendance
from .base import PayrollCalculator


class HourlyDeductionCalculator(PayrollCalculator):
    """Deduct unworked standard hours at the employee's hourly rate."""

    @staticmethod
    def hourly_rate(base_salary: Decimal, daily_hours: Decimal, working_day_count: int) -> Decimal:
        divisor = daily_hours * working_day_count
        if divisor <= 0:
            return Decimal("0")
        return base_salary / divisor

    def deductions(self, month: MonthAttendance) -> Decimal:
        rate = self.hourly_rate(month.base_salary, month.daily_hours, month.working_day_count)
        shortfall = max(Decimal("0"), month.standard_hours - month.actual_hours)
        return min(month.base_salary, shortfall * rate)

    def daily_earnings(
        self,
        *,
        base_salary: Decimal,
        daily_hours: Decimal,
        working_day_count: int,
        worked_hours: Decimal,
        has_worked: bool,
    ) -> Decimal:
        rate = self.hourly_rate(base_salary, daily_hours, working_day_count)
        return max(Decimal("0"), worked_hours) * rate
