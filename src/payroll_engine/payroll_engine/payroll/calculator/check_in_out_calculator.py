from __future__ import annotations

from decimal import Decimal

from ..model import MonthAttendance
from .base import PayrollCalculator


class CheckInOutCalculator(PayrollCalculator):
    """Full-day pay for every working day with a completed session, hours ignored."""

    def deductions(self, month: MonthAttendance) -> Decimal:
        count = month.working_day_count
        if count <= 0:
            return Decimal("0")

        present = len(month.present_days.intersection(month.working_days))
        absent = max(0, count - present)
        return month.base_salary * absent / count

    def daily_earnings(
        self,
        *,
        base_salary: Decimal,
        daily_hours: Decimal,
        working_day_count: int,
        worked_hours: Decimal,
        has_worked: bool,
    ) -> Decimal:
        if not has_worked or working_day_count <= 0:
            return Decimal("0")
        return base_salary / working_day_count
