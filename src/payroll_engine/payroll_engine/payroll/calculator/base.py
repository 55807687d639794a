from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import MonthAttendance


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary policies)."""

    @abstractmethod
    def deductions(self, month: MonthAttendance) -> Decimal:
        """Amount withheld from base salary for the month, within ``[0, base]``."""

        raise NotImplementedError

    @abstractmethod
    def daily_earnings(
        self,
        *,
        base_salary: Decimal,
        daily_hours: Decimal,
        working_day_count: int,
        worked_hours: Decimal,
        has_worked: bool,
    ) -> Decimal:
        """Estimated pay earned for a single day under this policy."""

        raise NotImplementedError
