from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_STANDARD_DAILY_HOURS
from ..core.enums import SalaryCalculationMode
from ..geofence.model import Geofence


@dataclass(frozen=True)
class EmployeeProfile:
    """Domain entity: payroll-relevant view of an employee.

    Note: Plain data object, read from the company/employee directory.
    """

    employee_id: str
    company_id: str
    user_id: str
    name: str
    base_salary: Decimal
    standard_daily_hours: Optional[Decimal] = None
    joining_date: Optional[date] = None
    remote_zone: Optional[Geofence] = None

    @property
    def daily_hours(self) -> Decimal:
        """Standard daily hours, falling back to the default unless positive."""
        if self.standard_daily_hours is None:
            return DEFAULT_STANDARD_DAILY_HOURS
        hours = Decimal(self.standard_daily_hours)
        if not hours.is_finite() or hours <= 0:
            return DEFAULT_STANDARD_DAILY_HOURS
        return hours


@dataclass(frozen=True)
class CompanySettings:
    company_id: str
    name: str
    salary_calculation_mode: SalaryCalculationMode = SalaryCalculationMode.HOURLY_DEDUCTION
    office_zone: Optional[Geofence] = None
