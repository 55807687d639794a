from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.enums import SalaryCalculationMode


@dataclass(frozen=True)
class MonthAttendance:
    """Everything a salary policy needs about one employee's month."""

    base_salary: Decimal
    daily_hours: Decimal
    working_days: tuple[date, ...]
    standard_hours: Decimal
    actual_hours: Decimal
    present_days: frozenset[date]

    @property
    def working_day_count(self) -> int:
        return len(self.working_days)


@dataclass(frozen=True)
class MonthlyPayrollReport:
    """Read-model: derived on demand, never persisted by the engine."""

    employee_id: str
    employee_name: str
    year: int
    month: int
    salary_calculation_mode: SalaryCalculationMode
    base_salary: Decimal
    working_days: int
    total_standard_hours_for_month: Decimal
    total_actual_hours_worked: Decimal
    days_present: int
    calculated_deductions: Decimal
    total_approved_advances: Decimal
    final_net_payable: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "year": self.year,
            "month": self.month,
            "salary_calculation_mode": self.salary_calculation_mode.value,
            "base_salary": str(self.base_salary),
            "working_days": self.working_days,
            "total_standard_hours_for_month": str(self.total_standard_hours_for_month),
            "total_actual_hours_worked": str(self.total_actual_hours_worked),
            "days_present": self.days_present,
            "calculated_deductions": str(self.calculated_deductions),
            "total_approved_advances": str(self.total_approved_advances),
            "final_net_payable": str(self.final_net_payable),
        }
