"""Monthly payroll aggregation.

``calculate`` is a pure function of its arguments: it reads no clock and no
storage, and uses Decimal arithmetic so identical inputs give identical
reports.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..advances.model import Advance
from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import in_month, is_sunday, working_days_in_month
from ..core.constants import HOURS_PLACES, MONEY_PLACES
from ..core.enums import AdvanceStatus, SalaryCalculationMode, SessionStatus
from ..core.exceptions import ValidationError
from ..employees.model import EmployeeProfile
from .factory import PayrollCalculatorFactory
from .model import MonthAttendance, MonthlyPayrollReport

_ZERO = Decimal("0")


def _money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _hours(value: Decimal) -> Decimal:
    return value.quantize(HOURS_PLACES, rounding=ROUND_HALF_UP)


def counted_sessions(events: Iterable[AttendanceEvent], employee_id: str, year: int, month: int) -> list[AttendanceEvent]:
    """Completed sessions of the employee started in the month, Sundays excluded.

    Each event id is counted once.
    """
    seen: set[int] = set()
    counted: list[AttendanceEvent] = []
    for e in events:
        if e.event_id in seen:
            continue
        if e.employee_id != employee_id or e.status != SessionStatus.CHECKED_OUT:
            continue
        if not in_month(e.check_in_time, year, month) or is_sunday(e.check_in_time):
            continue
        seen.add(e.event_id)
        counted.append(e)
    return counted


def approved_advance_total(advances: Iterable[Advance], employee_id: str, year: int, month: int) -> Decimal:
    seen: set[int] = set()
    total = _ZERO
    for a in advances:
        if a.advance_id in seen:
            continue
        if a.employee_id != employee_id or a.status != AdvanceStatus.APPROVED or not a.applies_to(year, month):
            continue
        seen.add(a.advance_id)
        total += Decimal(a.amount)
    return total


def build_month_attendance(
    employee: EmployeeProfile,
    year: int,
    month: int,
    events: Iterable[AttendanceEvent],
    holidays: Iterable[date] = (),
) -> MonthAttendance:
    working_days = tuple(working_days_in_month(year, month, holidays))
    sessions = counted_sessions(events, employee.employee_id, year, month)

    daily_hours = employee.daily_hours
    base_salary = Decimal(employee.base_salary)
    if base_salary < 0:
        raise ValidationError("Base salary must not be negative")

    return MonthAttendance(
        base_salary=base_salary,
        daily_hours=daily_hours,
        working_days=working_days,
        standard_hours=daily_hours * len(working_days),
        actual_hours=sum((max(_ZERO, Decimal(e.total_hours)) for e in sessions), _ZERO),
        present_days=frozenset(e.check_in_time.date() for e in sessions),
    )


def calculate(
    employee: EmployeeProfile,
    year: int,
    month: int,
    events: Iterable[AttendanceEvent],
    policy: SalaryCalculationMode,
    approved_advances: Iterable[Advance] = (),
    holidays: Iterable[date] = (),
    *,
    factory: Optional[PayrollCalculatorFactory] = None,
) -> MonthlyPayrollReport:
    """Build the payroll report of one employee for ``(year, month)``.

    Net payable is ``base - deductions - approved advances``, never below 0.
    """
    factory = factory or PayrollCalculatorFactory()
    calculator = factory.for_mode(policy)

    attendance = build_month_attendance(employee, year, month, events, holidays)
    deductions = min(attendance.base_salary, max(_ZERO, calculator.deductions(attendance)))
    advances = approved_advance_total(approved_advances, employee.employee_id, year, month)

    deductions = _money(deductions)
    advances = _money(advances)
    net = max(_ZERO, _money(attendance.base_salary) - deductions - advances)

    return MonthlyPayrollReport(
        employee_id=employee.employee_id,
        employee_name=employee.name,
        year=int(year),
        month=int(month),
        salary_calculation_mode=SalaryCalculationMode(policy),
        base_salary=_money(attendance.base_salary),
        working_days=attendance.working_day_count,
        total_standard_hours_for_month=_hours(attendance.standard_hours),
        total_actual_hours_worked=_hours(attendance.actual_hours),
        days_present=len(attendance.present_days.intersection(attendance.working_days)),
        calculated_deductions=deductions,
        total_approved_advances=advances,
        final_net_payable=_money(net),
    )


def estimate_daily_earnings(
    employee: EmployeeProfile,
    policy: SalaryCalculationMode,
    *,
    worked_hours: Decimal,
    has_worked: bool,
    working_day_count: int,
    factory: Optional[PayrollCalculatorFactory] = None,
) -> Decimal:
    """Pay earned so far today under the company policy."""
    factory = factory or PayrollCalculatorFactory()
    calculator = factory.for_mode(policy)
    return _money(
        calculator.daily_earnings(
            base_salary=Decimal(employee.base_salary),
            daily_hours=employee.daily_hours,
            working_day_count=working_day_count,
            worked_hours=Decimal(worked_hours),
            has_worked=has_worked,
        )
    )
