from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..advances.repository import AdvanceRepository
from ..attendance.repository import AttendanceRepository, EventFilter
from ..common.datetime_utils import day_window, hours_between, month_window, now_local, working_days_in_month
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import SessionStatus
from ..core.exceptions import CompanyNotFound, EmployeeNotFound
from ..employees.repository import DirectoryRepository
from ..holidays.repository import HolidayRepository
from .aggregator import calculate, estimate_daily_earnings
from .factory import PayrollCalculatorFactory
from .model import MonthlyPayrollReport

logger = logging.getLogger(__name__)


class PayrollReportService:
    """Loads a month of inputs from the collaborators and runs the aggregator."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        advances: AdvanceRepository,
        holidays: HolidayRepository,
        *,
        factory: Optional[PayrollCalculatorFactory] = None,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._directory = directory
        self._advances = advances
        self._holidays = holidays
        self._factory = factory or PayrollCalculatorFactory()
        self._tz_name = tz_name

    def _load(self, employee_id: str):
        employee = self._directory.get_employee(employee_id)
        if not employee:
            raise EmployeeNotFound(employee_id)
        settings = self._directory.get_company_settings(employee.company_id)
        if not settings:
            raise CompanyNotFound(employee.company_id)
        return employee, settings

    def monthly_report(self, employee_id: str, year: int, month: int) -> MonthlyPayrollReport:
        employee, settings = self._load(employee_id)
        start, end = month_window(year, month)

        events = self._attendance.query(
            EventFilter(
                employee_id=employee_id,
                status=SessionStatus.CHECKED_OUT,
                check_in_from=start,
                check_in_before=end,
            )
        )
        advances = self._advances.list_approved(employee_id, year, month)
        holidays = [h.holiday_date for h in self._holidays.list_holidays(employee.company_id, year, month)]

        report = calculate(
            employee,
            year,
            month,
            events,
            settings.salary_calculation_mode,
            advances,
            holidays,
            factory=self._factory,
        )
        logger.debug(
            "Payroll report employee=%s month=%04d-%02d net=%s",
            employee_id,
            year,
            month,
            report.final_net_payable,
        )
        return report

    def estimate_today_earnings(self, employee_id: str, *, now: datetime | None = None) -> Decimal:
        now = now or now_local(self._tz_name)
        employee, settings = self._load(employee_id)

        start, end = day_window(now.date())
        events = self._attendance.query(EventFilter(employee_id=employee_id, check_in_from=start, check_in_before=end))

        worked = Decimal("0")
        for e in events:
            if e.status == SessionStatus.CHECKED_OUT:
                worked += e.total_hours
            else:
                worked += max(Decimal("0"), hours_between(e.check_in_time, now))

        holidays = [h.holiday_date for h in self._holidays.list_holidays(employee.company_id, now.year, now.month)]
        return estimate_daily_earnings(
            employee,
            settings.salary_calculation_mode,
            worked_hours=worked,
            has_worked=bool(events),
            working_day_count=len(working_days_in_month(now.year, now.month, holidays)),
            factory=self._factory,
        )
