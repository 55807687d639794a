from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.advances.model import Advance
from src.payroll_engine.payroll_engine.attendance.model import AttendanceEvent
from src.payroll_engine.payroll_engine.common.datetime_utils import working_days_in_month
from src.payroll_engine.payroll_engine.core.enums import AdvanceStatus, SalaryCalculationMode, SessionStatus
from src.payroll_engine.payroll_engine.core.exceptions import ValidationError
from src.payroll_engine.payroll_engine.employees.model import EmployeeProfile
from src.payroll_engine.payroll_engine.payroll.aggregator import calculate, estimate_daily_earnings
from src.payroll_engine.payroll_engine.payroll.calculator.check_in_out_calculator import CheckInOutCalculator
from src.payroll_engine.payroll_engine.payroll.calculator.hourly_deduction_calculator import HourlyDeductionCalculator
from src.payroll_engine.payroll_engine.payroll.factory import PayrollCalculatorFactory

HOURLY = SalaryCalculationMode.HOURLY_DEDUCTION
DAILY = SalaryCalculationMode.CHECK_IN_OUT


def _employee(base: str, hours: str = "8") -> EmployeeProfile:
    return EmployeeProfile(
        employee_id="EMP001",
        company_id="acme",
        user_id="uid-1",
        name="Asha",
        base_salary=Decimal(base),
        standard_daily_hours=Decimal(hours),
    )


def _session(event_id: int, day: date, hours: str = "8", employee_id: str = "EMP001") -> AttendanceEvent:
    start = datetime(day.year, day.month, day.day, 9, 0)
    return AttendanceEvent(
        event_id=event_id,
        company_id="acme",
        employee_id=employee_id,
        user_id="uid-1",
        status=SessionStatus.CHECKED_OUT,
        check_in_time=start,
        check_out_time=start + timedelta(hours=float(hours)),
        total_hours=Decimal(hours),
    )


def _full_month(year: int, month: int, hours: str = "8") -> list[AttendanceEvent]:
    return [_session(i + 1, d, hours) for i, d in enumerate(working_days_in_month(year, month, ()))]


def _advance(advance_id: int, amount: str, *, status=AdvanceStatus.APPROVED, year=2026, month=1) -> Advance:
    return Advance(
        advance_id=advance_id,
        employee_id="EMP001",
        amount=Decimal(amount),
        status=status,
        date_requested=datetime(2026, 1, 3, 10, 0),
        applies_year=year,
        applies_month=month,
    )


def test_check_in_out_pays_per_present_day():
    # March 2026 has 31 days and five Sundays: 26 working days.
    events = [_session(i + 1, date(2026, 3, d)) for i, d in enumerate((2, 3, 4, 5, 6))]

    report = calculate(_employee("26000"), 2026, 3, events, DAILY)

    assert report.working_days == 26
    assert report.days_present == 5
    assert report.calculated_deductions == Decimal("21000.00")
    assert report.final_net_payable == Decimal("5000.00")


def test_check_in_out_ignores_hours_worked():
    short = [_session(i + 1, date(2026, 3, d), hours="1") for i, d in enumerate((2, 3, 4, 5, 6))]
    long = [_session(i + 1, date(2026, 3, d), hours="11") for i, d in enumerate((2, 3, 4, 5, 6))]

    short_report = calculate(_employee("26000"), 2026, 3, short, DAILY)
    long_report = calculate(_employee("26000"), 2026, 3, long, DAILY)

    assert short_report.calculated_deductions == long_report.calculated_deductions
    assert short_report.final_net_payable == long_report.final_net_payable == Decimal("5000.00")


def test_two_sessions_on_one_day_count_as_one_present_day():
    events = [_session(1, date(2026, 3, 2), "3"), _session(2, date(2026, 3, 2), "4")]

    report = calculate(_employee("26000"), 2026, 3, events, DAILY)

    assert report.days_present == 1
    assert report.total_actual_hours_worked == Decimal("7.00")


def test_approved_advance_is_deducted_from_net():
    report = calculate(_employee("30000"), 2026, 1, _full_month(2026, 1), HOURLY, [_advance(1, "5000")])

    assert report.calculated_deductions == Decimal("0.00")
    assert report.total_approved_advances == Decimal("5000.00")
    assert report.final_net_payable == Decimal("25000.00")


def test_only_approved_advances_of_the_month_count():
    advances = [
        _advance(1, "1000"),
        _advance(1, "1000"),
        _advance(2, "700", status=AdvanceStatus.PENDING),
        _advance(3, "900", status=AdvanceStatus.REJECTED),
        _advance(4, "300", month=2),
    ]

    report = calculate(_employee("30000"), 2026, 1, _full_month(2026, 1), HOURLY, advances)

    assert report.total_approved_advances == Decimal("1000.00")
    assert report.final_net_payable == Decimal("29000.00")


def test_net_payable_never_goes_negative():
    report = calculate(_employee("30000"), 2026, 1, [], HOURLY, [_advance(1, "5000")])

    assert report.calculated_deductions == Decimal("30000.00")
    assert report.final_net_payable == Decimal("0.00")


def test_hourly_deduction_charges_the_shortfall():
    # January 2026: 27 working days * 8h = 216h; 21600 / 216 = 100 per hour.
    events = _full_month(2026, 1)
    events[0] = _session(events[0].event_id, events[0].check_in_time.date(), "6")

    report = calculate(_employee("21600"), 2026, 1, events, HOURLY)

    assert report.total_standard_hours_for_month == Decimal("216.00")
    assert report.total_actual_hours_worked == Decimal("214.00")
    assert report.calculated_deductions == Decimal("200.00")
    assert report.final_net_payable == Decimal("21400.00")


def test_overtime_does_not_produce_negative_deductions():
    report = calculate(_employee("21600"), 2026, 1, _full_month(2026, 1, hours="10"), HOURLY)

    assert report.calculated_deductions == Decimal("0.00")
    assert report.final_net_payable == Decimal("21600.00")


def test_sunday_sessions_are_not_counted():
    sunday = _session(1, date(2026, 3, 1), "8")

    report = calculate(_employee("26000"), 2026, 3, [sunday], HOURLY)

    assert report.total_actual_hours_worked == Decimal("0.00")
    assert report.days_present == 0


def test_open_sessions_and_other_months_are_ignored():
    events = [
        _session(1, date(2026, 2, 27)),
        _session(2, date(2026, 3, 2), employee_id="EMP999"),
        AttendanceEvent(
            event_id=3,
            company_id="acme",
            employee_id="EMP001",
            user_id="uid-1",
            status=SessionStatus.CHECKED_IN,
            check_in_time=datetime(2026, 3, 3, 9, 0),
        ),
    ]

    report = calculate(_employee("26000"), 2026, 3, events, DAILY)

    assert report.days_present == 0
    assert report.final_net_payable == Decimal("0.00")


def test_holidays_reduce_working_days():
    report = calculate(_employee("25000"), 2026, 3, [], DAILY, holidays=[date(2026, 3, 2), date(2026, 3, 1)])

    # Sunday holidays are already excluded.
    assert report.working_days == 25
    assert report.total_standard_hours_for_month == Decimal("200.00")


def test_report_is_deterministic():
    events = _full_month(2026, 1)[:10]
    advances = [_advance(1, "1234.56")]

    first = calculate(_employee("31000"), 2026, 1, events, HOURLY, advances)
    second = calculate(_employee("31000"), 2026, 1, list(reversed(events)), HOURLY, advances)

    assert first == second
    assert first.to_dict()["final_net_payable"] == str(first.final_net_payable)


def test_invalid_month_is_rejected():
    with pytest.raises(ValidationError):
        calculate(_employee("30000"), 2026, 13, [], HOURLY)


def test_factory_picks_calculator_by_mode():
    factory = PayrollCalculatorFactory()

    assert isinstance(factory.for_mode("hourly_deduction"), HourlyDeductionCalculator)
    assert isinstance(factory.for_mode(DAILY), CheckInOutCalculator)
    with pytest.raises(ValidationError):
        factory.for_mode("per_minute")


def test_estimated_daily_earnings_per_policy():
    employee = _employee("21600")

    hourly = estimate_daily_earnings(employee, HOURLY, worked_hours=Decimal("4"), has_worked=True, working_day_count=27)
    daily = estimate_daily_earnings(employee, DAILY, worked_hours=Decimal("4"), has_worked=True, working_day_count=27)
    idle = estimate_daily_earnings(employee, DAILY, worked_hours=Decimal("0"), has_worked=False, working_day_count=27)

    assert hourly == Decimal("400.00")
    assert daily == Decimal("800.00")
    assert idle == Decimal("0.00")


def test_repeated_event_is_counted_once():
    session = _session(1, date(2026, 3, 2))

    report = calculate(_employee("26000"), 2026, 3, [session, session], HOURLY)

    assert report.total_actual_hours_worked == Decimal("8.00")
    assert report.days_present == 1


def test_negative_standard_hours_use_the_default():
    report = calculate(_employee("26000", hours="-2"), 2026, 3, [], HOURLY)

    assert report.total_standard_hours_for_month == Decimal("208.00")
    assert report.calculated_deductions == Decimal("26000.00")
