from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.attendance.service import AttendanceService
from src.payroll_engine.payroll_engine.core.enums import (
    AttendanceState,
    GeofenceKind,
    GeofenceVerdict,
    SalaryCalculationMode,
    SessionStatus,
)
from src.payroll_engine.payroll_engine.core.exceptions import AlreadyCheckedIn, EmployeeNotFound, NoOpenSession
from src.payroll_engine.payroll_engine.employees.model import CompanySettings, EmployeeProfile
from src.payroll_engine.payroll_engine.geofence.model import GeoPoint, Geofence
from tests.fakes import InMemoryAttendance, InMemoryDirectory

OFFICE = Geofence(kind=GeofenceKind.OFFICE, center=GeoPoint(12.9716, 77.5946), radius_meters=200)
HOME = Geofence(kind=GeofenceKind.REMOTE, center=GeoPoint(13.0827, 80.2707), radius_meters=100)
AT_OFFICE = GeoPoint(12.9716, 77.5946, accuracy=12)
FAR_AWAY = GeoPoint(28.6139, 77.2090, accuracy=30)


def _setup(*, remote_zone=None):
    employee = EmployeeProfile(
        employee_id="EMP001",
        company_id="acme",
        user_id="uid-1",
        name="Asha",
        base_salary=Decimal("30000"),
        standard_daily_hours=Decimal("8"),
        remote_zone=remote_zone,
    )
    company = CompanySettings(
        company_id="acme",
        name="Acme",
        salary_calculation_mode=SalaryCalculationMode.HOURLY_DEDUCTION,
        office_zone=OFFICE,
    )
    repo = InMemoryAttendance()
    svc = AttendanceService(repo, InMemoryDirectory([employee], [company]))
    return svc, repo


def test_check_in_then_check_out_records_eight_hours():
    svc, repo = _setup()

    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0), location=AT_OFFICE)
    event = svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 17, 0), location=AT_OFFICE, work_report="Done")

    assert event.status == SessionStatus.CHECKED_OUT
    assert event.total_hours == Decimal("8")
    assert event.work_report == "Done"
    assert event.needs_review is False
    stored = repo.get_by_id(event.event_id)
    assert stored.status == SessionStatus.CHECKED_OUT
    assert stored.check_out_time == datetime(2026, 1, 5, 17, 0)
    assert event == stored


def test_check_in_without_location_is_recorded_as_unknown():
    svc, repo = _setup()

    event = svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0), location=None)

    assert event.is_within_geofence == GeofenceVerdict.UNKNOWN
    assert event.matched_geofence_type is None
    assert repo.get_by_id(event.event_id).status == SessionStatus.CHECKED_IN


def test_second_check_in_is_rejected_while_session_open():
    svc, _ = _setup()
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0))

    with pytest.raises(AlreadyCheckedIn):
        svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 10, 0))


def test_check_out_without_open_session_fails():
    svc, _ = _setup()

    with pytest.raises(NoOpenSession):
        svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 17, 0))


def test_unknown_employee_cannot_check_in():
    svc, _ = _setup()

    with pytest.raises(EmployeeNotFound):
        svc.record_check_in("NOPE", now=datetime(2026, 1, 5, 9, 0))


def test_checkout_verdict_is_independent_of_check_in_verdict():
    svc, _ = _setup()

    check_in = svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0), location=AT_OFFICE)
    check_out = svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 18, 0), location=FAR_AWAY)

    assert check_in.is_within_geofence == GeofenceVerdict.INSIDE
    assert check_in.matched_geofence_type == GeofenceKind.OFFICE
    assert check_out.is_within_geofence == GeofenceVerdict.INSIDE
    assert check_out.is_within_geofence_checkout == GeofenceVerdict.OUTSIDE


def test_remote_zone_validates_check_in_at_home():
    svc, _ = _setup(remote_zone=HOME)

    event = svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0), location=HOME.center)

    assert event.is_within_geofence == GeofenceVerdict.INSIDE
    assert event.matched_geofence_type == GeofenceKind.REMOTE


def test_clock_skew_clamps_hours_and_flags_for_review():
    svc, _ = _setup()
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0))

    event = svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 8, 55))

    assert event.status == SessionStatus.CHECKED_OUT
    assert event.total_hours == Decimal("0")
    assert event.needs_review is True
    assert event.review_reason == "clock_skew"


def test_checkout_loses_race_against_closer():
    svc, repo = _setup()
    opened = svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0))

    original_commit = repo.commit_batch

    def closer_wins(company_id, closes):
        # Another writer closes the session between the read and our write.
        current = repo.get_by_id(opened.event_id)
        repo.add(replace(current, status=SessionStatus.CHECKED_OUT, total_hours=Decimal("8"), auto_closed=True))
        return original_commit(company_id, closes)

    repo.commit_batch = closer_wins

    with pytest.raises(NoOpenSession):
        svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 18, 0))
    assert repo.get_by_id(opened.event_id).auto_closed is True


def test_current_state_follows_the_day():
    svc, _ = _setup()
    monday_morning = datetime(2026, 1, 5, 8, 0)

    assert svc.current_state("EMP001", now=monday_morning) == AttendanceState.AWAY

    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0))
    assert svc.current_state("EMP001", now=datetime(2026, 1, 5, 12, 0)) == AttendanceState.CHECKED_IN

    svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 17, 0))
    assert svc.current_state("EMP001", now=datetime(2026, 1, 5, 18, 0)) == AttendanceState.CHECKED_OUT
    assert svc.current_state("EMP001", now=datetime(2026, 1, 6, 8, 0)) == AttendanceState.AWAY


def test_new_cycle_can_start_the_next_day():
    svc, repo = _setup()
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0))
    svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 17, 0))

    svc.record_check_in("EMP001", now=datetime(2026, 1, 6, 9, 0))

    assert [e.status for e in repo.all()] == [SessionStatus.CHECKED_OUT, SessionStatus.CHECKED_IN]


def test_today_summary_adds_live_session_hours():
    svc, _ = _setup()
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 8, 0))
    svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 12, 0))
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 13, 0))

    summary = svc.today_summary("EMP001", now=datetime(2026, 1, 5, 14, 30))

    assert summary.state == AttendanceState.CHECKED_IN
    assert summary.completed_hours == Decimal("4")
    assert summary.live_hours == Decimal("1.5")
    assert summary.total_hours == Decimal("5.5")


def test_geofence_compliance_counts_each_verdict():
    svc, _ = _setup()
    svc.record_check_in("EMP001", now=datetime(2026, 1, 5, 9, 0), location=AT_OFFICE)
    svc.record_check_out("EMP001", now=datetime(2026, 1, 5, 17, 0), location=FAR_AWAY)
    svc.record_check_in("EMP001", now=datetime(2026, 1, 6, 9, 0), location=None)
    svc.record_check_out("EMP001", now=datetime(2026, 1, 6, 17, 0), location=AT_OFFICE)
    svc.record_check_in("EMP001", now=datetime(2026, 1, 7, 9, 0), location=FAR_AWAY)

    stats = svc.geofence_compliance("EMP001", start=date(2026, 1, 5), end=date(2026, 1, 7))

    assert (stats.check_in_inside, stats.check_in_outside, stats.check_in_unknown) == (1, 1, 1)
    assert (stats.check_out_inside, stats.check_out_outside, stats.check_out_unknown) == (1, 1, 0)
