from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import day_window, hours_between, now_local, start_of_day
from ..common.validators import optional_text
from ..core.constants import DEFAULT_TIMEZONE, EVENT_HOURS_PLACES, REVIEW_REASON_CLOCK_SKEW
from ..core.enums import AttendanceState, GeofenceVerdict, SessionStatus
from ..core.exceptions import AlreadyCheckedIn, EmployeeNotFound, NoOpenSession, ValidationError
from ..employees.model import EmployeeProfile
from ..employees.repository import DirectoryRepository
from ..geofence.evaluator import evaluate
from ..geofence.model import GeoPoint, Geofence
from .model import AttendanceEvent, NewCheckIn, SessionClose
from .repository import AttendanceRepository, EventFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodaySummary:
    employee_id: str
    state: AttendanceState
    completed_hours: Decimal
    live_hours: Decimal
    open_check_in_time: Optional[datetime] = None

    @property
    def total_hours(self) -> Decimal:
        return self.completed_hours + self.live_hours


@dataclass(frozen=True)
class GeofenceCompliance:
    check_in_inside: int = 0
    check_in_outside: int = 0
    check_in_unknown: int = 0
    check_out_inside: int = 0
    check_out_outside: int = 0
    check_out_unknown: int = 0


class AttendanceService:
    """Per-employee attendance state machine: Away -> CheckedIn -> CheckedOut.

    State is never cached in memory; every operation re-reads the event log.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        *,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._directory = directory
        self._tz_name = tz_name

    def _require_employee(self, employee_id: str) -> EmployeeProfile:
        employee = self._directory.get_employee(employee_id)
        if not employee:
            raise EmployeeNotFound(employee_id)
        return employee

    def applicable_zones(self, employee: EmployeeProfile) -> list[Geofence]:
        """Company office zone plus the employee's personal remote zone."""
        zones: list[Geofence] = []
        settings = self._directory.get_company_settings(employee.company_id)
        if settings and settings.office_zone:
            zones.append(settings.office_zone)
        if employee.remote_zone:
            zones.append(employee.remote_zone)
        return zones

    def get_open_session(self, employee_id: str) -> Optional[AttendanceEvent]:
        rows = self._attendance.query(EventFilter(employee_id=employee_id, status=SessionStatus.CHECKED_IN))
        if not rows:
            return None
        return max(rows, key=lambda e: (e.check_in_time, e.event_id))

    def record_check_in(
        self,
        employee_id: str,
        *,
        now: datetime | None = None,
        location: Optional[GeoPoint] = None,
        evidence_photo_ref: Optional[str] = None,
    ) -> AttendanceEvent:
        now = now or now_local(self._tz_name)
        employee = self._require_employee(employee_id)

        if self.get_open_session(employee_id):
            raise AlreadyCheckedIn("You are already checked in")

        result = evaluate(location, self.applicable_zones(employee))
        if result.verdict == GeofenceVerdict.OUTSIDE:
            logger.warning("Check-in outside geofence employee=%s distances=%s", employee_id, result.distances)

        new = NewCheckIn(
            company_id=employee.company_id,
            employee_id=employee.employee_id,
            user_id=employee.user_id,
            check_in_time=now,
            check_in_location=location,
            is_within_geofence=result.verdict,
            matched_geofence_type=result.matched_kind,
            check_in_photo_ref=optional_text(evidence_photo_ref, "photo_ref"),
        )
        event_id = self._attendance.create_checkin(new)
        logger.info("Checked in employee=%s event=%s verdict=%s", employee_id, event_id, result.verdict.value)

        return AttendanceEvent(
            event_id=event_id,
            company_id=new.company_id,
            employee_id=new.employee_id,
            user_id=new.user_id,
            status=SessionStatus.CHECKED_IN,
            check_in_time=now,
            check_in_location=location,
            is_within_geofence=result.verdict,
            matched_geofence_type=result.matched_kind,
            check_in_photo_ref=new.check_in_photo_ref,
        )

    def record_check_out(
        self,
        employee_id: str,
        *,
        now: datetime | None = None,
        location: Optional[GeoPoint] = None,
        evidence_photo_ref: Optional[str] = None,
        work_report: Optional[str] = None,
    ) -> AttendanceEvent:
        now = now or now_local(self._tz_name)
        employee = self._require_employee(employee_id)

        session = self.get_open_session(employee_id)
        if not session:
            raise NoOpenSession("You have not checked in")

        needs_review = False
        review_reason = None
        elapsed = hours_between(session.check_in_time, now)
        if elapsed < 0:
            logger.warning(
                "Clock skew on checkout employee=%s event=%s check_in=%s now=%s",
                employee_id,
                session.event_id,
                session.check_in_time.isoformat(),
                now.isoformat(),
            )
            elapsed = Decimal("0")
            needs_review = True
            review_reason = REVIEW_REASON_CLOCK_SKEW

        result = evaluate(location, self.applicable_zones(employee))
        if result.verdict == GeofenceVerdict.OUTSIDE:
            logger.warning("Check-out outside geofence employee=%s distances=%s", employee_id, result.distances)

        close = SessionClose(
            event_id=session.event_id,
            check_out_time=now,
            total_hours=elapsed.quantize(EVENT_HOURS_PLACES),
            work_report=optional_text(work_report, "work_report"),
            check_out_location=location,
            is_within_geofence_checkout=result.verdict,
            check_out_matched_geofence_type=result.matched_kind,
            check_out_photo_ref=optional_text(evidence_photo_ref, "photo_ref"),
            needs_review=needs_review,
            review_reason=review_reason,
        )

        # Conditional on CHECKED_IN: a concurrent closer run may have won.
        applied = self._attendance.commit_batch(session.company_id, [close])
        if applied == 0:
            raise NoOpenSession("This session has already been closed")

        logger.info(
            "Checked out employee=%s event=%s hours=%s verdict=%s",
            employee_id,
            session.event_id,
            close.total_hours,
            result.verdict.value,
        )
        return self._attendance.get_by_id(session.event_id)

    def events_for_day(self, employee_id: str, day: date) -> list[AttendanceEvent]:
        start, end = day_window(day)
        return list(
            self._attendance.query(EventFilter(employee_id=employee_id, check_in_from=start, check_in_before=end))
        )

    def current_state(self, employee_id: str, *, now: datetime | None = None) -> AttendanceState:
        now = now or now_local(self._tz_name)
        events = self.events_for_day(employee_id, now.date())
        if not events:
            return AttendanceState.AWAY

        latest = max(events, key=lambda e: (e.check_in_time, e.event_id))
        if latest.status == SessionStatus.CHECKED_IN:
            return AttendanceState.CHECKED_IN
        return AttendanceState.CHECKED_OUT

    def today_summary(self, employee_id: str, *, now: datetime | None = None) -> TodaySummary:
        now = now or now_local(self._tz_name)
        events = self.events_for_day(employee_id, now.date())

        completed = sum(
            (e.total_hours for e in events if e.status == SessionStatus.CHECKED_OUT),
            Decimal("0"),
        )
        open_sessions = [e for e in events if e.is_open]
        live = Decimal("0")
        open_check_in = None
        if open_sessions:
            open_check_in = max(e.check_in_time for e in open_sessions)
            live = max(Decimal("0"), hours_between(open_check_in, now))

        return TodaySummary(
            employee_id=employee_id,
            state=self.current_state(employee_id, now=now),
            completed_hours=completed.quantize(EVENT_HOURS_PLACES),
            live_hours=live.quantize(EVENT_HOURS_PLACES),
            open_check_in_time=open_check_in,
        )

    def geofence_compliance(self, employee_id: str, *, start: date, end: date) -> GeofenceCompliance:
        """Count inside/outside/unknown verdicts for sessions started in ``[start, end]``."""
        if end < start:
            raise ValidationError("End date must not be before start date")

        events = self._attendance.query(
            EventFilter(
                employee_id=employee_id,
                check_in_from=start_of_day(start),
                check_in_before=start_of_day(end + timedelta(days=1)),
            )
        )

        counts = {
            "check_in": {v: 0 for v in GeofenceVerdict},
            "check_out": {v: 0 for v in GeofenceVerdict},
        }
        for e in events:
            counts["check_in"][e.is_within_geofence] += 1
            if e.status == SessionStatus.CHECKED_OUT:
                counts["check_out"][e.is_within_geofence_checkout] += 1

        return GeofenceCompliance(
            check_in_inside=counts["check_in"][GeofenceVerdict.INSIDE],
            check_in_outside=counts["check_in"][GeofenceVerdict.OUTSIDE],
            check_in_unknown=counts["check_in"][GeofenceVerdict.UNKNOWN],
            check_out_inside=counts["check_out"][GeofenceVerdict.INSIDE],
            check_out_outside=counts["check_out"][GeofenceVerdict.OUTSIDE],
            check_out_unknown=counts["check_out"][GeofenceVerdict.UNKNOWN],
        )
