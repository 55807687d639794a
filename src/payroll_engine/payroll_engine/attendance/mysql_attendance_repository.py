from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.constants import EVENT_HOURS_PLACES
from ..core.enums import GeofenceKind, GeofenceVerdict, SessionStatus
from ..core.exceptions import CommitFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, point_from_row, point_params, to_decimal
from .model import AttendanceEvent, NewCheckIn, SessionClose
from .repository import AttendanceRepository, EventFilter

_COLUMNS = """
    event_id, company_id, employee_id, user_id, status, check_in_time, check_out_time,
    check_in_lat, check_in_lon, check_in_accuracy,
    check_out_lat, check_out_lon, check_out_accuracy,
    is_within_geofence, is_within_geofence_checkout,
    matched_geofence_type, check_out_matched_geofence_type,
    check_in_photo_ref, check_out_photo_ref,
    total_hours, work_report, needs_review, review_reason, auto_closed
"""


def _kind(value: Optional[str]) -> Optional[GeofenceKind]:
    return GeofenceKind(value) if value else None


def _row_to_event(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        company_id=r["company_id"],
        employee_id=r["employee_id"],
        user_id=r["user_id"],
        status=SessionStatus(r["status"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        check_in_location=point_from_row(r, "check_in"),
        check_out_location=point_from_row(r, "check_out"),
        is_within_geofence=GeofenceVerdict(r.get("is_within_geofence") or GeofenceVerdict.UNKNOWN.value),
        is_within_geofence_checkout=GeofenceVerdict(
            r.get("is_within_geofence_checkout") or GeofenceVerdict.UNKNOWN.value
        ),
        matched_geofence_type=_kind(r.get("matched_geofence_type")),
        check_out_matched_geofence_type=_kind(r.get("check_out_matched_geofence_type")),
        check_in_photo_ref=r.get("check_in_photo_ref"),
        check_out_photo_ref=r.get("check_out_photo_ref"),
        total_hours=to_decimal(r.get("total_hours"), default=to_decimal(0)),
        work_report=r.get("work_report"),
        needs_review=bool(r.get("needs_review")),
        review_reason=r.get("review_reason"),
        auto_closed=bool(r.get("auto_closed")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def query(self, event_filter: EventFilter) -> Sequence[AttendanceEvent]:
        clauses = ["1=1"]
        params: list[object] = []

        if event_filter.company_id is not None:
            clauses.append("company_id=%s")
            params.append(event_filter.company_id)
        if event_filter.employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(event_filter.employee_id)
        if event_filter.status is not None:
            clauses.append("status=%s")
            params.append(event_filter.status.value)
        if event_filter.check_in_from is not None:
            clauses.append("check_in_time >= %s")
            params.append(event_filter.check_in_from)
        if event_filter.check_in_before is not None:
            clauses.append("check_in_time < %s")
            params.append(event_filter.check_in_before)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE {where}
                ORDER BY check_in_time ASC, event_id ASC
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_events WHERE event_id=%s",
                (int(event_id),),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def create_checkin(self, new: NewCheckIn) -> int:
        lat, lon, accuracy = point_params(new.check_in_location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(
                    company_id, employee_id, user_id, status, check_in_time,
                    check_in_lat, check_in_lon, check_in_accuracy,
                    is_within_geofence, matched_geofence_type, check_in_photo_ref
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.company_id,
                    new.employee_id,
                    new.user_id,
                    SessionStatus.CHECKED_IN.value,
                    new.check_in_time,
                    lat,
                    lon,
                    accuracy,
                    new.is_within_geofence.value,
                    new.matched_geofence_type.value if new.matched_geofence_type else None,
                    new.check_in_photo_ref,
                ),
            )
            return int(cur.lastrowid)

    def commit_batch(self, company_id: str, closes: Sequence[SessionClose]) -> int:
        if not closes:
            return 0

        applied = 0
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for c in closes:
                    lat, lon, accuracy = point_params(c.check_out_location)
                    cur.execute(
                        """
                        UPDATE attendance_events
                        SET status=%s, check_out_time=%s, total_hours=%s, work_report=%s,
                            check_out_lat=%s, check_out_lon=%s, check_out_accuracy=%s,
                            is_within_geofence_checkout=%s, check_out_matched_geofence_type=%s,
                            check_out_photo_ref=%s, needs_review=%s, review_reason=%s, auto_closed=%s
                        WHERE event_id=%s AND company_id=%s AND status=%s
                        """,
                        (
                            SessionStatus.CHECKED_OUT.value,
                            c.check_out_time,
                            c.total_hours.quantize(EVENT_HOURS_PLACES),
                            c.work_report,
                            lat,
                            lon,
                            accuracy,
                            c.is_within_geofence_checkout.value,
                            c.check_out_matched_geofence_type.value if c.check_out_matched_geofence_type else None,
                            c.check_out_photo_ref,
                            int(c.needs_review),
                            c.review_reason,
                            int(c.auto_closed),
                            int(c.event_id),
                            company_id,
                            SessionStatus.CHECKED_IN.value,
                        ),
                    )
                    applied += cur.rowcount
        except mysql.connector.Error as e:
            raise CommitFailure(company_id, str(e)) from e
        return applied
