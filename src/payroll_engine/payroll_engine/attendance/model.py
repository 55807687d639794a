from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import GeofenceKind, GeofenceVerdict, SessionStatus
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in/check-out session of one employee."""

    event_id: int
    company_id: str
    employee_id: str
    user_id: str
    status: SessionStatus
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[GeoPoint] = None
    check_out_location: Optional[GeoPoint] = None
    is_within_geofence: GeofenceVerdict = GeofenceVerdict.UNKNOWN
    is_within_geofence_checkout: GeofenceVerdict = GeofenceVerdict.UNKNOWN
    matched_geofence_type: Optional[GeofenceKind] = None
    check_out_matched_geofence_type: Optional[GeofenceKind] = None
    check_in_photo_ref: Optional[str] = None
    check_out_photo_ref: Optional[str] = None
    total_hours: Decimal = Decimal("0")
    work_report: Optional[str] = None
    needs_review: bool = False
    review_reason: Optional[str] = None
    auto_closed: bool = False

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.CHECKED_IN


@dataclass(frozen=True)
class NewCheckIn:
    """Write model for a fresh CHECKED_IN session."""

    company_id: str
    employee_id: str
    user_id: str
    check_in_time: datetime
    check_in_location: Optional[GeoPoint]
    is_within_geofence: GeofenceVerdict
    matched_geofence_type: Optional[GeofenceKind]
    check_in_photo_ref: Optional[str] = None


@dataclass(frozen=True)
class SessionClose:
    """Mutation closing one session; applied only while it is still CHECKED_IN."""

    event_id: int
    check_out_time: datetime
    total_hours: Decimal
    work_report: Optional[str] = None
    check_out_location: Optional[GeoPoint] = None
    is_within_geofence_checkout: GeofenceVerdict = GeofenceVerdict.UNKNOWN
    check_out_matched_geofence_type: Optional[GeofenceKind] = None
    check_out_photo_ref: Optional[str] = None
    needs_review: bool = False
    review_reason: Optional[str] = None
    auto_closed: bool = False
