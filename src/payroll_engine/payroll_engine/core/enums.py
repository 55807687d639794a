from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Status of one check-in/check-out session as stored in the event log."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class AttendanceState(str, Enum):
    """Derived per-employee state for a calendar day."""

    AWAY = "AWAY"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class GeofenceKind(str, Enum):
    OFFICE = "office"
    REMOTE = "remote"


class GeofenceVerdict(str, Enum):
    """Three-way containment result; UNKNOWN means no location was supplied."""

    INSIDE = "INSIDE"
    OUTSIDE = "OUTSIDE"
    UNKNOWN = "UNKNOWN"


class SalaryCalculationMode(str, Enum):
    HOURLY_DEDUCTION = "hourly_deduction"
    CHECK_IN_OUT = "check_in_out"


class AdvanceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
