from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import AttendanceEvent, NewCheckIn, SessionClose


@dataclass(frozen=True)
class EventFilter:
    """Query filter over the attendance event log.

    ``check_in_from`` is inclusive and ``check_in_before`` exclusive.
    """

    company_id: Optional[str] = None
    employee_id: Optional[str] = None
    status: Optional[SessionStatus] = None
    check_in_from: Optional[datetime] = None
    check_in_before: Optional[datetime] = None

    def matches(self, event: AttendanceEvent) -> bool:
        if self.company_id is not None and event.company_id != self.company_id:
            return False
        if self.employee_id is not None and event.employee_id != self.employee_id:
            return False
        if self.status is not None and event.status != self.status:
            return False
        if self.check_in_from is not None and event.check_in_time < self.check_in_from:
            return False
        if self.check_in_before is not None and event.check_in_time >= self.check_in_before:
            return False
        return True


class AttendanceRepository(Protocol):
    def query(self, event_filter: EventFilter) -> Sequence[AttendanceEvent]:
        """Events matching the filter, ordered by ``check_in_time`` ascending."""

        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def create_checkin(self, new: NewCheckIn) -> int:
        raise NotImplementedError

    def commit_batch(self, company_id: str, closes: Sequence[SessionClose]) -> int:
        """Apply every close as one all-or-nothing unit.

        Each close only applies while its session is still CHECKED_IN; the
        return value is how many sessions were actually closed. Raises
        ``CommitFailure`` when the store rejects the batch.
        """

        raise NotImplementedError
