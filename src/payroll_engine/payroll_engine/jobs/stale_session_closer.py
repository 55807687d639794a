from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..attendance.model import AttendanceEvent, SessionClose
from ..attendance.repository import AttendanceRepository, EventFilter
from ..common.datetime_utils import start_of_day
from ..core.constants import (
    AUTO_CHECKOUT_WORK_REPORT,
    DEFAULT_CLOSER_MAX_WORKERS,
    DEFAULT_RETRY_BACKOFF_SECONDS,
    EVENT_HOURS_PLACES,
)
from ..core.enums import SessionStatus
from ..core.exceptions import CommitFailure
from ..employees.model import EmployeeProfile
from ..employees.repository import DirectoryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanyOutcome:
    company_id: str
    sessions_closed: int = 0
    sessions_skipped: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunReport:
    """Summary of one sweep; errors are collected here instead of raised."""

    run_at: datetime
    window_end: datetime
    companies_processed: int = 0
    companies_failed: list[str] = field(default_factory=list)
    sessions_closed: int = 0
    sessions_skipped: int = 0
    cancelled: bool = False
    errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "run_at": self.run_at.isoformat(),
            "window_end": self.window_end.isoformat(),
            "companies_processed": self.companies_processed,
            "companies_failed": list(self.companies_failed),
            "sessions_closed": self.sessions_closed,
            "sessions_skipped": self.sessions_skipped,
            "cancelled": self.cancelled,
            "errors": dict(self.errors),
        }


class StaleSessionCloser:
    """Daily job force-closing sessions left CHECKED_IN past midnight.

    Every session that started before today is closed at
    ``check_in + standard daily hours``. Each company's closes are committed
    as one batch; a failing company is reported and the sweep moves on.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        *,
        max_workers: int = DEFAULT_CLOSER_MAX_WORKERS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        lookback_days: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._attendance = attendance
        self._directory = directory
        self._max_workers = max(1, int(max_workers))
        self._retry_backoff_seconds = float(retry_backoff_seconds)
        self._lookback_days = lookback_days
        self._sleep = sleep

    def stale_window(self, now: datetime) -> tuple[Optional[datetime], datetime]:
        """``[from, before)`` bounds of the sweep; ``from`` is None when unbounded."""
        before = start_of_day(now.date())
        if self._lookback_days is None:
            return None, before
        return before - timedelta(days=int(self._lookback_days)), before

    def run(self, now: datetime, *, cancel: Optional[threading.Event] = None) -> RunReport:
        check_in_from, before = self.stale_window(now)
        report = RunReport(run_at=now, window_end=before)
        company_ids = list(self._directory.list_company_ids())

        logger.info("Stale-session sweep started companies=%d before=%s", len(company_ids), before.isoformat())

        def _work(company_id: str) -> Optional[CompanyOutcome]:
            # Cancellation is only honored between company batches.
            if cancel is not None and cancel.is_set():
                return None
            return self._safe_close_company(company_id, check_in_from, before)

        if self._max_workers == 1 or len(company_ids) <= 1:
            outcomes = [_work(cid) for cid in company_ids]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="stale-closer") as pool:
                outcomes = list(pool.map(_work, company_ids))

        for outcome in outcomes:
            if outcome is None:
                report.cancelled = True
                continue
            report.companies_processed += 1
            report.sessions_closed += outcome.sessions_closed
            report.sessions_skipped += outcome.sessions_skipped
            if outcome.failed:
                report.companies_failed.append(outcome.company_id)
                report.errors[outcome.company_id] = outcome.error

        logger.info(
            "Stale-session sweep finished processed=%d failed=%d closed=%d skipped=%d cancelled=%s",
            report.companies_processed,
            len(report.companies_failed),
            report.sessions_closed,
            report.sessions_skipped,
            report.cancelled,
        )
        return report

    def _safe_close_company(
        self,
        company_id: str,
        check_in_from: Optional[datetime],
        before: datetime,
    ) -> CompanyOutcome:
        try:
            return self.close_company(company_id, check_in_from=check_in_from, before=before)
        except Exception as e:
            logger.exception("Stale-session sweep failed for company=%s", company_id)
            return CompanyOutcome(company_id=company_id, error=str(e) or e.__class__.__name__)

    def close_company(
        self,
        company_id: str,
        *,
        check_in_from: Optional[datetime],
        before: datetime,
    ) -> CompanyOutcome:
        stale = self._attendance.query(
            EventFilter(
                company_id=company_id,
                status=SessionStatus.CHECKED_IN,
                check_in_from=check_in_from,
                check_in_before=before,
            )
        )
        if not stale:
            logger.info("No overdue check-ins for company %s.", company_id)
            return CompanyOutcome(company_id=company_id)

        employees: dict[str, Optional[EmployeeProfile]] = {}
        closes: list[SessionClose] = []
        seen: set[int] = set()
        skipped = 0

        for event in stale:
            if event.event_id in seen or not event.is_open:
                continue
            seen.add(event.event_id)

            if event.employee_id not in employees:
                employees[event.employee_id] = self._directory.get_employee(event.employee_id)
            employee = employees[event.employee_id]
            if employee is None:
                logger.warning("Could not find employee %s for event %s; skipping", event.employee_id, event.event_id)
                skipped += 1
                continue

            closes.append(self.synthesize_close(event, employee))

        if not closes:
            return CompanyOutcome(company_id=company_id, sessions_skipped=skipped)

        closed = self._commit_with_retry(company_id, closes)
        logger.info("Auto-closed %d session(s) for company %s", closed, company_id)
        return CompanyOutcome(company_id=company_id, sessions_closed=closed, sessions_skipped=skipped)

    @staticmethod
    def synthesize_close(event: AttendanceEvent, employee: EmployeeProfile) -> SessionClose:
        hours = employee.daily_hours
        return SessionClose(
            event_id=event.event_id,
            check_out_time=event.check_in_time + timedelta(hours=float(hours)),
            total_hours=hours.quantize(EVENT_HOURS_PLACES),
            work_report=event.work_report or AUTO_CHECKOUT_WORK_REPORT,
            auto_closed=True,
        )

    def _commit_with_retry(self, company_id: str, closes: list[SessionClose]) -> int:
        try:
            return self._attendance.commit_batch(company_id, closes)
        except CommitFailure as e:
            logger.warning(
                "Commit failed for company %s (%s); retrying in %.1fs",
                company_id,
                e,
                self._retry_backoff_seconds,
            )
        self._sleep(self._retry_backoff_seconds)
        return self._attendance.commit_batch(company_id, closes)
