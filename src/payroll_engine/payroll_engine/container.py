from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .advances.mysql_advance_repository import MySQLAdvanceRepository
from .advances.repository import AdvanceRepository
from .advances.service import AdvanceService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_CLOSER_MAX_WORKERS, DEFAULT_RETRY_BACKOFF_SECONDS, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_directory_repository import MySQLDirectoryRepository
from .employees.repository import DirectoryRepository
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .jobs.stale_session_closer import StaleSessionCloser
from .payroll.factory import PayrollCalculatorFactory
from .payroll.service import PayrollReportService


@dataclass(frozen=True)
class EngineSettings:
    tz_name: str = DEFAULT_TIMEZONE
    job_token: str = ""
    closer_max_workers: int = DEFAULT_CLOSER_MAX_WORKERS
    closer_retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    stale_lookback_days: Optional[int] = None

    @classmethod
    def from_module(cls, settings) -> "EngineSettings":
        return cls(
            tz_name=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
            job_token=str(getattr(settings, "JOB_TOKEN", "") or ""),
            closer_max_workers=int(getattr(settings, "CLOSER_MAX_WORKERS", DEFAULT_CLOSER_MAX_WORKERS)),
            closer_retry_backoff_seconds=float(
                getattr(settings, "CLOSER_RETRY_BACKOFF_SECONDS", DEFAULT_RETRY_BACKOFF_SECONDS)
            ),
            stale_lookback_days=getattr(settings, "STALE_LOOKBACK_DAYS", None),
        )


@dataclass(frozen=True)
class Container:
    settings: EngineSettings

    attendance_repo: AttendanceRepository
    directory_repo: DirectoryRepository
    advances_repo: AdvanceRepository
    holidays_repo: HolidayRepository

    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService
    advance_service: AdvanceService
    stale_session_closer: StaleSessionCloser


def build_services(
    *,
    settings: EngineSettings,
    attendance_repo: AttendanceRepository,
    directory_repo: DirectoryRepository,
    advances_repo: AdvanceRepository,
    holidays_repo: HolidayRepository,
) -> Container:
    attendance_service = AttendanceService(attendance_repo, directory_repo, tz_name=settings.tz_name)
    payroll_report_service = PayrollReportService(
        attendance_repo,
        directory_repo,
        advances_repo,
        holidays_repo,
        factory=PayrollCalculatorFactory(),
        tz_name=settings.tz_name,
    )
    advance_service = AdvanceService(advances_repo, directory_repo, tz_name=settings.tz_name)
    stale_session_closer = StaleSessionCloser(
        attendance_repo,
        directory_repo,
        max_workers=settings.closer_max_workers,
        retry_backoff_seconds=settings.closer_retry_backoff_seconds,
        lookback_days=settings.stale_lookback_days,
    )

    return Container(
        settings=settings,
        attendance_repo=attendance_repo,
        directory_repo=directory_repo,
        advances_repo=advances_repo,
        holidays_repo=holidays_repo,
        attendance_service=attendance_service,
        payroll_report_service=payroll_report_service,
        advance_service=advance_service,
        stale_session_closer=stale_session_closer,
    )


def build_container(*, db_config: dict, settings: EngineSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        settings=settings,
        attendance_repo=MySQLAttendanceRepository(conn),
        directory_repo=MySQLDirectoryRepository(conn),
        advances_repo=MySQLAdvanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
    )
