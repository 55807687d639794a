from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import GeofenceKind, SalaryCalculationMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal, zone_from_row
from .model import CompanySettings, EmployeeProfile
from .repository import DirectoryRepository


class MySQLDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_employee(self, employee_id: str) -> Optional[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, company_id, user_id, name, base_salary, standard_daily_hours,
                       joining_date, remote_lat, remote_lon, remote_radius
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmployeeProfile(
                employee_id=r["employee_id"],
                company_id=r["company_id"],
                user_id=r["user_id"],
                name=r["name"],
                base_salary=to_decimal(r.get("base_salary"), default=to_decimal(0)),
                standard_daily_hours=to_decimal(r.get("standard_daily_hours")),
                joining_date=r.get("joining_date"),
                remote_zone=zone_from_row(r, "remote", GeofenceKind.REMOTE),
            )

    def get_company_settings(self, company_id: str) -> Optional[CompanySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, name, salary_calculation_mode, office_lat, office_lon, office_radius
                FROM companies
                WHERE company_id=%s
                """,
                (company_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CompanySettings(
                company_id=r["company_id"],
                name=r["name"],
                salary_calculation_mode=SalaryCalculationMode(
                    r.get("salary_calculation_mode") or SalaryCalculationMode.HOURLY_DEDUCTION.value
                ),
                office_zone=zone_from_row(r, "office", GeofenceKind.OFFICE),
            )

    def list_company_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT company_id FROM companies ORDER BY company_id")
            return [r["company_id"] for r in fetchall(cur)]
