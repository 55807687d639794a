from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import month_window
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_holidays(self, company_id: str, year: int, month: int) -> Sequence[Holiday]:
        start, end = month_window(year, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, holiday_date, name
                FROM holidays
                WHERE company_id=%s AND holiday_date >= %s AND holiday_date < %s
                ORDER BY holiday_date
                """,
                (company_id, start.date(), end.date()),
            )
            return [
                Holiday(company_id=r["company_id"], holiday_date=r["holiday_date"], name=r["name"])
                for r in fetchall(cur)
            ]
