from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AdvanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Advance
from .repository import AdvanceRepository

_COLUMNS = """
    advance_id, employee_id, amount, reason, status,
    date_requested, date_processed, applies_year, applies_month
"""


def _row_to_advance(r: Dict[str, Any]) -> Advance:
    return Advance(
        advance_id=int(r["advance_id"]),
        employee_id=r["employee_id"],
        amount=to_decimal(r["amount"]),
        reason=r.get("reason"),
        status=AdvanceStatus(r["status"]),
        date_requested=r["date_requested"],
        date_processed=r.get("date_processed"),
        applies_year=int(r["applies_year"]) if r.get("applies_year") is not None else None,
        applies_month=int(r["applies_month"]) if r.get("applies_month") is not None else None,
    )


class MySQLAdvanceRepository(AdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id: str, amount: Decimal, reason: Optional[str], date_requested: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO advances(employee_id, amount, reason, status, date_requested)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (employee_id, amount, reason, AdvanceStatus.PENDING.value, date_requested),
            )
            return int(cur.lastrowid)

    def get(self, advance_id: int) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE advance_id=%s", (int(advance_id),))
            r = fetchone(cur)
            return _row_to_advance(r) if r else None

    def decide(
        self,
        *,
        advance_id: int,
        status: AdvanceStatus,
        date_processed: datetime,
        applies_year: Optional[int] = None,
        applies_month: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE advances
                SET status=%s, date_processed=%s, applies_year=%s, applies_month=%s
                WHERE advance_id=%s AND status=%s
                """,
                (
                    status.value,
                    date_processed,
                    applies_year,
                    applies_month,
                    int(advance_id),
                    AdvanceStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_approved(self, employee_id: str, year: int, month: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM advances
                WHERE employee_id=%s AND status=%s AND applies_year=%s AND applies_month=%s
                ORDER BY advance_id
                """,
                (employee_id, AdvanceStatus.APPROVED.value, int(year), int(month)),
            )
            return [_row_to_advance(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: str, *, limit: int = 200) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM advances
                WHERE employee_id=%s
                ORDER BY date_requested DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [_row_to_advance(r) for r in fetchall(cur)]
