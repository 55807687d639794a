from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_int, optional_text, require_positive_decimal
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AdvanceStatus
from ..core.exceptions import AdvanceNotFound, EmployeeNotFound, ValidationError
from ..employees.repository import DirectoryRepository
from .model import Advance
from .repository import AdvanceRepository

logger = logging.getLogger(__name__)


class AdvanceService:
    """Use case: request, approve and reject salary advances."""

    def __init__(self, advances: AdvanceRepository, directory: DirectoryRepository, *, tz_name: str = DEFAULT_TIMEZONE):
        self._advances = advances
        self._directory = directory
        self._tz_name = tz_name

    def request_advance(
        self,
        *,
        employee_id: str,
        amount,
        reason: str = "",
        now: datetime | None = None,
    ) -> Advance:
        now = now or now_local(self._tz_name)
        if not self._directory.get_employee(employee_id):
            raise EmployeeNotFound(employee_id)

        value = require_positive_decimal(amount, "Amount")
        note = optional_text(reason, "Reason")
        advance_id = self._advances.create(employee_id=employee_id, amount=value, reason=note, date_requested=now)
        logger.info("Advance requested id=%s employee=%s amount=%s", advance_id, employee_id, value)
        return Advance(
            advance_id=advance_id,
            employee_id=employee_id,
            amount=value,
            reason=note,
            status=AdvanceStatus.PENDING,
            date_requested=now,
        )

    def _require_pending(self, advance_id: int) -> Advance:
        advance = self._advances.get(int(advance_id))
        if not advance:
            raise AdvanceNotFound(advance_id)
        if advance.status != AdvanceStatus.PENDING:
            raise ValidationError("Advance has already been processed")
        return advance

    def approve(
        self,
        advance_id: int,
        *,
        now: datetime | None = None,
        applies_year: Optional[int] = None,
        applies_month: Optional[int] = None,
    ) -> Advance:
        """Approve and attribute the advance to one payroll month.

        Defaults to the month of approval; an explicit month may be named.
        """
        now = now or now_local(self._tz_name)
        advance = self._require_pending(advance_id)

        applies_year = optional_int(applies_year, "Year")
        applies_month = optional_int(applies_month, "Month")
        if (applies_year is None) != (applies_month is None):
            raise ValidationError("Year and month must be given together")
        year = applies_year if applies_year is not None else now.year
        month = applies_month if applies_month is not None else now.month
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}")

        ok = self._advances.decide(
            advance_id=advance.advance_id,
            status=AdvanceStatus.APPROVED,
            date_processed=now,
            applies_year=year,
            applies_month=month,
        )
        if not ok:
            raise ValidationError("Advance has already been processed")

        logger.info("Advance approved id=%s employee=%s month=%04d-%02d", advance.advance_id, advance.employee_id, year, month)
        return Advance(
            advance_id=advance.advance_id,
            employee_id=advance.employee_id,
            amount=advance.amount,
            reason=advance.reason,
            status=AdvanceStatus.APPROVED,
            date_requested=advance.date_requested,
            date_processed=now,
            applies_year=year,
            applies_month=month,
        )

    def reject(self, advance_id: int, *, now: datetime | None = None) -> Advance:
        now = now or now_local(self._tz_name)
        advance = self._require_pending(advance_id)

        ok = self._advances.decide(advance_id=advance.advance_id, status=AdvanceStatus.REJECTED, date_processed=now)
        if not ok:
            raise ValidationError("Advance has already been processed")

        logger.info("Advance rejected id=%s employee=%s", advance.advance_id, advance.employee_id)
        return Advance(
            advance_id=advance.advance_id,
            employee_id=advance.employee_id,
            amount=advance.amount,
            reason=advance.reason,
            status=AdvanceStatus.REJECTED,
            date_requested=advance.date_requested,
            date_processed=now,
        )

    def list_for_employee(self, employee_id: str) -> Sequence[Advance]:
        return self._advances.list_for_employee(employee_id)
