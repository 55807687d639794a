from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AdvanceStatus
from .model import Advance


class AdvanceRepository(Protocol):
    def create(self, *, employee_id: str, amount: Decimal, reason: Optional[str], date_requested: datetime) -> int:
        raise NotImplementedError

    def get(self, advance_id: int) -> Optional[Advance]:
        raise NotImplementedError

    def decide(
        self,
        *,
        advance_id: int,
        status: AdvanceStatus,
        date_processed: datetime,
        applies_year: Optional[int] = None,
        applies_month: Optional[int] = None,
    ) -> bool:
        """Move a PENDING advance to ``status``; False if it was not pending."""

        raise NotImplementedError

    def list_approved(self, employee_id: str, year: int, month: int) -> Sequence[Advance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str, *, limit: int = 200) -> Sequence[Advance]:
        raise NotImplementedError
