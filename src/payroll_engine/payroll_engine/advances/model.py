from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AdvanceStatus


@dataclass(frozen=True)
class Advance:
    """Salary advance request.

    ``applies_year``/``applies_month`` name the payroll month the advance is
    deducted from; they are stamped when the advance is approved.
    """

    advance_id: int
    employee_id: str
    amount: Decimal
    status: AdvanceStatus
    date_requested: datetime
    reason: Optional[str] = None
    date_processed: Optional[datetime] = None
    applies_year: Optional[int] = None
    applies_month: Optional[int] = None

    def applies_to(self, year: int, month: int) -> bool:
        return self.applies_year == year and self.applies_month == month
