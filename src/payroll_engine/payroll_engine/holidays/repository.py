from __future__ import annotations

from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_holidays(self, company_id: str, year: int, month: int) -> Sequence[Holiday]:
        raise NotImplementedError
