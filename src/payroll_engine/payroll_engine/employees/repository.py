from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanySettings, EmployeeProfile


class DirectoryRepository(Protocol):
    """Repository interface for the company/employee directory.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_employee(self, employee_id: str) -> Optional[EmployeeProfile]:
        raise NotImplementedError

    def get_company_settings(self, company_id: str) -> Optional[CompanySettings]:
        raise NotImplementedError

    def list_company_ids(self) -> Sequence[str]:
        raise NotImplementedError
