class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AlreadyCheckedIn(ValidationError):
    """Raised when an employee checks in while a session is still open."""


class NoOpenSession(ValidationError):
    """Raised when an employee checks out without an open session."""


class EmployeeNotFound(DomainError):
    """Raised when an employee record cannot be resolved."""

    def __init__(self, employee_id: str):
        super().__init__(f"Employee {employee_id!r} not found")
        self.employee_id = employee_id


class CompanyNotFound(DomainError):
    def __init__(self, company_id: str):
        super().__init__(f"Company {company_id!r} not found")
        self.company_id = company_id


class AdvanceNotFound(DomainError):
    def __init__(self, advance_id: int):
        super().__init__(f"Advance {advance_id!r} not found")
        self.advance_id = advance_id


class CommitFailure(DomainError):
    """Raised when the storage layer rejects a batch write."""

    def __init__(self, company_id: str, message: str):
        super().__init__(f"Commit failed for company {company_id!r}: {message}")
        self.company_id = company_id
