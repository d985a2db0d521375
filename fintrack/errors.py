"""
Ledger Error Taxonomy

DESIGN DECISION: Every failure the ledger can produce has its own exception
class carrying a stable machine-readable ``code`` and an outward
``status_code``. Callers (and the HTTP boundary) dispatch on the class,
never on the message text.

Kinds:
- UnauthenticatedError   - no credential supplied
- InvalidCredentialError - credential malformed, expired or badly signed
- ValidationError        - transaction fields failed validation
- NotFoundError          - unknown transaction id
- ForbiddenError         - transaction belongs to another owner
- StorageError           - backing collection I/O failure (opaque, not retried)
"""

from typing import Optional

from fintrack.models.transaction import ValidationIssue


class LedgerError(Exception):
    """Base exception for every ledger failure."""

    code: str = "ledger_error"
    status_code: int = 500

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Outward error body."""
        return {
            "code": self.code,
            "message": self.message,
            "fields": [],
        }


class UnauthenticatedError(LedgerError):
    """No credential was supplied."""

    code = "unauthenticated"
    status_code = 401


class InvalidCredentialError(LedgerError):
    """Credential is malformed, expired or failed verification."""

    code = "invalid_credential"
    status_code = 401


class ValidationError(LedgerError):
    """Transaction fields failed validation."""

    code = "validation_error"
    status_code = 422

    def __init__(self, issues: list[ValidationIssue], message: Optional[str] = None):
        self.issues = issues
        if message is None:
            message = "Invalid transaction fields: " + ", ".join(self.fields)
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        """Offending field names, in the order they were found, without repeats."""
        seen: list[str] = []
        for issue in self.issues:
            if issue.field not in seen:
                seen.append(issue.field)
        return seen

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["fields"] = self.fields
        body["issues"] = [issue.model_dump() for issue in self.issues]
        return body


class NotFoundError(LedgerError):
    """Transaction not found."""

    code = "not_found"
    status_code = 404


class ForbiddenError(LedgerError):
    """Transaction belongs to another owner."""

    code = "forbidden"
    status_code = 403


class StorageError(LedgerError):
    """Backing store failed."""

    code = "store_failure"
    status_code = 503


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
