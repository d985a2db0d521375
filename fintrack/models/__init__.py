"""
Data Models Package

This package contains all Pydantic models used in Fintrack.
All data flowing through the ledger must conform to these schemas.
"""

from fintrack.models.transaction import (
    Dashboard,
    DeleteAck,
    Identity,
    MonthlyTotals,
    Summary,
    Transaction,
    TransactionDraft,
    TransactionFields,
    TransactionPatch,
    TransactionType,
    ValidationIssue,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Dashboard",
    "DeleteAck",
    "Identity",
    "MonthlyTotals",
    "Summary",
    "Transaction",
    "TransactionDraft",
    "TransactionFields",
    "TransactionPatch",
    "TransactionType",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
