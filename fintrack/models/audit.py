"""
Audit Models for Fintrack

Every ledger operation emits one structured audit event.
This provides:
1. Traceability of who touched which transaction
2. Context for diagnosing failed requests
3. A record of rejected access attempts (ownership, credentials)

DESIGN DECISION: Audit events are written to the structured log only.
They are not a versioned history of transactions; once a record is
updated or deleted its previous state is gone.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Kinds of ledger activity that are audited."""
    # Ledger mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Reads
    TRANSACTIONS_LISTED = "transactions_listed"

    # Rejections
    VALIDATION_FAILED = "validation_failed"
    OWNERSHIP_VIOLATION = "ownership_violation"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    AUTHENTICATION_FAILED = "authentication_failed"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    One thing that happened to (or was refused by) the ledger.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Identifier of this event"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="UTC time the event was built"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who and what
    owner_id: Optional[str] = Field(
        default=None,
        description="Verified owner performing the action"
    )
    transaction_id: Optional[UUID] = Field(
        default=None,
        description="Transaction the event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for humans"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Structured, event-specific fields"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Flatten to plain values for structlog keyword arguments.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "owner_id": self.owner_id,
            "transaction_id": str(self.transaction_id) if self.transaction_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Factory methods, one per AuditEventType, so call sites never
    assemble events by hand.

    Usage:
        event = AuditEventBuilder.transaction_created(tx_id, owner_id, "expense", "42.00")
        event = AuditEventBuilder.ownership_violation(tx_id, owner_id, "delete")
    """

    @staticmethod
    def transaction_created(
        transaction_id: UUID,
        owner_id: str,
        tx_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            owner_id=owner_id,
            transaction_id=transaction_id,
            description=f"Transaction created: {tx_type} {amount}",
            details={
                "type": tx_type,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: UUID,
        owner_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            owner_id=owner_id,
            transaction_id=transaction_id,
            description=f"Transaction updated: {', '.join(changed_fields) or 'no fields'}",
            details={
                "changed_fields": changed_fields,
            },
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: UUID,
        owner_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            owner_id=owner_id,
            transaction_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def transactions_listed(
        owner_id: str,
        result_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LISTED,
            severity=AuditSeverity.DEBUG,
            owner_id=owner_id,
            description=f"Listed {result_count} transactions",
            details={
                "result_count": result_count,
            },
        )

    @staticmethod
    def validation_failed(
        owner_id: str,
        operation: str,
        issues: list[dict],
        transaction_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            transaction_id=transaction_id,
            description=f"{operation.capitalize()} rejected with {len(issues)} issues",
            details={
                "operation": operation,
                "issues": issues,
            },
            error_code="validation_error",
        )

    @staticmethod
    def ownership_violation(
        transaction_id: UUID,
        owner_id: str,
        operation: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OWNERSHIP_VIOLATION,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            transaction_id=transaction_id,
            description=f"Refused {operation} of a transaction owned by someone else",
            details={
                "operation": operation,
            },
            error_code="forbidden",
        )

    @staticmethod
    def transaction_not_found(
        transaction_id: str,
        owner_id: str,
        operation: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_NOT_FOUND,
            severity=AuditSeverity.INFO,
            owner_id=owner_id,
            description=f"{operation.capitalize()} of unknown transaction",
            details={
                "operation": operation,
                "requested_id": transaction_id,
            },
            error_code="not_found",
        )

    @staticmethod
    def authentication_failed(
        error_code: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_FAILED,
            severity=AuditSeverity.WARNING,
            description="Credential rejected",
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        owner_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            owner_id=owner_id,
            description=f"Storage failure during {operation}",
            error_code="store_failure",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
