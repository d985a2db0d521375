"""
Audit Logger

DESIGN DECISION: Every ledger operation is logged as a structured event.
This provides:
1. Traceability of who created, changed or removed what
2. Debugging capability
3. Visibility of rejected access (bad credentials, foreign records)

Events go to the structured local log only. The logger never raises:
a logging failure must not fail the ledger operation it describes.
"""

import logging
import sys
from typing import Optional
from uuid import UUID

import structlog

from fintrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the structured log to stdout at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger("fintrack").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service for ledger operations.
    """

    def __init__(self, logger_name: str = "fintrack.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            logging.getLogger("fintrack").exception(
                "audit log write failed for %s", log_dict["event_id"]
            )
            return False
        return True

    def log_transaction_created(
        self,
        transaction_id: UUID,
        owner_id: str,
        tx_type: str,
        amount: str,
    ) -> None:
        """Log transaction creation."""
        self.log(AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            owner_id=owner_id,
            tx_type=tx_type,
            amount=amount,
        ))

    def log_transaction_updated(
        self,
        transaction_id: UUID,
        owner_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log transaction update."""
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            owner_id=owner_id,
            changed_fields=changed_fields,
        ))

    def log_transaction_deleted(
        self,
        transaction_id: UUID,
        owner_id: str,
    ) -> None:
        """Log transaction deletion."""
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            owner_id=owner_id,
        ))

    def log_transactions_listed(self, owner_id: str, result_count: int) -> None:
        self.log(AuditEventBuilder.transactions_listed(
            owner_id=owner_id,
            result_count=result_count,
        ))

    def log_validation_failed(
        self,
        owner_id: str,
        operation: str,
        issues: list[dict],
        transaction_id: Optional[UUID] = None,
    ) -> None:
        """Log validation failure."""
        self.log(AuditEventBuilder.validation_failed(
            owner_id=owner_id,
            operation=operation,
            issues=issues,
            transaction_id=transaction_id,
        ))

    def log_ownership_violation(
        self,
        transaction_id: UUID,
        owner_id: str,
        operation: str,
    ) -> None:
        """Log an attempt to touch another owner's transaction."""
        self.log(AuditEventBuilder.ownership_violation(
            transaction_id=transaction_id,
            owner_id=owner_id,
            operation=operation,
        ))

    def log_not_found(
        self,
        transaction_id: str,
        owner_id: str,
        operation: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_not_found(
            transaction_id=transaction_id,
            owner_id=owner_id,
            operation=operation,
        ))

    def log_authentication_failed(self, error_code: str, error_message: str) -> None:
        """Log a rejected credential."""
        self.log(AuditEventBuilder.authentication_failed(
            error_code=error_code,
            error_message=error_message,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        owner_id: Optional[str] = None,
    ) -> None:
        """Log a backing store failure."""
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            owner_id=owner_id,
        ))
