"""
Abstract Ledger Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep tenancy and validation logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
The store knows nothing about owners beyond filtering on the owner field;
ownership checks live in LedgerService.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Optional
from uuid import UUID

from fintrack.errors import ConnectionError, NotFoundError, StorageError
from fintrack.models.transaction import Transaction, TransactionDraft


class LedgerStoreInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    Any storage implementation (in-memory, Google Sheets, PostgreSQL, etc.)
    must implement these methods. Each operation is atomic for a single
    record; nothing here spans several records.
    """

    @abstractmethod
    async def insert(self, record: TransactionDraft) -> UUID:
        """
        Insert a new transaction.

        Args:
            record: Validated fields plus owner

        Returns:
            The newly assigned, store-wide unique id

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def find_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_owner(self, owner_id: str) -> list[Transaction]:
        """
        List every transaction belonging to one owner.

        Returns:
            Transactions ordered by date descending, ties broken by
            insertion order descending (newest first)
        """
        pass

    @abstractmethod
    async def update_by_id(
        self,
        transaction_id: UUID,
        fields: dict[str, Any],
    ) -> Transaction:
        """
        Apply already-validated field changes to a transaction.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_by_id(self, transaction_id: UUID) -> None:
        """
        Delete a transaction by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist
            StorageError: If the delete fails
        """
        pass

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""
        return None


# Fields a caller can never change once a record exists
IMMUTABLE_FIELDS = frozenset({"id", "owner", "created_at"})


def mutable_changes(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop identity fields from an update payload."""
    return {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}


def ledger_order(records: Iterable[Transaction]) -> list[Transaction]:
    """
    Sort for default listing: date descending, then newest insert first.

    `records` must be in insertion order. Python's sort is stable even with
    reverse=True, so reversing first puts later inserts ahead on date ties.
    """
    return sorted(reversed(list(records)), key=lambda tx: tx.date, reverse=True)


def utcnow() -> datetime:
    return datetime.utcnow()


__all__ = [
    "ConnectionError",
    "IMMUTABLE_FIELDS",
    "LedgerStoreInterface",
    "NotFoundError",
    "StorageError",
    "ledger_order",
    "mutable_changes",
    "utcnow",
]
