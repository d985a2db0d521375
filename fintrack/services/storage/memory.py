"""
In-Memory Ledger Store

The default backend for development and the one the test-suite runs on.
Not durable: the ledger lives only as long as the process, and close()
empties it.

Records live in a dict keyed by id; dicts keep insertion order, which is
what the listing tie-break relies on.

No operation awaits between reading and writing its record, so each one
is atomic on the event loop without an explicit lock.
"""

from typing import Any, Optional
from uuid import UUID, uuid4

from fintrack.models.transaction import Transaction, TransactionDraft
from fintrack.services.storage.interface import (
    LedgerStoreInterface,
    NotFoundError,
    ledger_order,
    mutable_changes,
    utcnow,
)


class InMemoryLedgerStore(LedgerStoreInterface):
    """Process-local implementation of the ledger store."""

    def __init__(self):
        self._records: dict[UUID, Transaction] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def insert(self, record: TransactionDraft) -> UUID:
        transaction_id = uuid4()
        while transaction_id in self._records:
            transaction_id = uuid4()

        self._records[transaction_id] = Transaction(
            id=transaction_id,
            created_at=utcnow(),
            **record.model_dump(),
        )
        return transaction_id

    async def find_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        record = self._records.get(transaction_id)
        return record.model_copy() if record else None

    async def find_by_owner(self, owner_id: str) -> list[Transaction]:
        owned = (tx for tx in self._records.values() if tx.owner == owner_id)
        return [tx.model_copy() for tx in ledger_order(owned)]

    async def update_by_id(
        self,
        transaction_id: UUID,
        fields: dict[str, Any],
    ) -> Transaction:
        current = self._records.get(transaction_id)
        if current is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        updated = current.model_copy(update=mutable_changes(fields))
        self._records[transaction_id] = updated
        return updated.model_copy()

    async def delete_by_id(self, transaction_id: UUID) -> None:
        if self._records.pop(transaction_id, None) is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

    async def close(self) -> None:
        """Discard every record; nothing survives shutdown."""
        self._records.clear()
