"""
Ledger Service

Tenancy and validation layer around the ledger store.

CRITICAL BOUNDARIES:
1. The owner of a new record is ALWAYS the verified owner id passed in,
   never a value from the caller's fields
2. Every read or mutation of a single record checks that the record
   belongs to the caller before the store is touched
3. Field validation runs before any write; a rejected create persists
   nothing

The owner id handed to this service must come from IdentityVerifier.
"""

from typing import Any, Optional, Union
from uuid import UUID

from fintrack.aggregation import engine
from fintrack.audit import AuditLogger
from fintrack.errors import (
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from fintrack.models.transaction import (
    Dashboard,
    DeleteAck,
    Transaction,
    TransactionDraft,
)
from fintrack.services.storage import LedgerStoreInterface
from fintrack.validation import TransactionValidator


TransactionId = Union[UUID, str]


class LedgerService:
    """
    Owner-scoped CRUD over transaction records.
    """

    def __init__(
        self,
        store: LedgerStoreInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()

    def _parse_id(self, transaction_id: TransactionId, owner_id: str, operation: str) -> UUID:
        """A malformed id can never name a stored record."""
        if isinstance(transaction_id, UUID):
            return transaction_id
        try:
            return UUID(str(transaction_id))
        except ValueError:
            self._audit_logger.log_not_found(str(transaction_id), owner_id, operation)
            raise NotFoundError(f"Transaction not found: {transaction_id}")

    async def _owned_record(
        self,
        transaction_id: TransactionId,
        owner_id: str,
        operation: str,
    ) -> Transaction:
        """
        Fetch a record and enforce that `owner_id` owns it.

        Raises:
            NotFoundError: No record with this id
            ForbiddenError: Record belongs to another owner
        """
        tx_id = self._parse_id(transaction_id, owner_id, operation)
        record = await self._guard_storage(
            self._store.find_by_id(tx_id), operation, owner_id
        )
        if record is None:
            self._audit_logger.log_not_found(str(tx_id), owner_id, operation)
            raise NotFoundError(f"Transaction not found: {tx_id}")
        if record.owner != owner_id:
            self._audit_logger.log_ownership_violation(tx_id, owner_id, operation)
            raise ForbiddenError("Transaction belongs to another user")
        return record

    async def _guard_storage(self, awaitable, operation: str, owner_id: str):
        """Await a store call, logging (and re-raising) storage failures."""
        try:
            return await awaitable
        except StorageError as e:
            self._audit_logger.log_storage_error(operation, str(e), owner_id)
            raise

    def _reject(
        self,
        error: ValidationError,
        owner_id: str,
        operation: str,
        transaction_id: Optional[UUID] = None,
    ) -> None:
        self._audit_logger.log_validation_failed(
            owner_id=owner_id,
            operation=operation,
            issues=[issue.model_dump() for issue in error.issues],
            transaction_id=transaction_id,
        )

    async def create(self, owner_id: str, fields: Any) -> Transaction:
        """
        Validate and store a new transaction owned by `owner_id`.

        Raises:
            ValidationError: If any field is invalid (nothing is stored)
        """
        try:
            valid = self._validator.validate_create(fields)
        except ValidationError as e:
            self._reject(e, owner_id, "create")
            raise

        draft = TransactionDraft(owner=owner_id, **valid.model_dump())
        tx_id = await self._guard_storage(self._store.insert(draft), "create", owner_id)
        record = await self._guard_storage(self._store.find_by_id(tx_id), "create", owner_id)
        if record is None:
            raise StorageError(f"Transaction {tx_id} vanished after insert")

        self._audit_logger.log_transaction_created(
            transaction_id=record.id,
            owner_id=owner_id,
            tx_type=record.type.value,
            amount=str(record.amount),
        )
        return record

    async def list(self, owner_id: str) -> list[Transaction]:
        """All of one owner's transactions, newest date first. May be empty."""
        records = await self._guard_storage(
            self._store.find_by_owner(owner_id), "list", owner_id
        )
        self._audit_logger.log_transactions_listed(owner_id, len(records))
        return records

    async def get(self, transaction_id: TransactionId, owner_id: str) -> Transaction:
        """Fetch one transaction the caller owns."""
        return await self._owned_record(transaction_id, owner_id, "get")

    async def update(
        self,
        transaction_id: TransactionId,
        owner_id: str,
        fields: Any,
    ) -> Transaction:
        """
        Apply a partial update to a transaction the caller owns.

        Raises:
            NotFoundError: No record with this id
            ForbiddenError: Record belongs to another owner
            ValidationError: A supplied field is invalid (nothing is changed)
        """
        record = await self._owned_record(transaction_id, owner_id, "update")

        try:
            patch = self._validator.validate_update(fields)
        except ValidationError as e:
            self._reject(e, owner_id, "update", record.id)
            raise

        changes = patch.changes()
        updated = await self._guard_storage(
            self._store.update_by_id(record.id, changes), "update", owner_id
        )
        self._audit_logger.log_transaction_updated(
            transaction_id=record.id,
            owner_id=owner_id,
            changed_fields=sorted(changes),
        )
        return updated

    async def delete(self, transaction_id: TransactionId, owner_id: str) -> DeleteAck:
        """
        Delete a transaction the caller owns.

        Raises:
            NotFoundError: No record with this id
            ForbiddenError: Record belongs to another owner
        """
        record = await self._owned_record(transaction_id, owner_id, "delete")
        await self._guard_storage(self._store.delete_by_id(record.id), "delete", owner_id)
        self._audit_logger.log_transaction_deleted(record.id, owner_id)
        return DeleteAck(id=record.id)

    async def dashboard(self, owner_id: str, chronological: bool = False) -> Dashboard:
        """Summary, category and monthly views over the owner's ledger."""
        records = await self.list(owner_id)
        return engine.dashboard(records, chronological=chronological)
