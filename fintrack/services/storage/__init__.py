"""
Storage Services Package

Provides the abstract ledger store interface and its implementations.
The in-memory store is the default; Google Sheets is the durable option.
"""

from fintrack.services.storage.interface import (
    ConnectionError,
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
)
from fintrack.services.storage.memory import InMemoryLedgerStore
from fintrack.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
)

__all__ = [
    # Interfaces
    "LedgerStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
]
