"""Services package."""

from fintrack.services.identity import (
    IdentityVerifier,
    JWTIdentityVerifier,
    extract_bearer_token,
)
from fintrack.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Identity
    "IdentityVerifier",
    "JWTIdentityVerifier",
    "extract_bearer_token",
    # Storage services
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
    "LedgerStoreInterface",
    "NotFoundError",
    "StorageError",
]
