"""
Composition Root for Fintrack

This module builds every long-lived component exactly once and hands
them to whoever serves requests (the HTTP app, tests, scripts).

DESIGN DECISION: The store handle is created here and injected into
LedgerService; nothing else constructs a store or reaches for a global
one. Startup and shutdown are explicit: `create_app_components` is the
startup, `AppComponents.shutdown` the shutdown.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from fintrack.audit import AuditLogger, configure_logging
from fintrack.config import Settings, get_settings
from fintrack.ledger import LedgerService
from fintrack.services.identity import IdentityVerifier, JWTIdentityVerifier
from fintrack.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerStoreInterface,
)


logger = structlog.get_logger("fintrack.orchestrator")


@dataclass
class AppComponents:
    """Everything a request handler needs, built once per process."""

    settings: Settings
    store: LedgerStoreInterface
    verifier: IdentityVerifier
    ledger: LedgerService
    audit_logger: AuditLogger

    async def shutdown(self) -> None:
        """Release the store handle."""
        await self.store.close()
        logger.info("ledger_store_closed", store=type(self.store).__name__)


def create_store(settings: Settings) -> LedgerStoreInterface:
    """Build the store selected by APP_STORAGE_BACKEND."""
    backend = settings.app.storage_backend
    if backend == "google_sheets":
        return GoogleSheetsLedgerStore(GoogleSheetsClient(settings.google_sheets))
    return InMemoryLedgerStore()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[LedgerStoreInterface] = None,
    verifier: Optional[IdentityVerifier] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to the cached environment settings.
        store: Pre-built store (tests pass an InMemoryLedgerStore).
        verifier: Pre-built verifier (tests pass one with a known secret).

    Returns:
        AppComponents wired together
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings.app.log_level)

    # Checked against None: an empty store has len() 0 and is falsy
    if store is None:
        store = create_store(settings)
    if verifier is None:
        verifier = JWTIdentityVerifier(settings=settings.auth)
    audit_logger = AuditLogger()
    ledger = LedgerService(store=store, audit_logger=audit_logger)

    logger.info(
        "app_components_created",
        store=type(store).__name__,
        verifier=type(verifier).__name__,
    )
    return AppComponents(
        settings=settings,
        store=store,
        verifier=verifier,
        ledger=ledger,
        audit_logger=audit_logger,
    )
