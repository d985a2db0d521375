"""Ledger package: tenancy-enforcing service over the transaction store."""

from fintrack.ledger.service import LedgerService

__all__ = ["LedgerService"]
