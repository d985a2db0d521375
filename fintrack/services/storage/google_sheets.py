"""
Google Sheets Ledger Store

DESIGN DECISION: Google Sheets is offered as a durable backend because:
1. Non-technical users can view their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No multi-row transactions (the ledger only needs single-row atomicity)
- Limited query capabilities (we filter in Python)

Establishing the connection is retried; ledger reads and writes are not.
A failed insert is surfaced as StorageError and left to the caller.

gspread calls block, so every store operation (connection retries
included) runs in a worker thread via asyncio.to_thread.
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from fintrack.config import GoogleSheetsSettings, get_settings
from fintrack.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionType,
)
from fintrack.services.storage.interface import (
    ConnectionError,
    LedgerStoreInterface,
    NotFoundError,
    StorageError,
    ledger_order,
    mutable_changes,
    utcnow,
)


# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "owner",
    "created_at",
    "date",
    "type",
    "amount",
    "category",
    "note",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.transactions_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.transactions_sheet_name,
                rows=1000,
                cols=len(TRANSACTION_COLUMNS),
            )
            sheet.append_row(TRANSACTION_COLUMNS)
        return sheet

    def close(self) -> None:
        self._spreadsheet = None
        self._client = None


class GoogleSheetsLedgerStore(LedgerStoreInterface):
    """
    Google Sheets implementation of the ledger store.

    Transactions are stored as rows in a worksheet with one transaction per
    row, appended in insertion order.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _transaction_to_row(self, tx: Transaction) -> list:
        """Convert a Transaction to a spreadsheet row."""
        return [
            str(tx.id),
            tx.owner,
            tx.created_at.isoformat(),
            tx.date.isoformat(),
            tx.type.value,
            str(tx.amount),
            tx.category,
            tx.note or "",
        ]

    def _row_to_transaction(self, row: list) -> Transaction:
        """Convert a spreadsheet row to a Transaction."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Transaction(
            id=UUID(safe_get(0)),
            owner=safe_get(1),
            created_at=datetime.fromisoformat(safe_get(2)),
            date=date.fromisoformat(safe_get(3)),
            type=TransactionType(safe_get(4)),
            amount=Decimal(safe_get(5)),
            category=safe_get(6),
            note=safe_get(7) or None,
        )

    def _data_rows(self, sheet: gspread.Worksheet) -> list[tuple[int, list]]:
        """(sheet row number, values) for every non-empty row below the header."""
        all_rows = sheet.get_all_values()
        return [
            (idx, row)
            for idx, row in enumerate(all_rows[1:], start=2)
            if row and row[0]
        ]

    # Blocking gspread work; the async methods below run these in a worker thread

    def _insert(self, tx: Transaction) -> UUID:
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(self._transaction_to_row(tx), value_input_option="RAW")
            return tx.id
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    def _find_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            for _, row in self._data_rows(sheet):
                if row[0] == str(transaction_id):
                    return self._row_to_transaction(row)
            return None
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")

    def _find_by_owner(self, owner_id: str) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            owned = [
                self._row_to_transaction(row)
                for _, row in self._data_rows(sheet)
                if len(row) > 1 and row[1] == owner_id
            ]
            return ledger_order(owned)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

    def _update_by_id(self, transaction_id: UUID, fields: dict[str, Any]) -> Transaction:
        try:
            sheet = self._client.get_transactions_sheet()
            for idx, row in self._data_rows(sheet):
                if row[0] == str(transaction_id):
                    current = self._row_to_transaction(row)
                    updated = current.model_copy(update=mutable_changes(fields))
                    sheet.update(
                        range_name=f"A{idx}",
                        values=[self._transaction_to_row(updated)],
                        value_input_option="RAW",
                    )
                    return updated

            raise NotFoundError(f"Transaction not found: {transaction_id}")
        except (NotFoundError, ConnectionError):
            raise
        except Exception as e:
            raise StorageError(f"Failed to update transaction: {e}")

    def _delete_by_id(self, transaction_id: UUID) -> None:
        try:
            sheet = self._client.get_transactions_sheet()
            for idx, row in self._data_rows(sheet):
                if row[0] == str(transaction_id):
                    sheet.delete_rows(idx)
                    return

            raise NotFoundError(f"Transaction not found: {transaction_id}")
        except (NotFoundError, ConnectionError):
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    async def insert(self, record: TransactionDraft) -> UUID:
        """Append a new transaction row."""
        tx = Transaction(
            id=uuid4(),
            created_at=utcnow(),
            **record.model_dump(),
        )
        return await asyncio.to_thread(self._insert, tx)

    async def find_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        """Retrieve a transaction by its ID."""
        return await asyncio.to_thread(self._find_by_id, transaction_id)

    async def find_by_owner(self, owner_id: str) -> list[Transaction]:
        """List one owner's transactions, newest date first."""
        return await asyncio.to_thread(self._find_by_owner, owner_id)

    async def update_by_id(
        self,
        transaction_id: UUID,
        fields: dict[str, Any],
    ) -> Transaction:
        """Rewrite one transaction row in a single range update."""
        return await asyncio.to_thread(self._update_by_id, transaction_id, fields)

    async def delete_by_id(self, transaction_id: UUID) -> None:
        """Delete a transaction row by ID."""
        await asyncio.to_thread(self._delete_by_id, transaction_id)

    async def close(self) -> None:
        self._client.close()
