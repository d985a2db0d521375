"""
Tests for Fintrack data models.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from fintrack.models.transaction import (
    MonthlyTotals,
    Summary,
    Transaction,
    TransactionFields,
    TransactionPatch,
    TransactionType,
    parse_calendar_date,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionFields:
    """Tests for the create payload model."""

    def test_transaction_fields_creation(self):
        """Test TransactionFields model creation."""
        fields = TransactionFields(
            amount=Decimal("42.50"),
            type=TransactionType.EXPENSE,
            category="Groceries",
            date=date(2024, 3, 1),
        )
        assert fields.amount == Decimal("42.50")
        assert fields.note is None

    def test_strips_whitespace(self):
        """Test that whitespace is stripped from category."""
        fields = TransactionFields(amount=1, type="income", category="  Salary  ", date="2024-01-05")
        assert fields.category == "Salary"

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            TransactionFields(amount=-5, type="expense", category="Food", date="2024-01-05")

    def test_zero_amount_is_allowed(self):
        fields = TransactionFields(amount=0, type="expense", category="Food", date="2024-01-05")
        assert fields.amount == 0

    def test_rejects_boolean_amount(self):
        with pytest.raises(ValidationError):
            TransactionFields(amount=True, type="expense", category="Food", date="2024-01-05")

    def test_rejects_nan_amount(self):
        with pytest.raises(ValidationError):
            TransactionFields(amount="NaN", type="expense", category="Food", date="2024-01-05")

    def test_numeric_string_amount(self):
        fields = TransactionFields(amount=" 12.75 ", type="expense", category="Food", date="2024-01-05")
        assert fields.amount == Decimal("12.75")

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            TransactionFields(amount=1, type="transfer", category="Food", date="2024-01-05")

    def test_rejects_empty_category(self):
        with pytest.raises(ValidationError):
            TransactionFields(amount=1, type="expense", category="   ", date="2024-01-05")

    @pytest.mark.parametrize("note", ["", "   "])
    def test_blank_note_becomes_none(self, note):
        fields = TransactionFields(amount=1, type="expense", category="Food", date="2024-01-05", note=note)
        assert fields.note is None

    def test_note_is_stripped(self):
        fields = TransactionFields(amount=1, type="expense", category="Food", date="2024-01-05", note="  Lunch ")
        assert fields.note == "Lunch"

    def test_ignores_owner_and_id(self):
        """Ownership can never come from caller input."""
        fields = TransactionFields.model_validate({
            "amount": 1,
            "type": "expense",
            "category": "Food",
            "date": "2024-01-05",
            "owner": "mallory",
            "id": str(uuid4()),
        })
        assert "owner" not in fields.model_dump()
        assert "id" not in fields.model_dump()


class TestDateParsing:
    """Tests for calendar date coercion."""

    @pytest.mark.parametrize("raw", [
        "2024-01-05",
        "05-01-2024",
        "2024/01/05",
        "05/01/2024",
        "2024-01-05T18:30:00",
        "2024-01-05T18:30:00Z",
    ])
    def test_accepted_layouts(self, raw):
        assert parse_calendar_date(raw) == date(2024, 1, 5)

    def test_datetime_drops_time(self):
        assert parse_calendar_date(datetime(2024, 1, 5, 23, 59)) == date(2024, 1, 5)

    @pytest.mark.parametrize("raw", ["", "yesterday", "2024-13-45", None, 20240105])
    def test_rejected_values(self, raw):
        with pytest.raises(ValueError):
            parse_calendar_date(raw)


class TestTransactionPatch:
    """Tests for the partial update model."""

    def test_only_supplied_fields_are_changes(self):
        patch = TransactionPatch.model_validate({"amount": "15"})
        assert patch.changes() == {"amount": Decimal("15")}

    def test_rejects_null_required_field(self):
        with pytest.raises(ValidationError, match="cannot be null"):
            TransactionPatch.model_validate({"category": None})

    def test_note_may_be_cleared(self):
        patch = TransactionPatch.model_validate({"note": None})
        assert patch.changes() == {"note": None}

    def test_blank_note_clears_note(self):
        patch = TransactionPatch.model_validate({"note": "  "})
        assert patch.changes() == {"note": None}

    def test_drops_owner(self):
        patch = TransactionPatch.model_validate({"owner": "mallory", "category": "Rent"})
        assert patch.changes() == {"category": "Rent"}


class TestTransactionSerialization:
    """Tests for the boundary rendering of stored records."""

    def test_json_uses_numbers_and_camel_case(self):
        tx = Transaction(
            id=uuid4(),
            owner="alice",
            amount=Decimal("1000"),
            type=TransactionType.INCOME,
            category="Salary",
            date=date(2024, 1, 5),
            created_at=datetime(2024, 1, 5, 9, 0),
        )
        body = json.loads(tx.model_dump_json(by_alias=True))
        assert body["amount"] == 1000.0
        assert body["type"] == "income"
        assert body["date"] == "2024-01-05"
        assert "createdAt" in body

    def test_summary_aliases(self):
        body = Summary(total_income=Decimal("3"), total_expense=Decimal("1"), balance=Decimal("2")).model_dump(
            mode="json", by_alias=True
        )
        assert body == {"totalIncome": 3.0, "totalExpense": 1.0, "balance": 2.0}

    def test_monthly_totals_defaults(self):
        month = MonthlyTotals(month_label="Jan")
        assert month.income == 0
        assert month.expense == 0


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            description="Transaction created",
        )
        assert event.event_type == AuditEventType.TRANSACTION_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        tx_id = uuid4()
        event = AuditEventBuilder.transaction_created(
            transaction_id=tx_id,
            owner_id="alice",
            tx_type="expense",
            amount="42.00",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["transaction_id"] == str(tx_id)
        assert log_dict["details"]["amount"] == "42.00"

    def test_ownership_violation_is_warning(self):
        event = AuditEventBuilder.ownership_violation(
            transaction_id=uuid4(),
            owner_id="mallory",
            operation="delete",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "forbidden"

    def test_storage_error_is_error(self):
        event = AuditEventBuilder.storage_error(operation="list", error_message="timeout")
        assert event.severity == AuditSeverity.ERROR
        assert event.to_log_dict()["error_message"] == "timeout"
