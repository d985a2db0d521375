"""
Core Data Models for Fintrack

These models define the strict schemas for all data flowing through the ledger.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear, per-field validation error messages
3. Be serializable for storage and for the HTTP boundary

DESIGN DECISION: Money is held as Decimal end to end so that derived
totals are exact (balance == income - expense, with no float drift).
It is rendered as a plain JSON number at the boundary.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


# Accepted textual date layouts, tried in order before ISO datetime parsing
DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    Combined with the (always non-negative) amount, this decides the sign
    of the contribution to the balance.
    """
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# PARSING HELPERS
# =============================================================================

def parse_calendar_date(value: Any) -> dt.date:
    """
    Coerce a user supplied value to a calendar date.

    Accepts date/datetime objects, the layouts in DATE_FORMATS, and ISO
    datetimes (the time of day is dropped).
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Date must be a calendar date such as 2024-01-05")

    s = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return dt.datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Not a calendar date: {value!r}")


def blank_to_none(value: Any) -> Any:
    """A note that is empty or only whitespace is stored as no note."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def coerce_amount(value: Any) -> Any:
    """Reject values that pydantic would otherwise coerce into a number."""
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, str):
        return value.strip()
    return value


# =============================================================================
# INPUT MODELS
# =============================================================================

class TransactionFields(BaseModel):
    """
    Caller supplied fields for a new transaction.

    Unknown keys (including any attempt to set owner, id or created_at)
    are dropped: ownership always comes from the verified identity.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    amount: Money = Field(
        ...,
        ge=0,
        description="Non-negative magnitude"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category label"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Optional free-text note"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> Any:
        return coerce_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> dt.date:
        return parse_calendar_date(v)

    @field_validator("note", mode="before")
    @classmethod
    def validate_note(cls, v: Any) -> Any:
        return blank_to_none(v)


class TransactionPatch(BaseModel):
    """
    Partial update of a transaction.

    Only the fields actually supplied are validated and applied.
    Required fields may be omitted but may not be set to null.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    amount: Optional[Money] = Field(default=None, ge=0)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    note: Optional[str] = Field(default=None, max_length=1000)
    date: Optional[dt.date] = None

    @field_validator("amount", "type", "category", "date", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> Any:
        return coerce_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        return v if v is None else parse_calendar_date(v)

    @field_validator("note", mode="before")
    @classmethod
    def validate_note(cls, v: Any) -> Any:
        return blank_to_none(v)

    def changes(self) -> dict[str, Any]:
        """The supplied fields only, as typed values."""
        return self.model_dump(exclude_unset=True)


class TransactionDraft(TransactionFields):
    """Validated fields plus the owner, ready to be inserted by a store."""

    owner: str = Field(..., min_length=1)


# =============================================================================
# STORED MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A stored ledger transaction.

    CRITICAL: owner and id never change after insertion.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(
        ...,
        description="Store-wide unique identifier"
    )
    owner: str = Field(
        ...,
        min_length=1,
        description="Identifier of the creating user"
    )
    amount: Money = Field(..., ge=0)
    type: TransactionType
    category: str = Field(..., min_length=1)
    note: Optional[str] = None
    date: dt.date
    created_at: dt.datetime = Field(
        ...,
        alias="createdAt",
        description="Insertion marker, used only to break date ties"
    )


class DeleteAck(BaseModel):
    """Acknowledgement returned after a delete."""

    id: UUID
    message: str = "Transaction deleted"


class Identity(BaseModel):
    """Verified owner identity extracted from a credential."""

    owner_id: str = Field(..., min_length=1)


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class Summary(BaseModel):
    """Income, expense and balance totals."""
    model_config = ConfigDict(populate_by_name=True)

    total_income: Money = Field(default=Decimal("0"), alias="totalIncome")
    total_expense: Money = Field(default=Decimal("0"), alias="totalExpense")
    balance: Money = Decimal("0")


class MonthlyTotals(BaseModel):
    """Income and expense accumulated for one month label."""
    model_config = ConfigDict(populate_by_name=True)

    month_label: str = Field(..., alias="monthLabel")
    income: Money = Decimal("0")
    expense: Money = Decimal("0")


class Dashboard(BaseModel):
    """All derived views for one owner."""
    model_config = ConfigDict(populate_by_name=True)

    summary: Summary
    by_category: dict[str, Money] = Field(
        default_factory=dict,
        alias="byCategory",
    )
    by_month: list[MonthlyTotals] = Field(
        default_factory=list,
        alias="byMonth",
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'null_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
