"""
Aggregation Engine

DESIGN DECISION: Every derived figure the presentation layer shows
(totals, category breakdown, monthly series) is computed here and
nowhere else. Each view calls these functions instead of re-reducing
the transaction list itself.

The functions are pure: no I/O, no caching. Input is a transaction
sequence already scoped to one owner; it is re-reduced on every call.
All sums are Decimal so balance == total_income - total_expense exactly.
"""

from decimal import Decimal
from typing import Iterable, Optional

from fintrack.models.transaction import (
    Dashboard,
    MonthlyTotals,
    Summary,
    Transaction,
    TransactionType,
)


# Fixed English abbreviations; calendar.month_abbr follows the process locale
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

ZERO = Decimal("0")


def month_label(tx: Transaction) -> str:
    """Short, locale-independent month label for a transaction's date."""
    return MONTH_LABELS[tx.date.month - 1]


def summary(txs: Iterable[Transaction]) -> Summary:
    """
    Total income, total expense and the balance between them.

    An empty sequence yields zeros for all three.
    """
    total_income = ZERO
    total_expense = ZERO
    for tx in txs:
        if tx.type == TransactionType.INCOME:
            total_income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            total_expense += tx.amount

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
    )


def by_category(
    txs: Iterable[Transaction],
    type: Optional[TransactionType] = None,
) -> dict[str, Decimal]:
    """
    Sum of amounts per category, in first-seen order.

    Income and expense are summed together unless `type` restricts the
    input to one of them.
    """
    totals: dict[str, Decimal] = {}
    for tx in txs:
        if type is not None and tx.type != type:
            continue
        totals[tx.category] = totals.get(tx.category, ZERO) + tx.amount
    return totals


def by_month(
    txs: Iterable[Transaction],
    chronological: bool = False,
) -> list[MonthlyTotals]:
    """
    Income and expense per month label.

    Groups are keyed by the short month label alone, so the same month of
    different years shares a group. By default groups come out in the
    order their label is first met while scanning `txs`; with
    `chronological=True` they are ordered Jan..Dec.
    """
    groups: dict[str, MonthlyTotals] = {}
    for tx in txs:
        label = month_label(tx)
        group = groups.get(label)
        if group is None:
            group = groups[label] = MonthlyTotals(month_label=label)
        if tx.type == TransactionType.INCOME:
            group.income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            group.expense += tx.amount

    months = list(groups.values())
    if chronological:
        months.sort(key=lambda m: MONTH_LABELS.index(m.month_label))
    return months


def dashboard(
    txs: Iterable[Transaction],
    chronological: bool = False,
) -> Dashboard:
    """All three views over the same transaction sequence."""
    txs = list(txs)
    return Dashboard(
        summary=summary(txs),
        by_category=by_category(txs),
        by_month=by_month(txs, chronological=chronological),
    )
