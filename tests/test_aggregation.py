"""
Tests for the aggregation engine.

All figures are exact Decimals, so comparisons are by equality.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from fintrack.aggregation import engine
from fintrack.models.transaction import Transaction, TransactionType


_BASE_TIME = datetime(2024, 1, 1, 12, 0)


def tx(amount, tx_type, category, on, seq=0):
    return Transaction(
        id=uuid4(),
        owner="alice",
        amount=Decimal(str(amount)),
        type=TransactionType(tx_type),
        category=category,
        date=on,
        created_at=_BASE_TIME + timedelta(seconds=seq),
    )


class TestSummary:
    """Tests for income/expense/balance totals."""

    def test_empty_ledger_is_all_zero(self):
        result = engine.summary([])
        assert result.total_income == 0
        assert result.total_expense == 0
        assert result.balance == 0

    def test_salary_and_food(self):
        """One income and one expense in the same month."""
        txs = [
            tx(1000, "income", "Salary", date(2024, 1, 5)),
            tx(200, "expense", "Food", date(2024, 1, 20)),
        ]
        result = engine.summary(txs)
        assert result.total_income == Decimal("1000")
        assert result.total_expense == Decimal("200")
        assert result.balance == Decimal("800")

    def test_balance_is_exact(self):
        txs = [
            tx("0.1", "income", "Gift", date(2024, 2, 1)),
            tx("0.2", "income", "Gift", date(2024, 2, 2)),
            tx("0.3", "expense", "Snacks", date(2024, 2, 3)),
        ]
        result = engine.summary(txs)
        assert result.total_income == Decimal("0.3")
        assert result.balance == result.total_income - result.total_expense
        assert result.balance == 0

    def test_balance_can_go_negative(self):
        result = engine.summary([tx(50, "expense", "Rent", date(2024, 3, 1))])
        assert result.balance == Decimal("-50")


class TestByCategory:
    """Tests for the per-category breakdown."""

    def test_empty_ledger(self):
        assert engine.by_category([]) == {}

    def test_sums_per_category_in_first_seen_order(self):
        txs = [
            tx(10, "expense", "Food", date(2024, 1, 3)),
            tx(1000, "income", "Salary", date(2024, 1, 2)),
            tx(5, "expense", "Food", date(2024, 1, 1)),
        ]
        result = engine.by_category(txs)
        assert list(result) == ["Food", "Salary"]
        assert result["Food"] == Decimal("15")

    def test_income_and_expense_share_a_category(self):
        """Without a type filter both directions are summed together."""
        txs = [
            tx(30, "income", "Refunds", date(2024, 1, 1)),
            tx(20, "expense", "Refunds", date(2024, 1, 2)),
        ]
        assert engine.by_category(txs) == {"Refunds": Decimal("50")}

    def test_type_filter(self):
        txs = [
            tx(1000, "income", "Salary", date(2024, 1, 5)),
            tx(200, "expense", "Food", date(2024, 1, 20)),
        ]
        assert engine.by_category(txs, type=TransactionType.EXPENSE) == {"Food": Decimal("200")}
        assert engine.by_category(txs, type=TransactionType.INCOME) == {"Salary": Decimal("1000")}


class TestByMonth:
    """Tests for the monthly series."""

    def test_empty_ledger(self):
        assert engine.by_month([]) == []

    def test_single_month(self):
        txs = [
            tx(1000, "income", "Salary", date(2024, 1, 5)),
            tx(200, "expense", "Food", date(2024, 1, 20)),
        ]
        result = engine.by_month(txs)
        assert len(result) == 1
        assert result[0].month_label == "Jan"
        assert result[0].income == Decimal("1000")
        assert result[0].expense == Decimal("200")

    def test_first_seen_order(self):
        """Newest-first input puts the latest month first."""
        txs = [
            tx(3, "expense", "Food", date(2024, 3, 1)),
            tx(1, "expense", "Food", date(2024, 1, 1)),
            tx(2, "expense", "Food", date(2024, 2, 1)),
        ]
        assert [m.month_label for m in engine.by_month(txs)] == ["Mar", "Jan", "Feb"]

    def test_chronological_order(self):
        txs = [
            tx(3, "expense", "Food", date(2024, 3, 1)),
            tx(1, "expense", "Food", date(2024, 1, 1)),
            tx(2, "expense", "Food", date(2024, 2, 1)),
        ]
        result = engine.by_month(txs, chronological=True)
        assert [m.month_label for m in result] == ["Jan", "Feb", "Mar"]

    def test_same_month_of_different_years_merge(self):
        txs = [
            tx(100, "income", "Salary", date(2024, 1, 5)),
            tx(50, "income", "Salary", date(2023, 1, 5)),
        ]
        result = engine.by_month(txs)
        assert len(result) == 1
        assert result[0].income == Decimal("150")

    def test_labels_are_locale_independent(self):
        labels = [engine.month_label(tx(1, "income", "X", date(2024, m, 1))) for m in range(1, 13)]
        assert labels == list(engine.MONTH_LABELS)


class TestDashboard:
    """Tests for the combined view."""

    def test_dashboard_matches_individual_views(self):
        txs = [
            tx(1000, "income", "Salary", date(2024, 1, 5)),
            tx(200, "expense", "Food", date(2024, 1, 20)),
        ]
        result = engine.dashboard(iter(txs))
        assert result.summary == engine.summary(txs)
        assert result.by_category == engine.by_category(txs)
        assert result.by_month == engine.by_month(txs)

    def test_dashboard_json_shape(self):
        txs = [tx(1000, "income", "Salary", date(2024, 1, 5))]
        body = engine.dashboard(txs).model_dump(mode="json", by_alias=True)
        assert body == {
            "summary": {"totalIncome": 1000.0, "totalExpense": 0.0, "balance": 1000.0},
            "byCategory": {"Salary": 1000.0},
            "byMonth": [{"monthLabel": "Jan", "income": 1000.0, "expense": 0.0}],
        }
