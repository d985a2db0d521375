"""Aggregation package: pure reductions over an owner's transactions."""

from fintrack.aggregation.engine import (
    MONTH_LABELS,
    by_category,
    by_month,
    dashboard,
    month_label,
    summary,
)

__all__ = [
    "MONTH_LABELS",
    "by_category",
    "by_month",
    "dashboard",
    "month_label",
    "summary",
]
