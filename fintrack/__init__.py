"""
Fintrack - Source Package

A personal finance ledger: authenticated users record income and expense
transactions and read back derived totals.

DESIGN PRINCIPLES:
1. The verified identity is the only tenancy boundary
2. Fail early, fail visibly, with a distinct error for every kind of failure
3. Derived metrics come from one pure aggregation module
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Fintrack Team"
