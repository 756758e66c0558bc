"""
Daily expense tracker for a Telegram mini app.

Reads transactions and categories from a shared Google Sheet, groups them by
day and feeds a per-category pie chart.
"""

from expense_tracker.domain.models import CategoryTotals, DayView, SheetCell, Transaction
from expense_tracker.errors import (
    ConfigError,
    ExpenseTrackerError,
    LedgerError,
    SheetError,
    SheetFetchError,
    SheetParseError,
)

__all__ = [
    "CategoryTotals",
    "DayView",
    "SheetCell",
    "Transaction",
    "ConfigError",
    "ExpenseTrackerError",
    "LedgerError",
    "SheetError",
    "SheetFetchError",
    "SheetParseError",
]
