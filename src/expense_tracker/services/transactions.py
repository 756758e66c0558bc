"""
Transaction building: raw sheet rows -> canonical Transaction list.

Column layout of the transactions sheet (fixed by convention):
    0 date | 1 amount | 2 category | 3 note | 4 user id

Row 0 is the header and is skipped. A sheet with a different layout is not an
error: its rows normalize to empty / zero fields and the validity filter drops
them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from expense_tracker.domain.models import Transaction
from expense_tracker.logging_setup import get_logger
from expense_tracker.services.normalizer import (
    cell_value,
    normalize_amount,
    normalize_date,
    normalize_text,
)

logger = get_logger(__name__)

COL_DATE, COL_AMOUNT, COL_CATEGORY, COL_NOTE, COL_USER = range(5)


def _cell(row: Sequence[Any], idx: int) -> Any:
    return row[idx] if idx < len(row) else None


def row_to_transaction(row: Sequence[Any]) -> Transaction:
    """Map one data row positionally. The result may be invalid."""
    user = cell_value(_cell(row, COL_USER))
    return Transaction(
        date=normalize_date(_cell(row, COL_DATE)),
        amount=normalize_amount(_cell(row, COL_AMOUNT)),
        category=normalize_text(_cell(row, COL_CATEGORY)),
        note=normalize_text(_cell(row, COL_NOTE)),
        source_user_id=None if user == "" else user,
    )


def build_transactions(rows: Sequence[Sequence[Any]]) -> list[Transaction]:
    """
    Build the canonical transaction list from rows including the header.

    Keeps source order. Drops records without a date, with amount <= 0 or
    without a category.
    """
    out: list[Transaction] = []
    dropped = 0
    for row in rows[1:]:
        tx = row_to_transaction(row)
        if tx.is_valid():
            out.append(tx)
        else:
            dropped += 1
    if dropped:
        logger.debug("dropped %d invalid transaction rows", dropped)
    return out
