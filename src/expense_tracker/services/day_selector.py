from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from expense_tracker.domain.models import Transaction


def today_str(today: Optional[date] = None) -> str:
    """Local wall-clock date as YYYY-MM-DD."""
    return (today or date.today()).isoformat()


def available_days(transactions: Sequence[Transaction]) -> List[str]:
    """Distinct dates, newest first."""
    return sorted({tx.date for tx in transactions}, reverse=True)


def select_day(transactions: Sequence[Transaction], today: str) -> str:
    """
    Pick the day to show after a refresh.

    today when it has transactions, else the date of the last row read from
    the sheet (equal to the newest date only for chronologically ordered
    sheets), else today.
    """
    if any(tx.date == today for tx in transactions):
        return today
    if transactions:
        return transactions[-1].date
    return today
