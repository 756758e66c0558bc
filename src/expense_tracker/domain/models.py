from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# A single cell as returned by the spreadsheet endpoint.
# v is the raw value, f the optional formatted display string.
@dataclass(frozen=True)
class SheetCell:
    v: Any = None
    f: str | None = None


# Canonical expense record after normalization and validity filtering.
@dataclass
class Transaction:
    date: str  # YYYY-MM-DD
    amount: float
    category: str
    note: str = ""
    source_user_id: Any = None

    def is_valid(self) -> bool:
        return bool(self.date) and self.amount > 0 and bool(self.category)


@dataclass
class CategoryTotals:
    """Parallel label / total / colour sequences for one day's pie chart."""

    labels: list[str] = field(default_factory=list)
    totals: list[float] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(t > 0 for t in self.totals)

    def as_pairs(self) -> list[tuple[str, float]]:
        return list(zip(self.labels, self.totals))


# Everything the presentation layer needs to draw one day.
@dataclass
class DayView:
    day: str
    days: list[str]
    transactions: list[Transaction]
    totals: CategoryTotals
    loading: bool = False
    alert: str | None = None
