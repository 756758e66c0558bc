from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from expense_tracker.domain.models import CategoryTotals, Transaction
from expense_tracker.services.categories import colors_for
from expense_tracker.services.normalizer import category_key

ALL = "all"
ACTIVE = "active"


def group_by_day(transactions: Sequence[Transaction]) -> Dict[str, List[Transaction]]:
    """Bucket transactions by date; source order is kept inside each bucket."""
    buckets: Dict[str, List[Transaction]] = {}
    for tx in transactions:
        buckets.setdefault(tx.date, []).append(tx)
    return buckets


def category_totals(
    daily: Sequence[Transaction],
    categories: Sequence[str],
    policy: str = ALL,
) -> CategoryTotals:
    """
    Sum one day's amounts per category, in category-list order.

    Matching is case-insensitive on trimmed labels. A label repeated in the
    category list is charted once (first spelling wins). With policy "active"
    only categories that have at least one transaction that day are kept.
    Transactions whose category is not in the list are not charted.
    """
    if policy not in (ALL, ACTIVE):
        raise ValueError(f"unknown chart policy: {policy!r}")

    sums: Dict[str, float] = defaultdict(float)
    seen_keys = set()
    for tx in daily:
        key = category_key(tx.category)
        sums[key] += tx.amount
        seen_keys.add(key)

    unique: List[str] = []
    charted = set()
    for label in categories:
        key = category_key(label)
        if key and key not in charted:
            charted.add(key)
            unique.append(label.strip())

    # A category keeps its colour from the full list whatever else is charted.
    palette = colors_for(len(unique))
    labels: List[str] = []
    totals: List[float] = []
    colors: List[str] = []
    for label, color in zip(unique, palette):
        key = category_key(label)
        if policy == ACTIVE and key not in seen_keys:
            continue
        labels.append(label)
        totals.append(sums.get(key, 0.0))
        colors.append(color)

    return CategoryTotals(labels=labels, totals=totals, colors=colors)
