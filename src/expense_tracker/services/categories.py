"""
Category list: loaded from the categories sheet, or the static set.

The loader keeps sheet order and does not de-duplicate; aggregation copes
with repeated labels.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import cycle, islice
from typing import Any

from expense_tracker.services.normalizer import normalize_label

STATIC_CATEGORIES = ["Еда", "Транспорт", "Квартира", "Здоровье", "Одежда", "Другое"]

CHART_COLORS = ["#4682B4", "#FFA07A", "#7FFFD4", "#F4A460", "#8A2BE2", "#C0C0C0"]


def build_categories(rows: Sequence[Sequence[Any]]) -> list[str]:
    """First column of every row after the header, empty labels dropped."""
    labels = []
    for row in rows[1:]:
        label = normalize_label(row[0]) if row else ""
        if label:
            labels.append(label)
    return labels


def colors_for(n: int) -> list[str]:
    # Palette repeats when there are more categories than colours.
    return list(islice(cycle(CHART_COLORS), n))
