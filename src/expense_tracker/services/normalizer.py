"""
Cell normalization: turn one raw sheet cell into a canonical scalar.

A cell is either a plain scalar (str / int / float / None), a SheetCell, or a
mapping with "v" / "f" keys. Dates come out as YYYY-MM-DD, amounts as float,
text as trimmed str. Nothing here raises; bad input becomes "" or 0.0 and the
record is dropped later by the validity filter.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from expense_tracker.domain.models import SheetCell

# "23.06.2025" or "23.06.2025 16:14:34"
FORMATTED_DATE_RE = re.compile(r"^\s*(\d{1,2})\.(\d{1,2})\.(\d{4})(?:\s|$)")
# "Date(2025,5,23,16,14,34)", month is zero-based
DATE_CTOR_RE = re.compile(r"^\s*Date\(\s*(\d{4})\s*,\s*(\d{1,2})\s*,\s*(\d{1,2})")


def _parts(cell: Any) -> tuple[bool, Any, Any]:
    """Return (structured, v, f) for any supported cell shape."""
    if isinstance(cell, SheetCell):
        return True, cell.v, cell.f
    if isinstance(cell, Mapping):
        return True, cell.get("v"), cell.get("f")
    return False, cell, None


def cell_value(cell: Any) -> Any:
    """The underlying value: .v for structured cells, the cell itself otherwise."""
    return _parts(cell)[1]


def normalize_date(cell: Any) -> str:
    structured, v, f = _parts(cell)

    # 1) plain string: keep the date prefix of ISO-ish values
    if not structured:
        return cell[:10] if isinstance(cell, str) else ""

    # 2) formatted display string dd.mm.yyyy[ hh:mm:ss]
    if isinstance(f, str):
        m = FORMATTED_DATE_RE.match(f)
        if m:
            day, month, year = m.groups()
            return f"{year}-{int(month):02d}-{int(day):02d}"

    if isinstance(v, str):
        # 3) serialized Date(year, monthIndex0, day, ...)
        m = DATE_CTOR_RE.match(v)
        if m:
            year, month0, day = (int(x) for x in m.groups())
            return f"{year}-{month0 + 1:02d}-{day:02d}"
        # Text cell holding an already formatted date
        if not v.startswith("Date("):
            return v.strip()[:10]

    return ""


def normalize_amount(cell: Any) -> float:
    v = cell_value(cell)
    if isinstance(v, bool) or v is None:
        return 0.0
    if isinstance(v, (int, float)):
        amount = float(v)
    else:
        # Thousands separators: regular and non-breaking spaces
        s = str(v).strip().replace("\u00a0", "").replace(" ", "")
        if not s:
            return 0.0
        try:
            amount = float(s)
        except ValueError:
            try:
                # Decimal comma, as typed in ru-RU locales
                amount = float(s.replace(",", "."))
            except ValueError:
                return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def normalize_text(cell: Any) -> str:
    v = cell_value(cell)
    if v is None or isinstance(v, bool):
        return ""
    if isinstance(v, float) and v.is_integer():
        # gviz reports numeric text cells as floats (42 -> 42.0)
        v = int(v)
    return str(v).strip()


def normalize_label(cell: Any) -> str:
    """Category-sheet labels: only string values count, anything else is ""."""
    v = cell_value(cell)
    return v.strip() if isinstance(v, str) else ""


def category_key(label: str) -> str:
    """Comparison key for categories: trimmed and case-insensitive."""
    return label.strip().casefold()
