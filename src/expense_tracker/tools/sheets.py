from __future__ import annotations

"""
Read-only Google Sheets client using the public gviz query endpoint.

No API key and no auth: the spreadsheet has to be shared "anyone with the
link can view". The endpoint answers with JSON wrapped in a JavaScript
callback, so the payload is unwrapped by decode_gviz_payload() before
parsing.
"""

import json
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from expense_tracker.domain.models import SheetCell
from expense_tracker.errors import SheetFetchError, SheetParseError
from expense_tracker.logging_setup import get_logger

logger = get_logger(__name__)

GVIZ_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"

# Fixed wrapper around the JSON body. The prefix is 47 characters long.
GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"

Row = List[Optional[SheetCell]]


# ----------------------------
# Pydantic models (gviz payload)
# ----------------------------
class GvizCell(BaseModel):
    v: Any = None
    f: Optional[str] = None


class GvizRow(BaseModel):
    c: List[Optional[GvizCell]] = []


class GvizTable(BaseModel):
    rows: List[GvizRow] = []


class GvizResponse(BaseModel):
    table: GvizTable


def decode_gviz_payload(text: str, sheet: str | None = None) -> List[Row]:
    """
    Strip the callback wrapper and decode the table into rows of cells.

    Raises SheetParseError when the wrapper does not match, the body is not
    JSON, or the JSON is not shaped like {"table": {"rows": [{"c": [...]}]}}.
    """
    body = text.rstrip()
    if not body.startswith(GVIZ_PREFIX) or not body.endswith(GVIZ_SUFFIX):
        raise SheetParseError(f"unexpected gviz wrapper for sheet {sheet!r}", sheet=sheet)

    body = body[len(GVIZ_PREFIX):-len(GVIZ_SUFFIX)]
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise SheetParseError(f"invalid JSON in sheet {sheet!r}: {e}", sheet=sheet) from e

    try:
        resp = GvizResponse.model_validate(data)
    except ValidationError as e:
        raise SheetParseError(f"unexpected table shape in sheet {sheet!r}", sheet=sheet) from e

    return [
        [SheetCell(v=cell.v, f=cell.f) if cell is not None else None for cell in row.c]
        for row in resp.table.rows
    ]


def drop_short_rows(rows: List[Row], min_cells: int) -> List[Row]:
    """Discard rows carrying fewer than min_cells cells."""
    kept = [row for row in rows if len(row) >= min_cells]
    if len(kept) != len(rows):
        logger.debug("dropped %d short rows (min_cells=%d)", len(rows) - len(kept), min_cells)
    return kept


class SheetClient:
    def __init__(
        self,
        spreadsheet_id: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self) -> str:
        return GVIZ_URL.format(spreadsheet_id=self.spreadsheet_id)

    def fetch_rows(self, sheet: str) -> List[Row]:
        """
        Fetch one named sheet.

        Returns every row including the header; cells are SheetCell or None.
        Raises SheetFetchError / SheetParseError.
        """
        params = {"tqx": "out:json", "sheet": sheet}
        try:
            r = self.session.get(self.url(), params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise SheetFetchError(f"failed to fetch sheet {sheet!r}: {e}", sheet=sheet) from e

        rows = decode_gviz_payload(r.text, sheet=sheet)
        logger.debug("fetched sheet %r: %d rows", sheet, len(rows))
        return rows
