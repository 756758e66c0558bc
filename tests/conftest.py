"""Pytest fixtures shared by the suite.

Every test gets its own ledger path under ``tmp_path`` and a fake HTTP
session; nothing reaches the network or the working tree.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from expense_tracker.config import Settings
from expense_tracker.tools.sheets import SheetClient
from tests.helpers.gviz import CATEGORY_ROWS, HEADER, FakeSession, cells, gviz_text


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(spreadsheet_id="sheet-id", ledger_path=tmp_path / "ledger.json")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession(
        {
            "Transactions": gviz_text(
                [
                    HEADER,
                    cells("2025-06-23", "500", "Еда", "lunch"),
                    cells("2025-06-23", "300", "Транспорт", ""),
                ]
            ),
            "Categories": gviz_text(CATEGORY_ROWS),
        }
    )


@pytest.fixture
def client(session: FakeSession) -> SheetClient:
    return SheetClient("sheet-id", timeout=5, session=session)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer EXPENSES_* variables out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("EXPENSES_"):
            monkeypatch.delenv(key, raising=False)
