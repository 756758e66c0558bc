from pathlib import Path

import pytest

from expense_tracker.config import DEFAULT_SPREADSHEET_ID, Settings, load_settings
from expense_tracker.errors import ConfigError


def test_defaults():
    s = load_settings(dotenv=False)
    assert s == Settings()
    assert s.spreadsheet_id == DEFAULT_SPREADSHEET_ID
    assert s.refresh_seconds == 60
    assert s.min_row_cells == 3
    assert s.chart_policy == "all"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EXPENSES_SPREADSHEET_ID", " abc ")
    monkeypatch.setenv("EXPENSES_REFRESH_SECONDS", "30")
    monkeypatch.setenv("EXPENSES_MIN_ROW_CELLS", "5")
    monkeypatch.setenv("EXPENSES_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("EXPENSES_CHART_POLICY", "Active")
    monkeypatch.setenv("EXPENSES_CATEGORY_SOURCE", "static")
    monkeypatch.setenv("EXPENSES_DATA_SOURCE", "local")
    monkeypatch.setenv("EXPENSES_LEDGER_PATH", "/tmp/ledger.json")
    monkeypatch.setenv("EXPENSES_HOST_ENABLED", "no")

    s = load_settings(dotenv=False)
    assert s.spreadsheet_id == "abc"
    assert s.refresh_seconds == 30
    assert s.min_row_cells == 5
    assert s.request_timeout == 2.5
    assert s.chart_policy == "active"
    assert s.category_source == "static"
    assert s.data_source == "local"
    assert s.ledger_path == Path("/tmp/ledger.json")
    assert s.host_enabled is False


@pytest.mark.parametrize(
    "name, value",
    [
        ("EXPENSES_REFRESH_SECONDS", "soon"),
        ("EXPENSES_REFRESH_SECONDS", "0"),
        ("EXPENSES_MIN_ROW_CELLS", "-1"),
        ("EXPENSES_REQUEST_TIMEOUT", "0"),
        ("EXPENSES_CHART_POLICY", "pie"),
        ("EXPENSES_DATA_SOURCE", "db"),
    ],
)
def test_invalid_values_name_the_variable(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError, match=name):
        load_settings(dotenv=False)
