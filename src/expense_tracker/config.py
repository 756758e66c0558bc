"""
Runtime configuration.

Values come from a local .env (python-dotenv) and EXPENSES_* environment
variables. Settings are built once by the entrypoint and handed to the
services that need them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from expense_tracker.errors import ConfigError

# Embedded sheet id; EXPENSES_SPREADSHEET_ID points the app at another sheet.
DEFAULT_SPREADSHEET_ID = "1mQ2cJp7dZ0xq8Yb6M1Vt3kR9sWnA4hLfE5uGi0oPzXc"

CHART_POLICIES = ("all", "active")
CATEGORY_SOURCES = ("sheet", "static")
DATA_SOURCES = ("sheet", "local")


@dataclass(frozen=True)
class Settings:
    spreadsheet_id: str = DEFAULT_SPREADSHEET_ID
    transactions_sheet: str = "Transactions"
    categories_sheet: str = "Categories"
    refresh_seconds: int = 60
    min_row_cells: int = 3
    request_timeout: float = 10.0
    # "all": every category is charted, zero totals included.
    # "active": only categories with spending on the selected day.
    chart_policy: str = "all"
    category_source: str = "sheet"
    data_source: str = "sheet"
    ledger_path: Path = Path("data/transactions.json")
    host_enabled: bool = True
    log_level: str = "INFO"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from the environment (and .env unless disabled)."""
    if dotenv:
        load_dotenv()

    return Settings(
        spreadsheet_id=(os.getenv("EXPENSES_SPREADSHEET_ID") or DEFAULT_SPREADSHEET_ID).strip(),
        transactions_sheet=os.getenv("EXPENSES_TRANSACTIONS_SHEET") or "Transactions",
        categories_sheet=os.getenv("EXPENSES_CATEGORIES_SHEET") or "Categories",
        refresh_seconds=_env_int("EXPENSES_REFRESH_SECONDS", 60, minimum=1),
        min_row_cells=_env_int("EXPENSES_MIN_ROW_CELLS", 3),
        request_timeout=_env_float("EXPENSES_REQUEST_TIMEOUT", 10.0),
        chart_policy=_env_choice("EXPENSES_CHART_POLICY", "all", CHART_POLICIES),
        category_source=_env_choice("EXPENSES_CATEGORY_SOURCE", "sheet", CATEGORY_SOURCES),
        data_source=_env_choice("EXPENSES_DATA_SOURCE", "sheet", DATA_SOURCES),
        ledger_path=Path(os.getenv("EXPENSES_LEDGER_PATH") or "data/transactions.json"),
        host_enabled=_env_bool("EXPENSES_HOST_ENABLED", True),
        log_level=os.getenv("EXPENSES_LOG_LEVEL") or "INFO",
    )
