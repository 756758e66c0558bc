"""
Application state behind every interface.

The store owns the current transactions, categories and selected day. Each
successful refresh replaces transactions wholesale and re-runs automatic day
selection. Failures never propagate: they are logged, turned into one alert
message and the previous data stays on screen.

Refresh is split in three steps so async callers can run the blocking fetch
off the event loop:

    gen = store.begin_refresh()
    txs = store.fetch_transactions()      # blocking I/O, may raise
    store.apply_refresh(gen, txs)         # or store.fail_refresh(gen, err)

refresh() does all three synchronously.
"""

from __future__ import annotations

from typing import List, Optional

from expense_tracker.config import Settings
from expense_tracker.domain.models import DayView, Transaction
from expense_tracker.errors import LedgerError, SheetError
from expense_tracker.logging_setup import get_logger
from expense_tracker.services.aggregation import category_totals, group_by_day
from expense_tracker.services.categories import STATIC_CATEGORIES, build_categories
from expense_tracker.services.day_selector import available_days, select_day, today_str
from expense_tracker.services.ledger import LocalLedger
from expense_tracker.services.transactions import build_transactions
from expense_tracker.tools.sheets import SheetClient, drop_short_rows

logger = get_logger(__name__)

DATA_ERROR = "Ошибка загрузки данных"
CATEGORIES_ERROR = "Ошибка загрузки категорий"


class ExpenseStore:
    def __init__(
        self,
        settings: Settings,
        client: Optional[SheetClient] = None,
        ledger: Optional[LocalLedger] = None,
    ):
        self.settings = settings
        self.client = client or SheetClient(settings.spreadsheet_id, timeout=settings.request_timeout)
        self.ledger = ledger or LocalLedger(settings.ledger_path)

        self.transactions: List[Transaction] = []
        self.categories: List[str] = []
        self.selected_day: Optional[str] = None
        self.user_selected = False
        self.loading = False
        self.alert: Optional[str] = None
        self.last_refresh_ok: Optional[bool] = None

        self._generation = 0
        self._in_flight: set[int] = set()

    # -----------------------------
    # Categories
    # -----------------------------
    def load_categories(self) -> List[str]:
        """Load categories once per session; static list on demand or on failure."""
        if self.settings.category_source == "static":
            self.categories = list(STATIC_CATEGORIES)
            return self.categories

        try:
            rows = self.client.fetch_rows(self.settings.categories_sheet)
        except SheetError as e:
            logger.warning("category load failed for sheet %r: %s", e.sheet, e)
            self.alert = CATEGORIES_ERROR
            if not self.categories:
                self.categories = list(STATIC_CATEGORIES)
            return self.categories

        self.categories = build_categories(rows)
        logger.info("loaded %d categories", len(self.categories))
        return self.categories

    # -----------------------------
    # Transactions refresh
    # -----------------------------
    def begin_refresh(self) -> int:
        self._generation += 1
        self._in_flight.add(self._generation)
        self.loading = True
        return self._generation

    def fetch_transactions(self) -> List[Transaction]:
        """Blocking fetch + build. Raises SheetError / LedgerError."""
        if self.settings.data_source == "local":
            return self.ledger.load()
        rows = self.client.fetch_rows(self.settings.transactions_sheet)
        if not rows:
            return []
        # Header row is kept whatever its width; only data rows are checked.
        header, data = rows[0], drop_short_rows(rows[1:], self.settings.min_row_cells)
        return build_transactions([header, *data])

    def _finish(self, generation: int) -> bool:
        """Mark a refresh done; True when it is still the newest one."""
        if generation != self._generation:
            self._in_flight.discard(generation)
            self.loading = bool(self._in_flight)
            logger.debug("discarding stale refresh #%d (newest #%d)", generation, self._generation)
            return False
        # Older refreshes still running are obsolete now.
        self._in_flight.clear()
        self.loading = False
        return True

    def apply_refresh(self, generation: int, transactions: List[Transaction], today: Optional[str] = None) -> bool:
        if not self._finish(generation):
            return False
        self.transactions = list(transactions)
        self.user_selected = False
        self.selected_day = select_day(self.transactions, today or today_str())
        self.last_refresh_ok = True
        logger.info("refresh #%d: %d transactions, showing %s", generation, len(self.transactions), self.selected_day)
        return True

    def fail_refresh(self, generation: int, error: Exception) -> bool:
        if not self._finish(generation):
            return False
        logger.warning("refresh #%d failed: %s", generation, error)
        self.alert = DATA_ERROR
        self.last_refresh_ok = False
        return True

    def cancel_refresh(self, generation: int) -> None:
        self._in_flight.discard(generation)
        self.loading = bool(self._in_flight)

    def refresh(self, today: Optional[str] = None) -> bool:
        """Synchronous fetch cycle. Returns True when new data was applied."""
        gen = self.begin_refresh()
        try:
            txs = self.fetch_transactions()
        except (SheetError, LedgerError) as e:
            self.fail_refresh(gen, e)
            return False
        return self.apply_refresh(gen, txs, today=today)

    def refresh_due(self, last_at: Optional[float], now: float) -> bool:
        """True when no refresh has run yet or the interval has elapsed."""
        return last_at is None or now - last_at >= self.settings.refresh_seconds

    # -----------------------------
    # Local ledger entry
    # -----------------------------
    def add_manual(self, amount, category: str, note: str = "", on: Optional[str] = None) -> Optional[str]:
        """Add a ledger entry. Returns a message to show, or None when saved."""
        try:
            self.ledger.add(amount, category, note=note, on=on)
        except ValueError as e:
            return f"Не сохранено: {e}"
        except (LedgerError, OSError) as e:
            logger.warning("ledger write to %s failed: %s", self.ledger.path, e)
            return DATA_ERROR
        return None

    # -----------------------------
    # Day selection / view
    # -----------------------------
    def select_day(self, day: str) -> None:
        """User choice; holds until the next successful refresh."""
        self.selected_day = day
        self.user_selected = True

    def pop_alert(self) -> Optional[str]:
        alert, self.alert = self.alert, None
        return alert

    def categories_for_chart(self) -> List[str]:
        return self.categories or list(STATIC_CATEGORIES)

    def view(self, today: Optional[str] = None) -> DayView:
        today = today or today_str()
        day = self.selected_day or select_day(self.transactions, today)
        daily = group_by_day(self.transactions).get(day, [])
        return DayView(
            day=day,
            days=available_days(self.transactions),
            transactions=daily,
            totals=category_totals(daily, self.categories_for_chart(), self.settings.chart_policy),
            loading=self.loading,
            alert=self.alert,
        )
