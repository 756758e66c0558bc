"""
Local JSON ledger for manually entered transactions.

Used only when the app runs with EXPENSES_DATA_SOURCE=local. The whole list
is loaded at startup and rewritten on every change.
"""

import json
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import List, Optional

from expense_tracker.domain.models import Transaction
from expense_tracker.errors import LedgerError
from expense_tracker.logging_setup import get_logger
from expense_tracker.services.normalizer import normalize_amount

logger = get_logger(__name__)

LEDGER_PATH = Path("data/transactions.json")


class LocalLedger:
    def __init__(self, path: Path = LEDGER_PATH):
        self.path = Path(path)

    def load(self) -> List[Transaction]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as e:
            raise LedgerError(f"ledger {self.path} is not valid JSON: {e}") from e
        if not isinstance(raw, list):
            raise LedgerError(f"ledger {self.path} must hold a JSON list")

        txs = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            txs.append(
                Transaction(
                    date=str(item.get("date") or "")[:10],
                    amount=normalize_amount(item.get("amount")),
                    category=str(item.get("category") or "").strip(),
                    note=str(item.get("note") or "").strip(),
                    source_user_id=item.get("source_user_id"),
                )
            )
        return [tx for tx in txs if tx.is_valid()]

    def save(self, transactions: List[Transaction]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [asdict(tx) for tx in transactions]
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def add(
        self,
        amount,
        category: str,
        note: str = "",
        on: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Transaction:
        """
        Validate a manual entry, append it and persist the ledger.

        amount must be a number > 0; on defaults to today and may not be in
        the future. Raises ValueError for rejected input.
        """
        value = normalize_amount(amount)
        if value <= 0:
            raise ValueError(f"amount must be a positive number, got {amount!r}")
        category = (category or "").strip()
        if not category:
            raise ValueError("category is required")

        today = today or date.today()
        try:
            day = date.fromisoformat((on or today.isoformat()).strip()[:10])
        except ValueError:
            raise ValueError(f"date must be YYYY-MM-DD, got {on!r}") from None
        if day > today:
            raise ValueError(f"date {day} is in the future")

        tx = Transaction(date=day.isoformat(), amount=value, category=category, note=(note or "").strip())
        transactions = self.load()
        transactions.append(tx)
        self.save(transactions)
        logger.info("added manual transaction %s %.2f %s", tx.date, tx.amount, tx.category)
        return tx
