"""
Periodic refresh on an asyncio event loop.

The blocking sheet request runs in a worker thread; state is only touched on
the loop. When a tick fires while the previous refresh is still running, the
previous one is cancelled and its result discarded. stop() is the teardown
handle: it cancels the timer loop and any refresh in flight.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from expense_tracker.errors import LedgerError, SheetError
from expense_tracker.logging_setup import get_logger
from expense_tracker.services.store import ExpenseStore

logger = get_logger(__name__)


class PeriodicRefresher:
    def __init__(
        self,
        store: ExpenseStore,
        interval: float,
        on_update: Optional[Callable[[ExpenseStore], None]] = None,
    ):
        self.store = store
        self.interval = interval
        self.on_update = on_update
        self._loop_task: Optional[asyncio.Task] = None
        self._current: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def refresh_once(self) -> bool:
        """One fetch cycle; True when new data was applied."""
        gen = self.store.begin_refresh()
        try:
            txs = await asyncio.to_thread(self.store.fetch_transactions)
        except asyncio.CancelledError:
            self.store.cancel_refresh(gen)
            raise
        except (SheetError, LedgerError) as e:
            self.store.fail_refresh(gen, e)
            applied = False
        else:
            applied = self.store.apply_refresh(gen, txs)

        if self.on_update is not None:
            self.on_update(self.store)
        return applied

    def trigger(self) -> asyncio.Task:
        """Start a refresh now, cancelling one still in flight."""
        if self._current is not None and not self._current.done():
            logger.info("previous refresh still running, cancelling it")
            self._current.cancel()
        self._current = asyncio.create_task(self.refresh_once())
        return self._current

    async def _run(self, immediate: bool) -> None:
        if not immediate:
            await asyncio.sleep(self.interval)
        while True:
            self.trigger()
            await asyncio.sleep(self.interval)

    def start(self, immediate: bool = True) -> None:
        """Begin ticking; the first refresh runs now unless immediate is False."""
        if self.running:
            return
        logger.info("starting periodic refresh every %ss", self.interval)
        self._loop_task = asyncio.create_task(self._run(immediate))

    async def stop(self) -> None:
        for task in (self._loop_task, self._current):
            if task is not None and not task.done():
                task.cancel()
        for task in (self._loop_task, self._current):
            if task is not None:
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._loop_task = None
        self._current = None
        logger.info("periodic refresh stopped")
