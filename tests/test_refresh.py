import asyncio
import threading

import pytest

from expense_tracker.domain.models import Transaction
from expense_tracker.errors import SheetFetchError
from expense_tracker.services.refresh import PeriodicRefresher
from expense_tracker.services.store import DATA_ERROR, ExpenseStore


def make_fetch(results, gate=None):
    """Fetch stub returning results in order; the first call waits on gate."""
    calls = []

    def fetch():
        calls.append(len(calls))
        if gate is not None and len(calls) == 1:
            gate.wait(timeout=5)
        value = results[min(len(calls) - 1, len(results) - 1)]
        if isinstance(value, Exception):
            raise value
        return value

    return fetch, calls


def tx(amount):
    return Transaction(date="2025-06-23", amount=amount, category="Еда")


def test_refresh_once_applies_and_notifies(settings, client):
    store = ExpenseStore(settings, client=client)
    updates = []
    refresher = PeriodicRefresher(store, interval=60, on_update=updates.append)

    assert asyncio.run(refresher.refresh_once()) is True
    assert len(store.transactions) == 2
    assert updates == [store]


def test_refresh_once_failure_sets_alert(settings, client):
    store = ExpenseStore(settings, client=client)
    store.fetch_transactions, _ = make_fetch([SheetFetchError("down")])
    refresher = PeriodicRefresher(store, interval=60)

    assert asyncio.run(refresher.refresh_once()) is False
    assert store.alert == DATA_ERROR
    assert store.loading is False


def test_overlapping_tick_cancels_in_flight_refresh(settings, client):
    store = ExpenseStore(settings, client=client)
    gate = threading.Event()
    store.fetch_transactions, calls = make_fetch([[tx(1)], [tx(2)]], gate=gate)
    refresher = PeriodicRefresher(store, interval=60)

    async def scenario():
        try:
            first = refresher.trigger()
            await asyncio.sleep(0.05)
            second = refresher.trigger()
            assert await second is True
            with pytest.raises(asyncio.CancelledError):
                await first
        finally:
            gate.set()

    asyncio.run(scenario())
    assert len(calls) == 2
    assert [t.amount for t in store.transactions] == [2]
    assert store.loading is False


def test_periodic_loop_and_stop(settings, client):
    store = ExpenseStore(settings, client=client)
    store.fetch_transactions, calls = make_fetch([[tx(1)]])
    refresher = PeriodicRefresher(store, interval=0.05)

    async def scenario():
        refresher.start()
        assert refresher.running
        await asyncio.sleep(0.22)
        await refresher.stop()
        assert not refresher.running
        seen = len(calls)
        await asyncio.sleep(0.12)
        return seen

    seen = asyncio.run(scenario())
    assert seen >= 3
    # a request already handed to the worker thread may still land
    assert len(calls) <= seen + 1


def test_start_without_immediate_waits_one_interval(settings, client):
    store = ExpenseStore(settings, client=client)
    store.fetch_transactions, calls = make_fetch([[tx(1)]])
    refresher = PeriodicRefresher(store, interval=0.2)

    async def scenario():
        refresher.start(immediate=False)
        await asyncio.sleep(0.05)
        early = len(calls)
        await refresher.stop()
        return early

    assert asyncio.run(scenario()) == 0


def test_stop_cancels_in_flight_refresh(settings, client):
    store = ExpenseStore(settings, client=client)
    gate = threading.Event()
    store.fetch_transactions, _ = make_fetch([[tx(1)]], gate=gate)
    refresher = PeriodicRefresher(store, interval=60)

    async def scenario():
        try:
            refresher.start()
            await asyncio.sleep(0.05)
            assert store.loading
            await refresher.stop()
        finally:
            gate.set()

    asyncio.run(scenario())
    assert store.loading is False
    assert store.transactions == []
