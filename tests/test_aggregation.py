from collections import Counter

import pytest

from expense_tracker.domain.models import Transaction
from expense_tracker.services.aggregation import ACTIVE, ALL, category_totals, group_by_day

CATEGORIES = ["Еда", "Транспорт", "Другое"]


def tx(date, amount, category, note=""):
    return Transaction(date=date, amount=amount, category=category, note=note)


def test_group_by_day_keeps_order_within_bucket():
    txs = [tx("2025-06-22", 1, "Еда"), tx("2025-06-23", 2, "Еда"), tx("2025-06-22", 3, "Другое")]
    buckets = group_by_day(txs)
    assert list(buckets) == ["2025-06-22", "2025-06-23"]
    assert [t.amount for t in buckets["2025-06-22"]] == [1, 3]


def test_group_by_day_is_complete():
    txs = [tx(f"2025-06-{d:02d}", d, "Еда") for d in (1, 5, 1, 3, 5, 5)]
    buckets = group_by_day(txs)

    for day, bucket in buckets.items():
        assert all(t.date == day for t in bucket)
    flattened = [t.amount for bucket in buckets.values() for t in bucket]
    assert Counter(flattened) == Counter(t.amount for t in txs)


def test_group_by_day_empty():
    assert group_by_day([]) == {}


def test_totals_match_case_insensitively():
    daily = [tx("2025-06-23", 100, "еда"), tx("2025-06-23", 50, "Еда"), tx("2025-06-23", 20, " ЕДА ")]
    totals = category_totals(daily, CATEGORIES)
    assert totals.as_pairs() == [("Еда", 170), ("Транспорт", 0), ("Другое", 0)]


def test_end_to_end_totals_both_policies():
    daily = [tx("2025-06-23", 500, "Еда", "lunch"), tx("2025-06-23", 300, "Транспорт")]

    all_totals = category_totals(daily, CATEGORIES, policy=ALL)
    assert all_totals.labels == CATEGORIES
    assert all_totals.totals == [500, 300, 0]

    active = category_totals(daily, CATEGORIES, policy=ACTIVE)
    assert active.labels == ["Еда", "Транспорт"]
    assert active.totals == [500, 300]
    assert len(active.colors) == 2


def test_empty_day():
    all_totals = category_totals([], CATEGORIES, policy=ALL)
    assert all_totals.totals == [0, 0, 0]
    assert all_totals.is_empty()

    active = category_totals([], CATEGORIES, policy=ACTIVE)
    assert active.labels == [] and active.totals == []
    assert active.is_empty()


def test_duplicate_categories_are_charted_once():
    daily = [tx("2025-06-23", 10, "Еда")]
    totals = category_totals(daily, ["Еда", "Другое", "еда", "  "], policy=ALL)
    assert totals.as_pairs() == [("Еда", 10), ("Другое", 0)]


def test_unknown_category_is_not_charted():
    totals = category_totals([tx("2025-06-23", 10, "Кино")], CATEGORIES)
    assert sum(totals.totals) == 0


def test_unknown_policy():
    with pytest.raises(ValueError):
        category_totals([], CATEGORIES, policy="some")


def test_category_colour_is_stable_across_days():
    categories = ["Еда", "еда", "Транспорт", "Другое"]
    monday = category_totals([tx("2025-06-23", 10, "Транспорт")], categories, policy=ACTIVE)
    tuesday = category_totals(
        [tx("2025-06-24", 5, "Еда"), tx("2025-06-24", 7, "Транспорт")], categories, policy=ACTIVE
    )
    everything = category_totals([], categories, policy=ALL)

    colour = dict(zip(everything.labels, everything.colors))["Транспорт"]
    assert dict(zip(monday.labels, monday.colors))["Транспорт"] == colour
    assert dict(zip(tuesday.labels, tuesday.colors))["Транспорт"] == colour
    assert len(set(everything.colors)) == 3
