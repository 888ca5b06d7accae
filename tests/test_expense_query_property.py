"""Property checks for the listing contract against a seeded store."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
import math

import pytest
from hypothesis import HealthCheck, given, settings as hyp_settings
from hypothesis import strategies as st

from expense_tracker.models.constants import DEFAULT_CATEGORIES
from expense_tracker.services.expense_query import build_expense_query, run_expense_query

NAMES = ["Coffee", "Rent", "Bus", "Gym", "Book"]
CATEGORIES = ["Food", "Housing", "Transportation", "Health"]
START = date(2024, 1, 1)

# Reads only: the seeded store is shared across generated examples.
PROPERTY_SETTINGS = hyp_settings(
    max_examples=60,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

optional_amount = st.none() | st.integers(min_value=0, max_value=60).map(lambda v: str(Decimal(v) / 2))
optional_day = st.none() | st.integers(min_value=0, max_value=20).map(
    lambda v: (START + timedelta(days=v)).isoformat()
)
optional_category = st.none() | st.sampled_from(CATEGORIES + ["Pets", "food", ""])
sort_key = st.sampled_from([None, "name", "amount", "date", "NAME", "bogus"])


@pytest.fixture()
def seeded(db, add_expense):
    # Deliberate duplicates in every sort key to exercise tie-breaking.
    for i in range(37):
        add_expense(
            NAMES[i % len(NAMES)],
            str(Decimal(i % 7 * 5 + 1) / 2),
            START + timedelta(days=i % 11),
            CATEGORIES[i % len(CATEGORIES)],
        )
    return db


def _filters(draw_min, draw_max, draw_start, draw_end, draw_category):
    return dict(
        min_price=draw_min,
        max_price=draw_max,
        start_date=draw_start,
        end_date=draw_end,
        category=draw_category,
    )


def _all(db, filters, **params):
    query = build_expense_query(categories=DEFAULT_CATEGORIES, paginate=False, **filters, **params)
    return run_expense_query(db, query)


@PROPERTY_SETTINGS
@given(optional_amount, optional_amount, optional_day, optional_day, optional_category, sort_key)
def test_items_satisfy_every_filter(seeded, lo, hi, start, end, category, sort_by):
    result = _all(seeded, _filters(lo, hi, start, end, category), sort_by=sort_by)
    for item in result.items:
        if lo is not None:
            assert item.amount >= Decimal(lo)
        if hi is not None:
            assert item.amount <= Decimal(hi)
        if start is not None:
            assert item.date >= date.fromisoformat(start)
        if end is not None:
            assert item.date <= date.fromisoformat(end)
        if category in CATEGORIES:
            assert item.category == category


@PROPERTY_SETTINGS
@given(
    optional_amount,
    optional_day,
    optional_category,
    sort_key,
    st.sampled_from(["asc", "desc"]),
    st.integers(min_value=1, max_value=12),
)
def test_pages_partition_the_filtered_sequence(seeded, lo, start, category, sort_by, order, page_size):
    filters = _filters(lo, None, start, None, category)
    everything = _all(seeded, filters, sort_by=sort_by, order=order)

    collected = []
    first = run_expense_query(
        seeded,
        build_expense_query(
            categories=DEFAULT_CATEGORIES, sort_by=sort_by, order=order, page_size=str(page_size), **filters
        ),
    )
    assert first.total_count == everything.total_count
    assert first.total_pages == math.ceil(everything.total_count / page_size)
    for page in range(1, first.total_pages + 1):
        result = run_expense_query(
            seeded,
            build_expense_query(
                categories=DEFAULT_CATEGORIES,
                sort_by=sort_by,
                order=order,
                page=str(page),
                page_size=str(page_size),
                **filters,
            ),
        )
        assert result.total_count == first.total_count
        assert len(result.items) <= page_size
        collected.extend(result.items)

    assert len(collected) == first.total_count
    assert [e.id for e in collected] == [e.id for e in everything.items]


@PROPERTY_SETTINGS
@given(optional_amount, optional_day, st.sampled_from(["name", "amount", "date"]))
def test_reversing_order_reverses_sequence(seeded, lo, start, sort_by):
    filters = _filters(lo, None, start, None, None)
    ascending = _all(seeded, filters, sort_by=sort_by, order="asc")
    descending = _all(seeded, filters, sort_by=sort_by, order="desc")
    assert [e.id for e in descending.items] == [e.id for e in reversed(ascending.items)]

    keys = [getattr(e, sort_by) for e in ascending.items]
    assert keys == sorted(keys)


@PROPERTY_SETTINGS
@given(optional_amount, optional_day, st.sampled_from(["Pets", "food", " ", "Housing "]))
def test_unknown_category_is_ignored(seeded, lo, start, category):
    unfiltered = _all(seeded, _filters(lo, None, start, None, None))
    ignored = _all(seeded, _filters(lo, None, start, None, category))
    assert [e.id for e in ignored.items] == [e.id for e in unfiltered.items]


def test_default_ordering_is_most_recent_first(seeded):
    result = _all(seeded, {})
    dates = [e.date for e in result.items]
    assert dates == sorted(dates, reverse=True)
