from __future__ import annotations

from decimal import Decimal

import pytest

from expense_tracker.services.money import (
    MAX_AMOUNT,
    from_storage,
    lower_bound_cents,
    quantize,
    to_storage,
    upper_bound_cents,
    within_range,
)


@pytest.mark.parametrize(
    "raw, cents",
    [
        ("0.01", 1),
        ("4.5", 450),
        ("3.455", 346),
        ("9999999999999.99", 999_999_999_999_999),
    ],
)
def test_storage_is_exact_integer_cents(raw, cents):
    assert to_storage(Decimal(raw)) == cents
    assert from_storage(cents) == quantize(Decimal(raw))


def test_largest_amount_survives_json_number():
    assert Decimal(repr(float(from_storage(to_storage(MAX_AMOUNT))))) == MAX_AMOUNT


def test_range_limit():
    assert within_range(MAX_AMOUNT)
    assert not within_range(MAX_AMOUNT + Decimal("0.01"))
    assert not within_range(Decimal("1e26"))


@pytest.mark.parametrize(
    "raw, lower, upper",
    [
        ("5", 500, 500),
        ("4.505", 451, 450),
        ("-3", -300, -300),
        ("1e30", 1_000_000_000_000_000, 1_000_000_000_000_000),
        ("-1e30", -1_000_000_000_000_000, -1_000_000_000_000_000),
    ],
)
def test_filter_bounds_round_inward_and_clamp(raw, lower, upper):
    assert lower_bound_cents(Decimal(raw)) == lower
    assert upper_bound_cents(Decimal(raw)) == upper
