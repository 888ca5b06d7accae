"""Money / rounding helpers.

Centralized so validation, storage and serialization agree on the cent
precision of amounts. Amounts are stored as integer cents.

``MAX_AMOUNT`` keeps every accepted amount at 15 significant digits or
fewer, so it survives both the integer-cent column and the JSON number
(an IEEE double) exactly.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999999.99")
# Filter bounds are clamped here before scaling; no stored amount lies beyond it.
_BOUND_LIMIT = MAX_AMOUNT + CENT


def within_range(value: Decimal) -> bool:
    return abs(value) <= MAX_AMOUNT


def quantize(value: Decimal) -> Decimal:
    """Round to cents; callers check ``within_range`` first."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_storage(value: Decimal) -> int:
    return int(quantize(value).scaleb(2))


def from_storage(cents: int) -> Decimal:
    """Convert an integer-cent column value back to a Decimal."""
    return Decimal(int(cents)).scaleb(-2)


def _bound_to_cents(value: Decimal, rounding: str) -> int:
    clamped = max(min(value, _BOUND_LIMIT), -_BOUND_LIMIT)
    return int(clamped.scaleb(2).to_integral_value(rounding=rounding))


def lower_bound_cents(value: Decimal) -> int:
    """Smallest cent count that is >= ``value``."""
    return _bound_to_cents(value, ROUND_CEILING)


def upper_bound_cents(value: Decimal) -> int:
    """Largest cent count that is <= ``value``."""
    return _bound_to_cents(value, ROUND_FLOOR)
