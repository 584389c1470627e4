"""Money helpers — Decimal conversion, rounding, and CRC formatting.

All monetary arithmetic in the engine is done on ``decimal.Decimal`` so that
reporting aggregates over many trips do not accumulate float drift.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from kommute_fares.errors import InvalidInputError

CENT = Decimal("0.01")

Money = Decimal | int | float | str


def to_money(value: Money, field: str = "amount") -> Decimal:
    """Convert *value* to Decimal, going through ``str`` for floats (0.1 → Decimal('0.1'))."""
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "must be a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(field, value, "must be a number") from None
    else:
        raise InvalidInputError(field, value, "must be a number")
    if not result.is_finite():
        raise InvalidInputError(field, value, "must be finite")
    return result


def to_number(value: float | int, field: str) -> float:
    """Validate a physical (non-money) quantity and return it as float."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInputError(field, value, "must be a number")
    result = float(value)
    if not math.isfinite(result):
        raise InvalidInputError(field, value, "must be finite")
    return result


def quantize_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_to_increment(amount: Decimal, increment: Decimal) -> Decimal:
    """Round half-up to the nearest multiple of *increment*."""
    steps = (amount / increment).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return steps * increment


def round_to_nearest_currency(amount: Money) -> Decimal:
    """Round to the nearest amount payable with circulating colón coins/notes.

    Below ₡5 → ₡5; below ₡1,000 → multiple of 25; below ₡5,000 → multiple
    of 100; otherwise multiple of 500.
    """
    value = to_money(amount)
    if value < 5:
        return Decimal(5)
    if value < 1_000:
        return round_to_increment(value, Decimal(25))
    if value < 5_000:
        return round_to_increment(value, Decimal(100))
    return round_to_increment(value, Decimal(500))


def format_crc(amount: Money, include_decimals: bool = False) -> str:
    """Format *amount* as colones, e.g. ``₡1,250`` or ``₡1,250.00``."""
    value = to_money(amount)
    if include_decimals:
        return f"₡{quantize_cents(value):,.2f}"
    return f"₡{round_to_increment(value, Decimal(1)):,.0f}"
