"""Manual fare negotiation — step the fare up or down, saturating at the bounds."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from kommute_fares.config.tariff import DEFAULT_TARIFF, TariffConstants
from kommute_fares.engine.money import Money, to_money
from kommute_fares.errors import InvalidInputError
from kommute_fares.models.results import TripQuote


class AdjustDirection(str, Enum):
    UP = "up"
    DOWN = "down"


def _parse_direction(direction: AdjustDirection | str) -> AdjustDirection:
    try:
        return AdjustDirection(direction)
    except ValueError:
        raise InvalidInputError("direction", direction, "must be 'up' or 'down'") from None


def adjust_price(
    current_fare: Money,
    direction: AdjustDirection | str,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> Decimal:
    """Move *current_fare* one ``adjustment_step`` in *direction*.

    At a bound the call is a no-op in that direction.

    *current_fare* must already lie within ``[min_fare, max_fare]``; every
    fare produced by :func:`calculate_trip_price` or by this function does.
    A fare outside the bounds is rejected, not clamped.

    Raises
    ------
    InvalidInputError
        Unknown *direction*, or *current_fare* outside the bounds.
    """
    fare = to_money(current_fare, "current_fare")
    step_direction = _parse_direction(direction)
    if not tariff.min_fare <= fare <= tariff.max_fare:
        raise InvalidInputError(
            "current_fare", current_fare,
            f"must be within [{tariff.min_fare}, {tariff.max_fare}]",
        )

    if step_direction is AdjustDirection.UP:
        return min(fare + tariff.adjustment_step, tariff.max_fare)
    return max(fare - tariff.adjustment_step, tariff.min_fare)


def adjust_quote(
    quote: TripQuote,
    direction: AdjustDirection | str,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> TripQuote:
    """New quote with the fare moved one step; *quote* itself is unchanged."""
    return quote.with_fare(adjust_price(quote.base_fare, direction, tariff))
