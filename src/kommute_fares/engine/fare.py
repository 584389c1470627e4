"""Trip fare calculation.

    raw      = base_fare + km × per_km_rate + minutes × per_minute_rate
    adjusted = raw × vehicle_cost_factor
    fare     = clamp(round(clamp(adjusted, min_fare, max_fare), rounding_increment))

Only the computed fare is clamped; malformed inputs are rejected.  The second
clamp holds when a bound is not a multiple of the rounding increment.
"""

from __future__ import annotations

import math
from decimal import Decimal

from kommute_fares.config.tariff import DEFAULT_TARIFF, TariffConstants
from kommute_fares.config.vehicle import VehicleClass, default_vehicle_catalog
from kommute_fares.engine.money import (
    format_crc,
    round_to_increment,
    round_to_nearest_currency,
    to_money,
    to_number,
)
from kommute_fares.errors import InvalidInputError
from kommute_fares.models.results import TripQuote, VehicleQuote

DEFAULT_RANGE_STEPS = 3
"""How many adjustment steps either side of the quote a rider may negotiate."""


def _validate_trip(distance_meters: float, duration_seconds: float, vehicle_cost_factor: float) -> tuple[float, float, float]:
    distance = to_number(distance_meters, "distance_meters")
    duration = to_number(duration_seconds, "duration_seconds")
    factor = to_number(vehicle_cost_factor, "vehicle_cost_factor")
    if distance < 0:
        raise InvalidInputError("distance_meters", distance_meters, "must be >= 0")
    if duration < 0:
        raise InvalidInputError("duration_seconds", duration_seconds, "must be >= 0")
    if factor <= 0:
        raise InvalidInputError("vehicle_cost_factor", vehicle_cost_factor, "must be > 0")
    return distance, duration, factor


def clamp_fare(fare: Decimal, tariff: TariffConstants = DEFAULT_TARIFF) -> Decimal:
    return min(max(fare, tariff.min_fare), tariff.max_fare)


def _price_range(fare: Decimal, spread: Decimal, tariff: TariffConstants) -> tuple[Decimal, Decimal]:
    """Negotiable range around *fare*, each end rounded to a payable amount."""
    if not spread:
        return fare, fare
    low = clamp_fare(round_to_nearest_currency(fare - spread), tariff)
    high = clamp_fare(round_to_nearest_currency(fare + spread), tariff)
    return min(low, fare), max(high, fare)


def calculate_trip_price(
    distance_meters: float,
    duration_seconds: float,
    vehicle_cost_factor: float = 1.0,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> Decimal:
    """Fare for one trip, in colones, always within the tariff's bounds.

    Raises
    ------
    InvalidInputError
        Negative distance or duration, or non-positive cost factor.
    """
    distance, duration, factor = _validate_trip(distance_meters, duration_seconds, vehicle_cost_factor)

    km = to_money(distance) / 1_000
    minutes = to_money(duration) / 60
    raw = tariff.base_fare + km * tariff.per_km_rate + minutes * tariff.per_minute_rate
    adjusted = raw * to_money(factor)

    rounded = round_to_increment(clamp_fare(adjusted, tariff), tariff.rounding_increment)
    return clamp_fare(rounded, tariff)


def build_trip_quote(
    distance_meters: float,
    duration_seconds: float,
    vehicle_cost_factor: float = 1.0,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> TripQuote:
    """Same as :func:`calculate_trip_price`, wrapped in a :class:`TripQuote`."""
    fare = calculate_trip_price(distance_meters, duration_seconds, vehicle_cost_factor, tariff)
    return TripQuote(
        distance_meters=float(distance_meters),
        duration_seconds=float(duration_seconds),
        vehicle_cost_factor=float(vehicle_cost_factor),
        base_fare=fare,
    )


def quote_vehicle_classes(
    distance_meters: float,
    duration_seconds: float,
    catalog: list[VehicleClass] | None = None,
    tariff: TariffConstants = DEFAULT_TARIFF,
    range_steps: int = DEFAULT_RANGE_STEPS,
) -> list[VehicleQuote]:
    """One quote per vehicle class, in catalog order, with its negotiable range."""
    if catalog is None:
        catalog = default_vehicle_catalog()
    if range_steps < 0:
        raise InvalidInputError("range_steps", range_steps, "must be >= 0")

    estimated_minutes = math.ceil(to_number(duration_seconds, "duration_seconds") / 60)
    spread = tariff.adjustment_step * range_steps

    quotes: list[VehicleQuote] = []
    for vehicle in catalog:
        quote = build_trip_quote(distance_meters, duration_seconds, vehicle.cost_factor, tariff)
        min_price, max_price = _price_range(quote.base_fare, spread, tariff)
        quotes.append(VehicleQuote(
            vehicle_type=vehicle.vehicle_type,
            name=vehicle.name,
            quote=quote,
            price_formatted=format_crc(quote.base_fare),
            estimated_minutes=estimated_minutes,
            min_price=min_price,
            max_price=max_price,
        ))
    return quotes


def price_per_km(cost_factor: float, tariff: TariffConstants = DEFAULT_TARIFF) -> Decimal:
    """Advertised per-km rate for a vehicle class, rounded to a payable amount."""
    factor = to_number(cost_factor, "cost_factor")
    if factor <= 0:
        raise InvalidInputError("cost_factor", cost_factor, "must be > 0")
    return round_to_nearest_currency(tariff.per_km_rate * to_money(factor))
