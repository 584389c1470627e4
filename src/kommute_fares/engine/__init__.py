"""Engine — pure pricing computations (no I/O, no shared state)."""

from kommute_fares.engine.money import format_crc, round_to_nearest_currency, to_money
from kommute_fares.engine.geo import estimate_duration, haversine_distance
from kommute_fares.engine.fare import (
    build_trip_quote,
    calculate_trip_price,
    price_per_km,
    quote_vehicle_classes,
)
from kommute_fares.engine.adjust import AdjustDirection, adjust_price, adjust_quote
from kommute_fares.engine.split import split_fare
from kommute_fares.engine.revenue import (
    estimate_from_assumptions,
    estimate_revenue,
    project_volume_curve,
)

__all__ = [
    "to_money",
    "format_crc",
    "round_to_nearest_currency",
    "haversine_distance",
    "estimate_duration",
    "calculate_trip_price",
    "build_trip_quote",
    "quote_vehicle_classes",
    "price_per_km",
    "AdjustDirection",
    "adjust_price",
    "adjust_quote",
    "split_fare",
    "estimate_revenue",
    "estimate_from_assumptions",
    "project_volume_curve",
]
