"""Kommute fare engine — trip pricing, fare negotiation, tax/commission splits
and revenue projections for the Kommute ride-hailing product (CRC)."""

from kommute_fares.config import DEFAULT_TARIFF, TariffConstants
from kommute_fares.engine import (
    adjust_price,
    calculate_trip_price,
    estimate_revenue,
    split_fare,
)
from kommute_fares.errors import InvalidInputError

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_TARIFF",
    "TariffConstants",
    "InvalidInputError",
    "calculate_trip_price",
    "adjust_price",
    "split_fare",
    "estimate_revenue",
]
