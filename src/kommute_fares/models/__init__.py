"""Result models — calculation output contracts."""

from kommute_fares.models.results import (
    FareSplit,
    Period,
    RevenueEstimate,
    RevenueProjection,
    TripQuote,
    VehicleQuote,
)

__all__ = [
    "FareSplit",
    "Period",
    "RevenueEstimate",
    "RevenueProjection",
    "TripQuote",
    "VehicleQuote",
]
