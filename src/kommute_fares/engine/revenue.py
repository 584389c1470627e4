"""Revenue projections — per-trip split scaled by trip volume.

Reporting only: nothing is persisted, everything is recomputed from inputs.
Periods use fixed day counts (week = 7, month = 30, year = 365).
"""

from __future__ import annotations

import numpy as np

from kommute_fares.config.estimate import RevenueAssumptions
from kommute_fares.config.tariff import DEFAULT_TARIFF, TariffConstants
from kommute_fares.engine.money import Money, quantize_cents, to_money
from kommute_fares.engine.split import split_fare
from kommute_fares.errors import InvalidInputError
from kommute_fares.models.results import FareSplit, Period, RevenueEstimate, RevenueProjection

PERIOD_DAYS: dict[Period, int] = {
    Period.DAILY: 1,
    Period.WEEKLY: 7,
    Period.MONTHLY: 30,
    Period.ANNUAL: 365,
}


def _validate_trips(trips_per_day: int) -> int:
    if isinstance(trips_per_day, bool) or not isinstance(trips_per_day, int):
        raise InvalidInputError("trips_per_day", trips_per_day, "must be an integer")
    if trips_per_day < 0:
        raise InvalidInputError("trips_per_day", trips_per_day, "must be >= 0")
    return trips_per_day


def per_trip_split(avg_fare_excl_tax: Money, tariff: TariffConstants = DEFAULT_TARIFF) -> FareSplit:
    """Split of the average trip once IVA is added back on top of the net price."""
    avg = to_money(avg_fare_excl_tax, "avg_fare_excl_tax")
    if avg < 0:
        raise InvalidInputError("avg_fare_excl_tax", avg_fare_excl_tax, "must be >= 0")
    return split_fare(quantize_cents(avg * (1 + tariff.tax_rate)), tariff)


def _project(period: Period, trips_per_day: int, split: FareSplit) -> RevenueProjection:
    trips = trips_per_day * PERIOD_DAYS[period]
    return RevenueProjection(
        period=period,
        trips=trips,
        revenue=split.platform_commission * trips,
        driver_earnings=split.driver_earnings * trips,
        iva_collected=split.tax_amount * trips,
        gross_fares=split.gross_fare * trips,
    )


def estimate_revenue(
    trips_per_day: int,
    avg_fare_excl_tax: Money,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> RevenueEstimate:
    """Daily, weekly, monthly and annual projections.

    Each period multiplies the same (already rounded) per-trip amounts by its
    trip count, so weekly is exactly 7× daily, and so on.
    """
    trips = _validate_trips(trips_per_day)
    split = per_trip_split(avg_fare_excl_tax, tariff)

    return RevenueEstimate(
        per_trip=split,
        daily=_project(Period.DAILY, trips, split),
        weekly=_project(Period.WEEKLY, trips, split),
        monthly=_project(Period.MONTHLY, trips, split),
        annual=_project(Period.ANNUAL, trips, split),
    )


def estimate_from_assumptions(
    assumptions: RevenueAssumptions,
    tariff: TariffConstants = DEFAULT_TARIFF,
) -> RevenueEstimate:
    return estimate_revenue(assumptions.trips_per_day, assumptions.avg_fare_excl_tax, tariff)


def project_volume_curve(
    trip_counts: np.ndarray | list[int],
    avg_fare_excl_tax: Money,
    tariff: TariffConstants = DEFAULT_TARIFF,
    period: Period = Period.ANNUAL,
) -> dict[str, np.ndarray]:
    """Period totals across a range of daily trip volumes (for charting).

    Returns float arrays keyed ``trips_per_day``, ``revenue``,
    ``driver_earnings`` and ``iva_collected``.
    """
    counts = np.asarray(trip_counts)
    if counts.ndim != 1:
        raise InvalidInputError("trip_counts", trip_counts, "must be one-dimensional")
    if counts.size and (counts.dtype == np.bool_ or not np.issubdtype(counts.dtype, np.integer)):
        raise InvalidInputError("trip_counts", trip_counts, "must all be integers")
    if counts.size and (counts < 0).any():
        raise InvalidInputError("trip_counts", trip_counts, "must all be >= 0")

    split = per_trip_split(avg_fare_excl_tax, tariff)
    trips = counts.astype(float) * PERIOD_DAYS[period]

    return {
        "trips_per_day": counts.astype(int),
        "revenue": trips * float(split.platform_commission),
        "driver_earnings": trips * float(split.driver_earnings),
        "iva_collected": trips * float(split.tax_amount),
    }

