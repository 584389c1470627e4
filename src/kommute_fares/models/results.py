"""Result types — the contract between engine, API, and dashboard.

Every result is a frozen value record.  Nothing here is persisted; results
are recomputed from inputs on every call.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


# ═══════════════════════════════════════════════════════════════════════════
# Quotes
# ═══════════════════════════════════════════════════════════════════════════

class TripQuote(BaseModel):
    """Fare quote for one trip with one vehicle class."""

    model_config = ConfigDict(frozen=True)

    distance_meters: float
    duration_seconds: float
    vehicle_cost_factor: float
    base_fare: Decimal
    """Quoted fare (₡), within [min_fare, max_fare]."""

    def with_fare(self, fare: Decimal) -> TripQuote:
        """Copy of this quote carrying a negotiated fare."""
        return self.model_copy(update={"base_fare": fare})


class VehicleQuote(BaseModel):
    """Quote shown on the vehicle selection screen."""

    model_config = ConfigDict(frozen=True)

    vehicle_type: str
    name: str
    quote: TripQuote
    price_formatted: str
    """e.g. '₡2,125'."""
    estimated_minutes: int
    min_price: Decimal
    """Low end of the negotiable range, rounded to a payable denomination and
    kept within the tariff bounds."""
    max_price: Decimal
    """High end of the negotiable range, rounded the same way."""


# ═══════════════════════════════════════════════════════════════════════════
# Splits & projections
# ═══════════════════════════════════════════════════════════════════════════

class FareSplit(BaseModel):
    """Partition of one gross fare.

    Invariant: platform_commission + driver_earnings + tax_amount == gross_fare.
    """

    model_config = ConfigDict(frozen=True)

    gross_fare: Decimal
    """Tax-inclusive, rider-facing fare."""
    tax_amount: Decimal
    """IVA remitted to Hacienda."""
    net_fare: Decimal
    """gross_fare / (1 + tax_rate)."""
    platform_commission: Decimal
    driver_earnings: Decimal


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"


class RevenueProjection(BaseModel):
    """Aggregate for one reporting period."""

    model_config = ConfigDict(frozen=True)

    period: Period
    trips: int
    revenue: Decimal
    """Platform commission over the period."""
    driver_earnings: Decimal
    iva_collected: Decimal
    gross_fares: Decimal
    """Total paid by riders over the period."""


class RevenueEstimate(BaseModel):
    """Daily / weekly / monthly / annual projections built from one per-trip split."""

    model_config = ConfigDict(frozen=True)

    per_trip: FareSplit
    daily: RevenueProjection
    weekly: RevenueProjection
    monthly: RevenueProjection
    annual: RevenueProjection

    def projections(self) -> list[RevenueProjection]:
        return [self.daily, self.weekly, self.monthly, self.annual]
