"""Tariff table — the pricing constants for one deployment / jurisdiction."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SHARE_TOLERANCE = Decimal("0.000001")
"""Allowed drift between commission_rate + driver_share_rate and 1."""


class TariffConstants(BaseModel):
    """Static tariff table.

    Money fields are in colones (CRC).  Rates are fractions of the
    tax-exclusive (net) fare; ``tax_rate`` is the VAT-style IVA that is
    already included in the rider-facing (gross) price.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_fare: Decimal = Field(default=Decimal("600"), ge=0, description="Flag-fall charged at trip start (₡)")
    per_km_rate: Decimal = Field(default=Decimal("150"), ge=0, description="Charge per kilometre (₡/km)")
    per_minute_rate: Decimal = Field(default=Decimal("40"), ge=0, description="Charge per minute of trip time (₡/min)")

    commission_rate: Decimal = Field(
        default=Decimal("0.15"), ge=0, le=1,
        description="Platform's cut of the net (tax-exclusive) fare.",
    )
    driver_share_rate: Decimal = Field(
        default=Decimal("0.85"), ge=0, le=1,
        description="Driver's cut of the net fare. commission_rate + driver_share_rate must equal 1.",
    )
    tax_rate: Decimal = Field(
        default=Decimal("0.13"), ge=0, le=1,
        description="IVA included in the gross fare (0.13 = 13%).",
    )

    min_fare: Decimal = Field(default=Decimal("1200"), ge=0, description="Floor on any computed or adjusted fare (₡)")
    max_fare: Decimal = Field(default=Decimal("100000"), ge=0, description="Ceiling on any computed or adjusted fare (₡)")
    adjustment_step: Decimal = Field(
        default=Decimal("50"), gt=0,
        description="Increment used when a rider nudges the fare up or down (₡).",
    )
    rounding_increment: Decimal = Field(
        default=Decimal("1"), gt=0,
        description="Computed fares are rounded to a multiple of this (₡). "
                    "Colones have no practical minor unit, so 1 by default.",
    )

    @model_validator(mode="after")
    def _check_invariants(self) -> "TariffConstants":
        if abs(self.commission_rate + self.driver_share_rate - 1) > SHARE_TOLERANCE:
            raise ValueError(
                f"commission_rate ({self.commission_rate}) + driver_share_rate "
                f"({self.driver_share_rate}) must sum to 1"
            )
        if self.min_fare > self.max_fare:
            raise ValueError(f"min_fare ({self.min_fare}) exceeds max_fare ({self.max_fare})")
        return self


DEFAULT_TARIFF = TariffConstants()
"""Costa Rica defaults."""
