"""Revenue estimate assumptions — entered by operators on the reporting screens."""

from decimal import Decimal

from pydantic import BaseModel, Field


class RevenueAssumptions(BaseModel):
    """Trip volume and price assumptions for a revenue projection."""

    trips_per_day: int = Field(default=100, ge=0, description="Average completed trips per day")
    avg_fare_excl_tax: Decimal = Field(
        default=Decimal("2500"), ge=0,
        description="Average trip price before IVA (₡). Gross is re-derived with the tariff's tax_rate.",
    )
