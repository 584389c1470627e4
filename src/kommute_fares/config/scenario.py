"""Top-level scenario — bundles every pricing input."""

from pydantic import BaseModel, Field

from kommute_fares.config.tariff import TariffConstants
from kommute_fares.config.vehicle import VehicleClass, default_vehicle_catalog
from kommute_fares.config.estimate import RevenueAssumptions


class PricingScenario(BaseModel):
    """Complete input bundle for quoting and revenue reporting."""

    tariff: TariffConstants = Field(default_factory=TariffConstants)
    vehicles: list[VehicleClass] = Field(default_factory=default_vehicle_catalog)
    assumptions: RevenueAssumptions = Field(default_factory=RevenueAssumptions)
