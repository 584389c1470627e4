"""Configuration models — tariff, vehicle catalog, revenue assumptions."""

from kommute_fares.config.tariff import DEFAULT_TARIFF, TariffConstants
from kommute_fares.config.vehicle import VehicleClass, default_vehicle_catalog
from kommute_fares.config.estimate import RevenueAssumptions
from kommute_fares.config.scenario import PricingScenario

__all__ = [
    "DEFAULT_TARIFF",
    "TariffConstants",
    "VehicleClass",
    "default_vehicle_catalog",
    "RevenueAssumptions",
    "PricingScenario",
]
