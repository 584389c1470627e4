"""Shared test fixtures — tariffs and assumptions used across the suite."""

from __future__ import annotations

from decimal import Decimal

import pytest

from kommute_fares.config import RevenueAssumptions, TariffConstants, VehicleClass


@pytest.fixture
def tariff() -> TariffConstants:
    """Round-number tariff used by the worked examples."""
    return TariffConstants(
        base_fare=500,
        per_km_rate=300,
        per_minute_rate=50,
        commission_rate=Decimal("0.15"),
        driver_share_rate=Decimal("0.85"),
        tax_rate=Decimal("0.13"),
        min_fare=1_000,
        max_fare=20_000,
        adjustment_step=100,
    )


@pytest.fixture
def default_tariff() -> TariffConstants:
    return TariffConstants()


@pytest.fixture
def assumptions() -> RevenueAssumptions:
    return RevenueAssumptions(trips_per_day=100, avg_fare_excl_tax=Decimal("2500"))


@pytest.fixture
def catalog() -> list[VehicleClass]:
    return [
        VehicleClass(vehicle_type="kommute-4", name="Kommute 4", cost_factor=0.85),
        VehicleClass(vehicle_type="kommute-large", name="Kommute Large", cost_factor=1.25),
        VehicleClass(vehicle_type="kommute-premium", name="Kommute Premium", cost_factor=1.45),
    ]
