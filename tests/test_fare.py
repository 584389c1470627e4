"""Tests for engine/fare.py — trip price, quotes, per-km rate."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from kommute_fares.config import TariffConstants
from kommute_fares.engine.adjust import adjust_price
from kommute_fares.engine.fare import (
    build_trip_quote,
    calculate_trip_price,
    price_per_km,
    quote_vehicle_classes,
)
from kommute_fares.errors import InvalidInputError


# ═══════════════════════════════════════════════════════════════════════════
# calculate_trip_price
# ═══════════════════════════════════════════════════════════════════════════

class TestCalculateTripPrice:

    def test_worked_example_rounds_to_whole_colon(self, tariff: TariffConstants):
        # raw = 500 + 2.5×300 + 10×50 = 1750; ×0.85 = 1487.5 → ₡1,488
        assert calculate_trip_price(2500, 600, 0.85, tariff) == Decimal("1488")

    def test_worked_example_half_colon_increment(self, tariff: TariffConstants):
        half = tariff.model_copy(update={"rounding_increment": Decimal("0.5")})
        assert calculate_trip_price(2500, 600, 0.85, half) == Decimal("1487.5")

    def test_factor_one_is_raw_fare(self, tariff: TariffConstants):
        assert calculate_trip_price(2500, 600, 1.0, tariff) == Decimal("1750")

    def test_default_tariff_costa_rica(self, default_tariff: TariffConstants):
        # 600 + 8×150 + 16×40 = 2440
        assert calculate_trip_price(8_000, 960, 1.0, default_tariff) == Decimal("2440")

    def test_zero_trip_hits_floor(self, tariff: TariffConstants):
        assert calculate_trip_price(0, 0, 1.0, tariff) == tariff.min_fare

    def test_long_trip_hits_ceiling(self, tariff: TariffConstants):
        assert calculate_trip_price(500_000, 36_000, 1.45, tariff) == tariff.max_fare

    def test_deterministic(self, tariff: TariffConstants):
        assert calculate_trip_price(3_333, 777, 1.25, tariff) == calculate_trip_price(3_333, 777, 1.25, tariff)

    @pytest.mark.parametrize("distance", [0, 1, 500, 2_500, 10_000, 100_000, 1_000_000])
    @pytest.mark.parametrize("duration", [0, 60, 600, 3_600, 36_000])
    @pytest.mark.parametrize("factor", [0.1, 0.85, 1.0, 1.25, 1.45, 5.0])
    def test_always_within_bounds(self, tariff: TariffConstants, distance, duration, factor):
        fare = calculate_trip_price(distance, duration, factor, tariff)
        assert tariff.min_fare <= fare <= tariff.max_fare

    def test_larger_vehicle_never_cheaper(self, tariff: TariffConstants):
        compact = calculate_trip_price(4_000, 900, 0.85, tariff)
        large = calculate_trip_price(4_000, 900, 1.25, tariff)
        assert large >= compact


class TestBoundsNotMultipleOfIncrement:

    def test_ceiling_with_fractional_max(self):
        t = TariffConstants(max_fare=Decimal("20000.5"))
        fare = calculate_trip_price(500_000, 36_000, 1.45, t)
        assert fare == Decimal("20000.5")

    def test_ceiling_fare_is_negotiable(self):
        t = TariffConstants(max_fare=Decimal("20000.5"))
        fare = calculate_trip_price(500_000, 36_000, 1.45, t)
        assert adjust_price(fare, "down", t) == Decimal("19950.5")
        assert adjust_price(fare, "up", t) == fare

    @pytest.mark.parametrize("distance", [0, 2_500, 100_000, 1_000_000])
    @pytest.mark.parametrize("factor", [0.1, 1.0, 5.0])
    def test_coarse_increment_stays_within_bounds(self, distance, factor):
        t = TariffConstants(min_fare=1_050, max_fare=20_050, rounding_increment=100)
        fare = calculate_trip_price(distance, 600, factor, t)
        assert t.min_fare <= fare <= t.max_fare
        adjust_price(fare, "up", t)


class TestCalculateTripPriceRejects:

    def test_negative_distance(self, tariff: TariffConstants):
        with pytest.raises(InvalidInputError) as exc_info:
            calculate_trip_price(-1, 10, 1.0, tariff)
        assert exc_info.value.field == "distance_meters"

    def test_negative_duration(self, tariff: TariffConstants):
        with pytest.raises(InvalidInputError):
            calculate_trip_price(100, -5, 1.0, tariff)

    @pytest.mark.parametrize("factor", [0, -0.5])
    def test_non_positive_cost_factor(self, tariff: TariffConstants, factor):
        with pytest.raises(InvalidInputError):
            calculate_trip_price(100, 60, factor, tariff)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), "12", None, True])
    def test_non_numeric_distance(self, tariff: TariffConstants, bad):
        with pytest.raises(InvalidInputError):
            calculate_trip_price(bad, 60, 1.0, tariff)

    def test_is_a_value_error(self, tariff: TariffConstants):
        with pytest.raises(ValueError):
            calculate_trip_price(-1, 10, 1.0, tariff)


# ═══════════════════════════════════════════════════════════════════════════
# Quotes
# ═══════════════════════════════════════════════════════════════════════════

class TestQuotes:

    def test_build_trip_quote_carries_inputs(self, tariff: TariffConstants):
        quote = build_trip_quote(2500, 600, 0.85, tariff)
        assert quote.distance_meters == 2500
        assert quote.duration_seconds == 600
        assert quote.vehicle_cost_factor == 0.85
        assert quote.base_fare == Decimal("1488")

    def test_quote_is_immutable(self, tariff: TariffConstants):
        quote = build_trip_quote(2500, 600, 0.85, tariff)
        with pytest.raises(ValidationError):
            quote.base_fare = Decimal("1")

    def test_vehicle_quotes_in_catalog_order(self, tariff: TariffConstants, catalog):
        quotes = quote_vehicle_classes(2500, 600, catalog, tariff)
        assert [q.vehicle_type for q in quotes] == ["kommute-4", "kommute-large", "kommute-premium"]
        assert [q.quote.base_fare for q in quotes] == [Decimal("1488"), Decimal("2188"), Decimal("2538")]

    def test_vehicle_quote_range_and_labels(self, tariff: TariffConstants, catalog):
        compact = quote_vehicle_classes(2500, 600, catalog, tariff)[0]
        assert compact.min_price == Decimal("1200")
        assert compact.max_price == Decimal("1800")
        assert compact.estimated_minutes == 10
        assert compact.price_formatted == "₡1,488"

    def test_vehicle_quote_range_clamped_at_floor(self, tariff: TariffConstants, catalog):
        quote = quote_vehicle_classes(0, 0, catalog, tariff)[0]
        assert quote.quote.base_fare == tariff.min_fare
        assert quote.min_price == tariff.min_fare

    def test_vehicle_quote_range_clamped_at_ceiling(self, tariff: TariffConstants, catalog):
        premium = quote_vehicle_classes(500_000, 36_000, catalog, tariff)[2]
        assert premium.quote.base_fare == tariff.max_fare
        assert premium.max_price == tariff.max_fare
        assert premium.min_price == Decimal("19500")

    def test_range_ends_are_payable_and_bracket_quote(self, tariff: TariffConstants, catalog):
        for q in quote_vehicle_classes(3_333, 777, catalog, tariff):
            assert q.min_price <= q.quote.base_fare <= q.max_price
            assert q.min_price % 100 == 0 and q.max_price % 100 == 0

    def test_zero_range_steps_is_the_quote(self, tariff: TariffConstants, catalog):
        compact = quote_vehicle_classes(2500, 600, catalog, tariff, range_steps=0)[0]
        assert compact.min_price == compact.max_price == Decimal("1488")

    def test_estimated_minutes_rounds_up(self, tariff: TariffConstants, catalog):
        quote = quote_vehicle_classes(1_000, 61, catalog, tariff)[0]
        assert quote.estimated_minutes == 2

    def test_default_catalog_used(self, tariff: TariffConstants):
        assert len(quote_vehicle_classes(1_000, 120, tariff=tariff)) == 3

    def test_negative_range_steps_rejected(self, tariff: TariffConstants):
        with pytest.raises(InvalidInputError):
            quote_vehicle_classes(1_000, 120, tariff=tariff, range_steps=-1)


class TestPricePerKm:

    def test_large_rounds_to_denomination(self, default_tariff: TariffConstants):
        # 150 × 1.25 = 187.5 → nearest ₡25 → 200
        assert price_per_km(1.25, default_tariff) == Decimal("200")

    def test_compact(self, default_tariff: TariffConstants):
        # 150 × 0.85 = 127.5 → 125
        assert price_per_km(0.85, default_tariff) == Decimal("125")

    def test_rejects_zero_factor(self, default_tariff: TariffConstants):
        with pytest.raises(InvalidInputError):
            price_per_km(0, default_tariff)
