"""Tests for the HTTP API layer.

Covers:
  - Context manifest, schema and defaults endpoints
  - Quote / vehicle quote / adjust / split / estimate / sensitivity endpoints
  - Error mapping (InvalidInputError and bad tariffs → 422)
  - Narrative generation
"""

from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

from kommute_fares.api.context import build_context, get_default_scenario, get_scenario_schema
from kommute_fares.api.narrative import generate_narrative
from kommute_fares.api.server import app
from kommute_fares.config import TariffConstants
from kommute_fares.engine.revenue import estimate_revenue

client = TestClient(app)

REFERENCE_TARIFF = {
    "base_fare": 500,
    "per_km_rate": 300,
    "per_minute_rate": 50,
    "min_fare": 1000,
    "max_fare": 20000,
    "adjustment_step": 100,
}


# ═══════════════════════════════════════════════════════════════════════════
# Context / schema
# ═══════════════════════════════════════════════════════════════════════════

class TestContext:

    def test_build_context_full(self):
        ctx = build_context("full")
        assert ctx.service_name == "Kommute Fare Service"
        assert len(ctx.pricing_model) > 100
        assert len(ctx.key_formulas) >= 4
        assert [s.section for s in ctx.input_sections] == ["tariff", "vehicles", "assumptions"]

    def test_build_context_compact(self):
        ctx = build_context("compact")
        assert ctx.pricing_model == ""
        assert ctx.key_formulas == []
        assert ctx.interpretation_guide == ""
        assert len(ctx.input_sections) == 3

    def test_tariff_parameters_have_constraints(self):
        tariff_section = build_context("compact").input_sections[0]
        params = {p.name: p for p in tariff_section.parameters}
        assert params["commission_rate"].constraints == {"ge": "0", "le": "1"}
        assert params["adjustment_step"].constraints == {"gt": "0"}

    def test_schema_and_defaults(self):
        assert "tariff" in get_scenario_schema()["properties"]
        defaults = get_default_scenario()
        assert defaults["tariff"]["tax_rate"] == "0.13"
        assert len(defaults["vehicles"]) == 3

    def test_endpoints(self):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/").json()["name"] == "Kommute Fare Service API"
        assert client.get("/context", params={"detail_level": "compact"}).status_code == 200
        assert client.get("/schema").status_code == 200
        assert Decimal(client.get("/tariff/defaults").json()["tariff"]["min_fare"]) == 1200


# ═══════════════════════════════════════════════════════════════════════════
# Quotes
# ═══════════════════════════════════════════════════════════════════════════

class TestQuoteEndpoints:

    def test_quote_worked_example(self):
        resp = client.post("/quote", json={
            "distance_meters": 2500, "duration_seconds": 600,
            "vehicle_cost_factor": 0.85, "tariff": REFERENCE_TARIFF,
        })
        assert resp.status_code == 200
        assert Decimal(resp.json()["base_fare"]) == Decimal("1488")

    def test_quote_default_tariff_floor(self):
        resp = client.post("/quote", json={"distance_meters": 2500, "duration_seconds": 600, "vehicle_cost_factor": 0.85})
        assert Decimal(resp.json()["base_fare"]) == Decimal("1200")

    def test_quote_estimates_duration(self):
        resp = client.post("/quote", json={"distance_meters": 8000})
        body = resp.json()
        assert body["duration_seconds"] == 960
        assert Decimal(body["base_fare"]) == Decimal("2440")

    def test_quote_from_coordinates(self):
        resp = client.post("/quote", json={
            "origin": {"lat": 9.9281, "lon": -84.0907},
            "destination": {"lat": 9.9986, "lon": -84.1170},
        })
        assert resp.status_code == 200
        assert 8_000 < resp.json()["distance_meters"] < 8_700

    def test_quote_without_route_rejected(self):
        resp = client.post("/quote", json={"duration_seconds": 600})
        assert resp.status_code == 422
        assert resp.json()["field"] == "distance_meters"

    def test_quote_negative_distance_rejected(self):
        resp = client.post("/quote", json={"distance_meters": -1, "duration_seconds": 10})
        assert resp.status_code == 422
        assert resp.json()["field"] == "distance_meters"

    def test_vehicle_quotes(self):
        resp = client.post("/quote/vehicles", json={
            "distance_meters": 2500, "duration_seconds": 600, "tariff": REFERENCE_TARIFF,
        })
        quotes = resp.json()["quotes"]
        assert [q["vehicle_type"] for q in quotes] == ["kommute-4", "kommute-large", "kommute-premium"]
        assert quotes[0]["price_formatted"] == "₡1,488"
        assert Decimal(quotes[0]["min_price"]) == Decimal("1200")

    def test_vehicle_quotes_custom_catalog(self):
        resp = client.post("/quote/vehicles", json={
            "distance_meters": 2500, "duration_seconds": 600, "tariff": REFERENCE_TARIFF,
            "vehicles": [{"vehicle_type": "moto", "name": "Moto", "cost_factor": 0.6}],
        })
        quotes = resp.json()["quotes"]
        assert len(quotes) == 1
        assert Decimal(quotes[0]["quote"]["base_fare"]) == Decimal("1050")


# ═══════════════════════════════════════════════════════════════════════════
# Adjust / split
# ═══════════════════════════════════════════════════════════════════════════

class TestAdjustSplitEndpoints:

    def test_adjust_up(self):
        resp = client.post("/adjust", json={"current_fare": 2000, "direction": "up"})
        body = resp.json()
        assert Decimal(body["fare"]) == Decimal("2050")
        assert body["at_bound"] is False

    def test_adjust_saturates(self):
        resp = client.post("/adjust", json={"current_fare": 1200, "direction": "down"})
        body = resp.json()
        assert Decimal(body["fare"]) == Decimal("1200")
        assert body["at_bound"] is True

    def test_adjust_bad_direction(self):
        resp = client.post("/adjust", json={"current_fare": 2000, "direction": "sideways"})
        assert resp.status_code == 422
        assert resp.json()["field"] == "direction"

    def test_split(self):
        resp = client.post("/split", json={"gross_fare": 1000})
        body = resp.json()
        assert Decimal(body["net_fare"]) == Decimal("884.96")
        assert Decimal(body["platform_commission"]) == Decimal("132.74")
        assert Decimal(body["driver_earnings"]) == Decimal("752.22")
        assert Decimal(body["tax_amount"]) == Decimal("115.04")

    def test_split_negative_rejected(self):
        resp = client.post("/split", json={"gross_fare": -50})
        assert resp.status_code == 422

    def test_invalid_tariff_override_rejected(self):
        resp = client.post("/split", json={"gross_fare": 1000, "tariff": {"commission_rate": 0.5}})
        assert resp.status_code == 422
        assert isinstance(resp.json()["detail"], list)

    def test_misspelled_tariff_key_rejected(self):
        resp = client.post("/split", json={"gross_fare": 1000, "tariff": {"tax_rat": 0.2}})
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["type"] == "extra_forbidden"


# ═══════════════════════════════════════════════════════════════════════════
# Estimate / sensitivity
# ═══════════════════════════════════════════════════════════════════════════

class TestEstimateEndpoints:

    def test_estimate(self):
        resp = client.post("/estimate", json={"trips_per_day": 100, "avg_fare_excl_tax": 2500})
        body = resp.json()
        assert Decimal(body["estimate"]["annual"]["revenue"]) == Decimal("13687500")
        assert body["estimate"]["weekly"]["trips"] == 700
        assert "PROJECTIONS" in body["narrative"]

    def test_estimate_negative_trips(self):
        resp = client.post("/estimate", json={"trips_per_day": -5})
        assert resp.status_code == 422

    def test_sensitivity(self):
        resp = client.post("/estimate/sensitivity", json={})
        body = resp.json()
        assert Decimal(body["base_revenue"]) == Decimal("13687500")
        assert body["tornado_bars"][0]["param_path"] == "assumptions.trips_per_day"

    def test_sensitivity_custom_sweep(self):
        resp = client.post("/estimate/sensitivity", json={
            "sweep_params": [{"name": "Fare", "path": "assumptions.avg_fare_excl_tax", "low_pct": -0.1, "high_pct": 0.1}],
        })
        bars = resp.json()["tornado_bars"]
        assert len(bars) == 1
        assert Decimal(bars[0]["delta_revenue"]) == Decimal("2737500")

    def test_sensitivity_bad_path(self):
        resp = client.post("/estimate/sensitivity", json={"sweep_params": [{"path": "tariff.nope"}]})
        assert resp.status_code == 422


class TestNarrative:

    def test_sections(self):
        tariff = TariffConstants()
        text = generate_narrative(estimate_revenue(100, 2500, tariff), tariff)
        assert "PER-TRIP SPLIT" in text
        assert "₡2,825.00" in text
        assert "annual" in text
        assert "Platform commission (15%)" in text

    def test_zero_trips_note(self):
        tariff = TariffConstants()
        text = generate_narrative(estimate_revenue(0, 2500, tariff), tariff)
        assert "No trips assumed" in text
