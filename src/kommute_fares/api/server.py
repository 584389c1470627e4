"""FastAPI server — HTTP surface for the Kommute fare service.

Run with:
    uvicorn kommute_fares.api.server:app --reload --port 8000

Or:
    python -m kommute_fares.api.server

Endpoints:
    GET  /context              — self-describing manifest (pricing model + schemas)
    GET  /schema               — JSON Schema for PricingScenario
    GET  /tariff/defaults      — default scenario as JSON
    POST /quote                — quote one trip
    POST /quote/vehicles       — quote one trip for every vehicle class
    POST /adjust               — one fare negotiation step
    POST /split                — IVA / commission / driver split of a gross fare
    POST /estimate             — revenue projections + narrative
    POST /estimate/sensitivity — parameter sweep → tornado data

Every request may carry a partial ``tariff`` object; it is merged onto the
deployment's tariff (see ``kommute_fares.settings``).  Money is returned as
decimal strings.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Literal

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from kommute_fares import __version__
from kommute_fares.config.estimate import RevenueAssumptions
from kommute_fares.config.tariff import TariffConstants
from kommute_fares.config.vehicle import VehicleClass, default_vehicle_catalog
from kommute_fares.engine.adjust import adjust_price
from kommute_fares.engine.fare import build_trip_quote, quote_vehicle_classes
from kommute_fares.engine.geo import DEFAULT_AVERAGE_SPEED_KMH, estimate_duration, haversine_distance
from kommute_fares.engine.revenue import estimate_revenue
from kommute_fares.engine.split import split_fare
from kommute_fares.errors import InvalidInputError
from kommute_fares.finance.sensitivity import run_sensitivity
from kommute_fares.api.context import build_context, get_scenario_schema, get_default_scenario
from kommute_fares.api.narrative import generate_narrative
from kommute_fares.settings import FareServiceSettings, configure_logging

logger = logging.getLogger(__name__)

settings = FareServiceSettings()


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Kommute Fare Service API",
    version=__version__,
    description=(
        "Trip quotes, bounded fare negotiation, IVA/commission/driver splits and "
        "revenue projections for Kommute. Start with GET /context."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.reason, "field": exc.field, "value": str(exc.value)},
    )


@app.exception_handler(ValidationError)
async def tariff_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Rejected tariff on %s: %s", request.url.path, exc.error_count())
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


# ═══════════════════════════════════════════════════════════════════════════
# Request models
# ═══════════════════════════════════════════════════════════════════════════

class Coordinates(BaseModel):
    lat: float
    lon: float


class QuoteRequest(BaseModel):
    """Request body for /quote and /quote/vehicles.

    Give either ``distance_meters`` or both ``origin`` and ``destination``.
    A missing ``duration_seconds`` is estimated from ``average_speed_kmh``.
    """
    distance_meters: float | None = None
    duration_seconds: float | None = None
    origin: Coordinates | None = None
    destination: Coordinates | None = None
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH
    vehicle_cost_factor: float = Field(default=1.0, description="Only used by /quote")
    vehicles: list[dict[str, Any]] | None = Field(
        default=None,
        description="Override the vehicle catalog for /quote/vehicles. "
                    "Example: [{'vehicle_type': 'moto', 'name': 'Moto', 'cost_factor': 0.6}]",
    )
    tariff: dict[str, Any] = Field(default_factory=dict, description="Partial tariff override")


class AdjustRequest(BaseModel):
    current_fare: Decimal
    direction: str = Field(description="'up' or 'down'")
    tariff: dict[str, Any] = Field(default_factory=dict)


class SplitRequest(BaseModel):
    gross_fare: Decimal
    tariff: dict[str, Any] = Field(default_factory=dict)


class EstimateRequest(BaseModel):
    trips_per_day: int = 100
    avg_fare_excl_tax: Decimal = Decimal("2500")
    tariff: dict[str, Any] = Field(default_factory=dict)


class SensitivityRequest(EstimateRequest):
    sweep_params: list[dict[str, Any]] | None = Field(
        default=None,
        description="Override the default sweeps. "
                    "Format: [{'name': 'Commission', 'path': 'tariff.commission_rate', 'low_pct': -0.2, 'high_pct': 0.2}]",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_tariff(overrides: dict[str, Any]) -> TariffConstants:
    """Merge partial overrides onto the deployment tariff and re-validate."""
    if not overrides:
        return settings.tariff
    return TariffConstants(**{**settings.tariff.model_dump(), **overrides})


def _resolve_route(req: QuoteRequest) -> tuple[float, float]:
    """Distance and duration for a quote request."""
    distance = req.distance_meters
    if distance is None:
        if req.origin is None or req.destination is None:
            raise InvalidInputError(
                "distance_meters", None, "give distance_meters or both origin and destination",
            )
        distance = haversine_distance(req.origin.lat, req.origin.lon, req.destination.lat, req.destination.lon)
    duration = req.duration_seconds
    if duration is None:
        duration = estimate_duration(distance, req.average_speed_kmh)
    return distance, duration


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointer to /context."""
    return {
        "name": "Kommute Fare Service API",
        "version": __version__,
        "start_here": "GET /context?detail_level=full",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/context")
def get_context(
    detail_level: Literal["compact", "full"] = Query(
        default="full",
        description="'compact' for schemas only, 'full' for pricing model + formulas + guide",
    ),
):
    """Self-describing context manifest."""
    return build_context(detail_level)


@app.get("/schema")
def get_schema():
    """Full JSON Schema for PricingScenario."""
    return get_scenario_schema()


@app.get("/tariff/defaults")
def get_defaults():
    """Default scenario with the deployment's tariff."""
    defaults = get_default_scenario()
    defaults["tariff"] = settings.tariff.model_dump(mode="json")
    return defaults


@app.post("/quote")
def quote(req: QuoteRequest):
    """Quote one trip for a single cost factor."""
    tariff = _build_tariff(req.tariff)
    distance, duration = _resolve_route(req)
    trip_quote = build_trip_quote(distance, duration, req.vehicle_cost_factor, tariff)
    logger.debug("Quoted %.0f m / %.0f s at %s", distance, duration, trip_quote.base_fare)
    return trip_quote.model_dump(mode="json")


@app.post("/quote/vehicles")
def quote_vehicles(req: QuoteRequest):
    """Quote one trip for every vehicle class, with the negotiable price range."""
    tariff = _build_tariff(req.tariff)
    distance, duration = _resolve_route(req)
    if req.vehicles:
        catalog = [VehicleClass(**v) for v in req.vehicles]
    else:
        catalog = default_vehicle_catalog()
    quotes = quote_vehicle_classes(distance, duration, catalog, tariff)
    return {"quotes": [q.model_dump(mode="json") for q in quotes]}


@app.post("/adjust")
def adjust(req: AdjustRequest):
    """One negotiation step; saturates at the tariff bounds."""
    tariff = _build_tariff(req.tariff)
    fare = adjust_price(req.current_fare, req.direction, tariff)
    return {
        "previous_fare": str(req.current_fare),
        "fare": str(fare),
        "at_bound": fare in (tariff.min_fare, tariff.max_fare),
    }


@app.post("/split")
def split(req: SplitRequest):
    """Partition a gross fare into IVA, platform commission and driver earnings."""
    tariff = _build_tariff(req.tariff)
    return split_fare(req.gross_fare, tariff).model_dump(mode="json")


@app.post("/estimate")
def estimate(req: EstimateRequest):
    """Daily / weekly / monthly / annual revenue projections."""
    tariff = _build_tariff(req.tariff)
    result = estimate_revenue(req.trips_per_day, req.avg_fare_excl_tax, tariff)
    return {
        "estimate": result.model_dump(mode="json"),
        "narrative": generate_narrative(result, tariff),
    }


@app.post("/estimate/sensitivity")
def estimate_sensitivity(req: SensitivityRequest):
    """One-at-a-time sweeps, sorted by swing in annual platform revenue."""
    tariff = _build_tariff(req.tariff)
    assumptions = RevenueAssumptions(trips_per_day=req.trips_per_day, avg_fare_excl_tax=req.avg_fare_excl_tax)

    sweep_config = None
    if req.sweep_params:
        sweep_config = [
            (sp.get("name", sp["path"]), sp["path"], sp.get("low_pct", -0.15), sp.get("high_pct", 0.15))
            for sp in req.sweep_params
        ]

    result = run_sensitivity(tariff, assumptions, sweep_config)

    return {
        "base_revenue": str(result.base_revenue),
        "tornado_bars": [
            {
                "param_name": bar.param_name,
                "param_path": bar.param_path,
                "base_value": str(bar.base_value),
                "low_value": str(bar.low_value),
                "high_value": str(bar.high_value),
                "revenue_at_low": str(bar.revenue_at_low),
                "revenue_at_high": str(bar.revenue_at_high),
                "delta_revenue": str(bar.delta_revenue),
            }
            for bar in result.bars
        ],
    }


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    configure_logging(settings.log_level)
    logger.info("Starting fare service on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "kommute_fares.api.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
