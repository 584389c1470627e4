"""Context manifest generator — makes the fare service self-describing.

Produces structured context at two detail levels:
  - ``compact``: parameter schemas + descriptions
  - ``full``:    pricing model + formulas + interpretation guide

A client reads ``GET /context?detail_level=full`` once, then knows what it
can configure, what to call, and how to read the outputs.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from kommute_fares import __version__
from kommute_fares.config import (
    PricingScenario,
    RevenueAssumptions,
    TariffConstants,
    VehicleClass,
)


# ═══════════════════════════════════════════════════════════════════════════
# Public response models
# ═══════════════════════════════════════════════════════════════════════════

class ParameterInfo(BaseModel):
    """One configurable parameter, machine-readable."""
    name: str
    type: str
    default: Any
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class SectionSchema(BaseModel):
    """Schema for one configuration section (tariff, vehicles, assumptions)."""
    section: str
    description: str
    parameters: list[ParameterInfo]


class OutputFieldInfo(BaseModel):
    """One output field, machine-readable."""
    name: str
    type: str
    description: str
    unit: str = ""


class EndpointInfo(BaseModel):
    """Description of one API endpoint."""
    method: str
    path: str
    description: str
    request_body: str = ""
    response: str = ""


class ServiceContext(BaseModel):
    """Full self-describing context."""
    service_name: str
    version: str
    description: str
    pricing_model: str
    key_formulas: list[dict[str, str]]
    input_sections: list[SectionSchema]
    key_outputs: list[OutputFieldInfo]
    endpoints: list[EndpointInfo]
    interpretation_guide: str


# ═══════════════════════════════════════════════════════════════════════════
# Schema extraction from Pydantic models
# ═══════════════════════════════════════════════════════════════════════════

def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        constraints: dict[str, Any] = {}
        for attr in ("ge", "gt", "le", "lt"):
            meta_val = _get_field_metadata(field_info, attr)
            if meta_val is not None:
                constraints[attr] = str(meta_val)

        default = field_info.default
        default_val = str(default) if default is not None and not callable(default) else None

        type_str = getattr(field_info.annotation, "__name__", str(field_info.annotation))

        params.append(ParameterInfo(
            name=name,
            type=type_str,
            default=default_val,
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


def _get_field_metadata(field_info: Any, attr: str) -> Any:
    """Extract constraint metadata from Pydantic field info."""
    for m in getattr(field_info, "metadata", []):
        if hasattr(m, attr):
            return getattr(m, attr)
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Context builders
# ═══════════════════════════════════════════════════════════════════════════

_PRICING_MODEL = """
Kommute Fare Service — trip pricing for the Kommute ride-hailing product (Costa Rica, ₡ CRC)

WHAT IT DOES:
  - Quotes a trip from distance, duration and vehicle class (cost factor)
  - Lets the rider nudge the quoted fare up or down in fixed steps, never
    leaving the policy bounds
  - Splits a rider-facing fare into IVA, platform commission and driver earnings
  - Projects daily / weekly / monthly / annual revenue from a trip volume

THE MONEY:
  - The rider pays the gross fare, which already includes IVA (13%)
  - Commission (15%) and driver share (85%) are taken from the net fare
  - All amounts are exact decimals; splits are held to céntimos
"""

_INTERPRETATION_GUIDE = """
HOW TO READ RESULTS:

1. QUOTE:
   Always within [min_fare, max_fare].  At a bound, adjusting further in that
   direction returns the same fare.

2. SPLIT:
   platform_commission + driver_earnings + tax_amount == gross_fare, exactly.

3. PROJECTIONS:
   revenue = platform commission.  weekly = 7 × daily, monthly = 30 × daily,
   annual = 365 × daily.

4. SENSITIVITY:
   Bars sorted by swing in annual platform revenue.  The top bar is the
   assumption that matters most.
"""

_KEY_FORMULAS = [
    {
        "name": "Trip fare",
        "formula": "clamp((base_fare + km × per_km_rate + minutes × per_minute_rate) × cost_factor, min_fare, max_fare)",
        "meaning": "Rounded to rounding_increment (₡1 by default)",
    },
    {
        "name": "Fare adjustment",
        "formula": "up: min(fare + step, max_fare); down: max(fare - step, min_fare)",
        "meaning": "Saturating negotiation step",
    },
    {
        "name": "Net fare",
        "formula": "gross_fare / (1 + tax_rate)",
        "meaning": "Fare excluding IVA; commission and driver share are computed on this",
    },
    {
        "name": "Annual revenue",
        "formula": "trips_per_day × 365 × per-trip platform_commission",
        "meaning": "Per-trip split scaled linearly by volume",
    },
]

_KEY_OUTPUTS = [
    OutputFieldInfo(name="fare", type="Decimal", description="Quoted or adjusted fare", unit="₡"),
    OutputFieldInfo(name="split.tax_amount", type="Decimal", description="IVA included in the gross fare", unit="₡"),
    OutputFieldInfo(name="split.platform_commission", type="Decimal", description="Platform's share of the net fare", unit="₡"),
    OutputFieldInfo(name="split.driver_earnings", type="Decimal", description="Driver's share of the net fare", unit="₡"),
    OutputFieldInfo(name="estimate.<period>.revenue", type="Decimal", description="Platform commission over the period", unit="₡"),
    OutputFieldInfo(name="estimate.<period>.iva_collected", type="Decimal", description="IVA collected over the period", unit="₡"),
]

_ENDPOINTS = [
    EndpointInfo(method="GET", path="/context", description="This manifest.", response="ServiceContext"),
    EndpointInfo(method="GET", path="/schema", description="JSON Schema of PricingScenario.", response="JSON Schema object"),
    EndpointInfo(method="GET", path="/tariff/defaults", description="Default scenario (tariff, vehicles, assumptions).", response="PricingScenario JSON"),
    EndpointInfo(
        method="POST", path="/quote",
        description="Quote one trip. Give distance/duration or origin/destination coordinates.",
        request_body="QuoteRequest", response="TripQuote",
    ),
    EndpointInfo(
        method="POST", path="/quote/vehicles",
        description="Quote one trip for every vehicle class with its negotiable range.",
        request_body="QuoteRequest", response="list[VehicleQuote]",
    ),
    EndpointInfo(method="POST", path="/adjust", description="One negotiation step.", request_body="AdjustRequest", response="fare"),
    EndpointInfo(method="POST", path="/split", description="Split a gross fare.", request_body="SplitRequest", response="FareSplit"),
    EndpointInfo(
        method="POST", path="/estimate",
        description="Revenue projections with plain-English narrative.",
        request_body="EstimateRequest", response="RevenueEstimate + narrative",
    ),
    EndpointInfo(
        method="POST", path="/estimate/sensitivity",
        description="Tornado data: annual revenue swing per swept input.",
        request_body="EstimateRequest + optional sweep_params", response="list of TornadoBar",
    ),
]

_INPUT_SECTIONS = [
    ("tariff", TariffConstants, "Tariff table — rates, splits, bounds, negotiation step"),
    ("vehicles", VehicleClass, "Vehicle class (list) — cost factor per class"),
    ("assumptions", RevenueAssumptions, "Revenue assumptions — trips per day, average fare excl. IVA"),
]


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def build_context(detail_level: Literal["compact", "full"] = "full") -> ServiceContext:
    """Build the self-describing context manifest."""
    sections = [
        SectionSchema(section=name, description=desc, parameters=_extract_params(model_cls))
        for name, model_cls, desc in _INPUT_SECTIONS
    ]
    full = detail_level == "full"

    return ServiceContext(
        service_name="Kommute Fare Service",
        version=__version__,
        description=(
            "Stateless fare calculation for Kommute: trip quotes, bounded fare negotiation, "
            "IVA/commission/driver splits and revenue projections."
        ),
        pricing_model=_PRICING_MODEL.strip() if full else "",
        key_formulas=_KEY_FORMULAS if full else [],
        input_sections=sections,
        key_outputs=_KEY_OUTPUTS,
        endpoints=_ENDPOINTS,
        interpretation_guide=_INTERPRETATION_GUIDE.strip() if full else "",
    )


def get_scenario_schema() -> dict:
    """Return the full JSON Schema for PricingScenario."""
    return PricingScenario.model_json_schema()


def get_default_scenario() -> dict:
    """Return the default PricingScenario as a JSON-serializable dict."""
    return PricingScenario().model_dump(mode="json")
