"""Sensitivity / tornado analysis of the revenue estimate.

Vary one input at a time, measure the swing in annual platform revenue
(commission).  Produces tornado chart data sorted by impact.

Default sweep set:
  - assumptions.trips_per_day ± 25%
  - assumptions.avg_fare_excl_tax ± 10%
  - tariff.commission_rate ± 20%
  - tariff.tax_rate ± 20%
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from kommute_fares.config.estimate import RevenueAssumptions
from kommute_fares.config.tariff import TariffConstants
from kommute_fares.engine.money import to_money
from kommute_fares.engine.revenue import estimate_from_assumptions
from kommute_fares.errors import InvalidInputError


@dataclass(frozen=True)
class TornadoBar:
    """One bar in the tornado chart."""

    param_name: str
    """Human-readable parameter name."""

    param_path: str
    """Dot-path, e.g. 'tariff.commission_rate'."""

    base_value: Decimal
    low_value: Decimal
    high_value: Decimal

    revenue_at_low: Decimal
    """Annual platform revenue when param = low_value."""

    revenue_at_high: Decimal
    """Annual platform revenue when param = high_value."""

    delta_revenue: Decimal
    """abs(revenue_at_high − revenue_at_low) — total swing width."""


@dataclass
class SensitivityResult:
    """Complete sensitivity analysis output."""

    base_revenue: Decimal
    """Annual platform revenue of the base inputs."""

    bars: list[TornadoBar] = field(default_factory=list)
    """Tornado bars sorted by delta_revenue (descending)."""


DEFAULT_SWEEPS: list[tuple[str, str, float, float]] = [
    ("Trips per day", "assumptions.trips_per_day", -0.25, 0.25),
    ("Average fare (excl. IVA)", "assumptions.avg_fare_excl_tax", -0.10, 0.10),
    ("Commission rate", "tariff.commission_rate", -0.20, 0.20),
    ("IVA rate", "tariff.tax_rate", -0.20, 0.20),
]

_SECTIONS = ("assumptions", "tariff")


def _with_value(
    tariff: TariffConstants,
    assumptions: RevenueAssumptions,
    path: str,
    value: Decimal,
) -> tuple[TariffConstants, RevenueAssumptions]:
    """Return copies of the inputs with *path* set to *value*.

    Integer fields are rounded; fractional rates are capped to [0, 1], and
    moving the commission rate moves the driver share with it.
    """
    section, _, name = path.partition(".")
    if section == "assumptions":
        if name not in RevenueAssumptions.model_fields:
            raise InvalidInputError("path", path, "unknown assumptions field")
        if RevenueAssumptions.model_fields[name].annotation is int:
            value = int(value.to_integral_value())
        return tariff, assumptions.model_copy(update={name: value})

    if name not in TariffConstants.model_fields:
        raise InvalidInputError("path", path, "unknown tariff field")
    updates: dict[str, Decimal] = {name: value}
    if name in ("commission_rate", "driver_share_rate", "tax_rate"):
        updates[name] = min(max(value, Decimal(0)), Decimal(1))
    if name == "commission_rate":
        updates["driver_share_rate"] = 1 - updates[name]
    elif name == "driver_share_rate":
        updates["commission_rate"] = 1 - updates[name]
    # Re-validate so that the tariff invariants still hold.
    return TariffConstants(**{**tariff.model_dump(), **updates}), assumptions


def run_sensitivity(
    tariff: TariffConstants,
    assumptions: RevenueAssumptions,
    sweeps: list[tuple[str, str, float, float]] | None = None,
) -> SensitivityResult:
    """Run the one-at-a-time sweeps.

    Parameters
    ----------
    tariff : TariffConstants
        Base tariff.
    assumptions : RevenueAssumptions
        Base trip volume and average fare.
    sweeps : list[tuple[name, path, low_pct, high_pct]] | None
        Parameter sweeps. None = use DEFAULT_SWEEPS.

    Returns
    -------
    SensitivityResult
        Tornado bars sorted by annual revenue impact.
    """
    if sweeps is None:
        sweeps = DEFAULT_SWEEPS

    base_revenue = estimate_from_assumptions(assumptions, tariff).annual.revenue
    bars: list[TornadoBar] = []

    for name, path, low_pct, high_pct in sweeps:
        section, _, attr = path.partition(".")
        if section not in _SECTIONS:
            raise InvalidInputError("path", path, f"must start with one of {_SECTIONS}")
        source = tariff if section == "tariff" else assumptions
        try:
            base_val = to_money(getattr(source, attr))
        except AttributeError:
            raise InvalidInputError("path", path, "unknown field") from None

        low_val = base_val * (1 + to_money(low_pct))
        high_val = base_val * (1 + to_money(high_pct))

        low_tariff, low_assumptions = _with_value(tariff, assumptions, path, low_val)
        high_tariff, high_assumptions = _with_value(tariff, assumptions, path, high_val)
        revenue_low = estimate_from_assumptions(low_assumptions, low_tariff).annual.revenue
        revenue_high = estimate_from_assumptions(high_assumptions, high_tariff).annual.revenue

        bars.append(TornadoBar(
            param_name=name,
            param_path=path,
            base_value=base_val,
            low_value=low_val,
            high_value=high_val,
            revenue_at_low=revenue_low,
            revenue_at_high=revenue_high,
            delta_revenue=abs(revenue_high - revenue_low),
        ))

    # Largest swing first
    bars.sort(key=lambda b: b.delta_revenue, reverse=True)

    return SensitivityResult(base_revenue=base_revenue, bars=bars)
