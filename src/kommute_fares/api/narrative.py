"""Narrative generator — plain-English reading of a revenue estimate."""

from __future__ import annotations

from kommute_fares.config.tariff import TariffConstants
from kommute_fares.engine.money import format_crc
from kommute_fares.models.results import RevenueEstimate


def _pct(rate) -> str:
    return f"{rate * 100:.0f}%"


def generate_narrative(estimate: RevenueEstimate, tariff: TariffConstants) -> str:
    """Text block covering the per-trip split and the four period projections."""
    t = estimate.per_trip
    sections: list[str] = []

    sections.append("=" * 60)
    sections.append("PER-TRIP SPLIT")
    sections.append("=" * 60)
    sections.append(
        f"Rider pays (incl. IVA {_pct(tariff.tax_rate)}): {format_crc(t.gross_fare, include_decimals=True)}\n"
        f"Net fare: {format_crc(t.net_fare, include_decimals=True)}\n"
        f"Platform commission ({_pct(tariff.commission_rate)}): "
        f"{format_crc(t.platform_commission, include_decimals=True)}\n"
        f"Driver earnings ({_pct(tariff.driver_share_rate)}): "
        f"{format_crc(t.driver_earnings, include_decimals=True)}\n"
        f"IVA: {format_crc(t.tax_amount, include_decimals=True)}"
    )

    sections.append("")
    sections.append("=" * 60)
    sections.append("PROJECTIONS")
    sections.append("=" * 60)
    for p in estimate.projections():
        sections.append(
            f"  {p.period.value:8s}  {p.trips:>10,} trips  "
            f"revenue {format_crc(p.revenue):>16s}  "
            f"drivers {format_crc(p.driver_earnings):>16s}  "
            f"IVA {format_crc(p.iva_collected):>14s}"
        )

    if estimate.daily.trips == 0:
        sections.append("\nNo trips assumed: every projection is zero.")

    return "\n".join(sections)
