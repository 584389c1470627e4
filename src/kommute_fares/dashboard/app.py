"""Kommute fare dashboard — Streamlit admin screens.

Layout: sidebar inputs → main area with three tabs (Revenue | Sensitivity | Fare Quote).

Run with:
    streamlit run src/kommute_fares/dashboard/app.py
"""

from __future__ import annotations

from decimal import Decimal

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from pydantic import ValidationError

from kommute_fares.config import RevenueAssumptions, TariffConstants, default_vehicle_catalog
from kommute_fares.engine.adjust import adjust_price
from kommute_fares.engine.fare import quote_vehicle_classes
from kommute_fares.engine.geo import estimate_duration
from kommute_fares.engine.money import format_crc
from kommute_fares.engine.revenue import estimate_from_assumptions, project_volume_curve
from kommute_fares.errors import InvalidInputError
from kommute_fares.finance.sensitivity import run_sensitivity

# ---------------------------------------------------------------------------
# Default instances used as sidebar defaults
# ---------------------------------------------------------------------------
_DEF_T = TariffConstants()
_DEF_A = RevenueAssumptions()

st.set_page_config(page_title="Kommute Fares", page_icon="🚕", layout="wide")


def _card(label: str, value: str, accent: str = "#65ea06") -> str:
    """Return HTML for a metric card with a coloured top accent."""
    return f"""
    <div style="border: 1px solid rgba(255,255,255,0.05); border-top: 3px solid {accent};
                border-radius: 8px; padding: 12px 14px; text-align: center;">
        <div style="font-size: 1.2rem; font-weight: 700;">{value}</div>
        <div style="font-size: 0.65rem; text-transform: uppercase; letter-spacing: 0.6px;
                    opacity: 0.5;">{label}</div>
    </div>
    """


# ---------------------------------------------------------------------------
# SIDEBAR: Inputs
# ---------------------------------------------------------------------------
st.sidebar.header("Tariff & Assumptions")

with st.sidebar.expander("Tariff", expanded=True):
    t_base = st.number_input("Base fare (₡)", 0, 10_000, int(_DEF_T.base_fare), 50)
    t_km = st.number_input("Per km (₡)", 0, 5_000, int(_DEF_T.per_km_rate), 10)
    t_min = st.number_input("Per minute (₡)", 0, 1_000, int(_DEF_T.per_minute_rate), 5)
    c1, c2 = st.columns(2)
    t_floor = c1.number_input("Min fare (₡)", 0, 50_000, int(_DEF_T.min_fare), 100)
    t_ceiling = c2.number_input("Max fare (₡)", 0, 1_000_000, int(_DEF_T.max_fare), 1_000)
    t_step = st.number_input("Adjustment step (₡)", 1, 1_000, int(_DEF_T.adjustment_step), 5)
    t_commission = st.slider("Commission", 0.0, 1.0, float(_DEF_T.commission_rate), 0.01,
                             help="Driver share is 1 − commission")
    t_tax = st.slider("IVA", 0.0, 0.30, float(_DEF_T.tax_rate), 0.01)

with st.sidebar.expander("Revenue assumptions", expanded=True):
    a_trips = st.number_input("Trips per day", 0, 1_000_000, _DEF_A.trips_per_day, 10)
    a_fare = st.number_input("Average fare excl. IVA (₡)", 0, 100_000, int(_DEF_A.avg_fare_excl_tax), 100)

try:
    tariff = TariffConstants(
        base_fare=t_base,
        per_km_rate=t_km,
        per_minute_rate=t_min,
        min_fare=t_floor,
        max_fare=t_ceiling,
        adjustment_step=t_step,
        commission_rate=Decimal(str(t_commission)),
        driver_share_rate=1 - Decimal(str(t_commission)),
        tax_rate=Decimal(str(t_tax)),
    )
except ValidationError as exc:
    st.error(f"Invalid tariff: {exc.errors()[0]['msg']}")
    st.stop()

assumptions = RevenueAssumptions(trips_per_day=a_trips, avg_fare_excl_tax=a_fare)
estimate = estimate_from_assumptions(assumptions, tariff)

revenue_tab, sensitivity_tab, quote_tab = st.tabs(["Revenue", "Sensitivity", "Fare Quote"])


# ═══════════════════════════════════════════════════════════════════════════
# ==================  REVENUE TAB  ========================================
# ═══════════════════════════════════════════════════════════════════════════
with revenue_tab:
    st.header("Per-trip split")
    s = estimate.per_trip
    cols = st.columns(4)
    cards = [
        ("Rider pays", format_crc(s.gross_fare, include_decimals=True), "#0984e3"),
        ("Commission", format_crc(s.platform_commission, include_decimals=True), "#65ea06"),
        ("Driver", format_crc(s.driver_earnings, include_decimals=True), "#fdcb6e"),
        ("IVA", format_crc(s.tax_amount, include_decimals=True), "#e17055"),
    ]
    for col, (label, value, accent) in zip(cols, cards):
        col.markdown(_card(label, value, accent), unsafe_allow_html=True)

    st.header("Projections")
    df = pd.DataFrame([
        {
            "Period": p.period.value.title(),
            "Trips": p.trips,
            "Revenue (commission)": float(p.revenue),
            "Driver earnings": float(p.driver_earnings),
            "IVA collected": float(p.iva_collected),
            "Gross fares": float(p.gross_fares),
        }
        for p in estimate.projections()
    ])
    st.dataframe(
        df.style.format({c: "₡{:,.0f}" for c in df.columns if c not in ("Period", "Trips")}),
        hide_index=True, use_container_width=True,
    )

    st.subheader("Annual totals vs daily volume")
    top = max(a_trips * 2, 10)
    curve = project_volume_curve(np.linspace(0, top, 41).astype(int), a_fare, tariff)
    fig = go.Figure()
    for key, name in (("revenue", "Commission"), ("driver_earnings", "Driver earnings"), ("iva_collected", "IVA")):
        fig.add_trace(go.Scatter(x=curve["trips_per_day"], y=curve[key], mode="lines", name=name))
    fig.add_vline(x=a_trips, line_dash="dot")
    fig.update_layout(xaxis_title="Trips per day", yaxis_title="₡ per year", height=380)
    st.plotly_chart(fig, use_container_width=True)


# ═══════════════════════════════════════════════════════════════════════════
# ==================  SENSITIVITY TAB  ====================================
# ═══════════════════════════════════════════════════════════════════════════
with sensitivity_tab:
    st.header("What moves annual revenue")
    result = run_sensitivity(tariff, assumptions)
    st.metric("Base annual revenue", format_crc(result.base_revenue))

    bars = list(reversed(result.bars))
    base = float(result.base_revenue)
    fig_t = go.Figure()
    fig_t.add_trace(go.Bar(
        y=[b.param_name for b in bars], x=[float(b.revenue_at_low) - base for b in bars],
        orientation="h", name="Low",
    ))
    fig_t.add_trace(go.Bar(
        y=[b.param_name for b in bars], x=[float(b.revenue_at_high) - base for b in bars],
        orientation="h", name="High",
    ))
    fig_t.update_layout(barmode="overlay", xaxis_title="Δ annual revenue (₡)", height=320)
    st.plotly_chart(fig_t, use_container_width=True)


# ═══════════════════════════════════════════════════════════════════════════
# ==================  FARE QUOTE TAB  =====================================
# ═══════════════════════════════════════════════════════════════════════════
with quote_tab:
    st.header("Quote a trip")
    c1, c2 = st.columns(2)
    q_km = c1.number_input("Distance (km)", 0.0, 500.0, 8.0, 0.5)
    q_speed = c2.number_input("Average speed (km/h)", 5.0, 120.0, 30.0, 5.0)
    distance_m = q_km * 1_000
    duration_s = estimate_duration(distance_m, q_speed)

    quotes = quote_vehicle_classes(distance_m, duration_s, default_vehicle_catalog(), tariff)
    st.dataframe(pd.DataFrame([
        {
            "Vehicle": q.name,
            "Price": q.price_formatted,
            "Range": f"{format_crc(q.min_price)} – {format_crc(q.max_price)}",
            "Time": f"{q.estimated_minutes} min",
        }
        for q in quotes
    ]), hide_index=True, use_container_width=True)

    choice = st.selectbox("Negotiate", [q.name for q in quotes])
    selected = next(q for q in quotes if q.name == choice)
    key = f"fare::{selected.vehicle_type}::{selected.quote.base_fare}"
    if key not in st.session_state:
        st.session_state[key] = selected.quote.base_fare

    b1, b2, b3 = st.columns([1, 2, 1])
    try:
        if b1.button("− ₡" + str(tariff.adjustment_step)):
            st.session_state[key] = adjust_price(st.session_state[key], "down", tariff)
        if b3.button("+ ₡" + str(tariff.adjustment_step)):
            st.session_state[key] = adjust_price(st.session_state[key], "up", tariff)
    except InvalidInputError as exc:
        st.error(str(exc))
    b2.metric("Offered fare", format_crc(st.session_state[key]))
