"""
AirFlow Integrity Monitor — Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import time

import streamlit as st

from config import TICK_INTERVAL_MS
from data.mock_data import get_preset_breach_zones
from monitoring.engine import ContainmentEngine, wall_clock_ms
from visualization.plots import (
    ALERT_COLORS,
    create_fiber_profile,
    create_pressure_figure,
    create_rack_zone_figure,
    create_bari_gauge,
)

# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="AirFlow Integrity Monitor",
    page_icon="🌡️",
    layout="wide",
)

st.title("AirFlow Integrity Monitor")
st.markdown(
    "Distributed fiber-optic sensing for data-center containment. "
    "Induce a breach from the sidebar and watch the fiber, the pressure "
    "zones and the Breach Risk Index respond."
)

# ── Engine (one per browser session) ─────────────────────────────────────────

if "engine" not in st.session_state:
    st.session_state.engine = ContainmentEngine()
engine: ContainmentEngine = st.session_state.engine

# ── Sidebar Controls ─────────────────────────────────────────────────────────

st.sidebar.header("Demo Controls")

for zone in get_preset_breach_zones():
    if st.sidebar.button(f"⚡ {zone['label']}", key=f"induce_{zone['position']}"):
        engine.induce_breach(zone["position"], zone["label"])

if st.sidebar.button("✓ Clear All"):
    engine.clear_all_breaches()

live = st.sidebar.checkbox(
    "Live updates",
    value=True,
    help="Advance the simulation every 500 ms. Uncheck to freeze the display.",
)

# Button clicks also rerun the script; only tick when a full interval has passed.
snapshot = engine.get_snapshot()
if live and wall_clock_ms() - snapshot.timestamp >= TICK_INTERVAL_MS:
    snapshot = engine.tick()

if snapshot.active_breaches:
    st.sidebar.caption(f"{len(snapshot.active_breaches)} active breach(es)")

# ── Metrics Row ──────────────────────────────────────────────────────────────

m1, m2, m3, m4, m5 = st.columns(5)
m1.metric("System Status", snapshot.system_status)
m2.metric("BARI", f"{snapshot.risk.bari_pct}", snapshot.classification.replace("_", " "))
m3.metric("Peak ΔT", f"+{snapshot.risk.max_delta:.1f}°C")
if snapshot.time_to_limit_min is not None:
    mins = int(snapshot.time_to_limit_min)
    secs = int((snapshot.time_to_limit_min % 1) * 60)
    m4.metric("Time to A1 Limit", f"{mins}:{secs:02d}", f"+{snapshot.trend_c_per_min:.2f}°C/min",
              delta_color="inverse")
else:
    m4.metric("Time to A1 Limit", "—")
m5.metric(
    "Bypass Cost",
    f"${snapshot.bypass.cost_per_hour:.2f}/hr",
    f"{snapshot.bypass.co2_g_per_hour:.0f} g CO₂/hr",
    delta_color="off",
)

critical = snapshot.critical_alert
if critical is not None:
    st.error(f"**{critical.level}** — {critical.message} · {critical.zone_label}"
             + (f" · {critical.physical_location}" if critical.physical_location else ""))

# ── Plots ────────────────────────────────────────────────────────────────────

st.plotly_chart(create_fiber_profile(snapshot), use_container_width=True)

col_gauge, col_dp, col_racks = st.columns(3)
col_gauge.plotly_chart(create_bari_gauge(snapshot), use_container_width=True)
col_dp.plotly_chart(create_pressure_figure(snapshot), use_container_width=True)
col_racks.plotly_chart(create_rack_zone_figure(snapshot), use_container_width=True)

# ── Alert Log ────────────────────────────────────────────────────────────────

st.subheader(f"Alerts ({snapshot.unacknowledged_count} unacknowledged)")

if not snapshot.alerts:
    st.info("No alerts. Induce a breach to see the detection pipeline in action.")

for alert in snapshot.alerts:
    color = ALERT_COLORS.get(alert.level, "#3a5a70")
    col_text, col_ack = st.columns([5, 1])
    col_text.markdown(
        f"<span style='color:{color}'>**{alert.level}**</span> "
        f"`{alert.time_label}` — {alert.message}  \n"
        f"{alert.zone_label}"
        + (f" · 📍 {alert.physical_location}" if alert.physical_location else "")
        + (f"  \n→ {alert.recommended_action}"
           if alert.recommended_action and not alert.acknowledged else ""),
        unsafe_allow_html=True,
    )
    if alert.acknowledged:
        col_ack.caption("✓ Acknowledged")
    elif alert.recommended_action:
        if col_ack.button("Acknowledge", key=f"ack_{alert.id}"):
            engine.acknowledge_alert(alert.id)
            st.rerun()

# ── Info Panel ───────────────────────────────────────────────────────────────

with st.expander("About the Model"):
    st.markdown(
        """
        **Signal model** — Every 500 ms each fiber sensor relaxes toward its
        commissioning baseline plus a Gaussian plume for every active breach
        (first-order low-pass, 0.68 / 0.32). Quadrant differential pressure
        drops with proximity to a breach; rack power drifts independently.

        **BARI** — `0.5 · thermal + 0.3 · pressure + 0.2 · rack`, each clamped
        to [0, 1]. Bands: ALL CLEAR < 30, ELEVATED < 55, HIGH RISK < 80,
        CRITICAL ≥ 80.

        **Auto-alerts** — WARNING above +4.5°C, CRITICAL above +7°C, at most
        one per 9-second window after the most recent alert.
        """
    )

# ── Refresh Loop ─────────────────────────────────────────────────────────────

if live:
    time.sleep(TICK_INTERVAL_MS / 1000.0)
    st.rerun()
