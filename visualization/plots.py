"""
Visualization module for the Containment Breach Simulation Engine.

Provides Plotly-based plots of engine snapshots and scenario runs for the
Streamlit interface.
"""

import numpy as np
import plotly.graph_objects as go
from typing import List, Optional

from config import A1_LIMIT_C, STATUS_ELEVATED_THRESHOLD, STATUS_BREACH_THRESHOLD
from data.facility_layout import ZONE_NAMES
from monitoring.engine import EngineSnapshot
from validation.breach_twin import ScenarioResult

# Thermal palette for fiber readings, normalized over [THERMAL_SCALE_LO, THERMAL_SCALE_HI]
THERMAL_SCALE_LO = 14.0
THERMAL_SCALE_HI = 40.0
THERMAL_COLORSCALE = [
    [0.00, "rgb(20,90,220)"],
    [0.20, "rgb(0,180,230)"],
    [0.45, "rgb(20,210,110)"],
    [0.65, "rgb(230,210,20)"],
    [0.82, "rgb(240,120,20)"],
    [1.00, "rgb(220,25,25)"],
]

ASHRAE_COLORS = {"A1": "#22d3a0", "A2": "#fbbf24", "A3": "#fb923c", "A4": "#f87171"}
ALERT_COLORS = {"CRITICAL": "#f87171", "BREACH": "#f87171", "WARNING": "#fbbf24", "CLEAR": "#22d3a0"}


def bari_color(bari: float) -> str:
    """Traffic-light color of a BARI value."""
    if bari < STATUS_ELEVATED_THRESHOLD:
        return "#22d3a0"
    if bari < STATUS_BREACH_THRESHOLD:
        return "#fbbf24"
    return "#f87171"


def create_fiber_profile(snapshot: EngineSnapshot) -> go.Figure:
    """Temperature along the fiber, with baseline, A1 limit and active breaches."""
    idx = np.arange(len(snapshot.sensor_temps))
    temps = np.asarray(snapshot.sensor_temps)

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=idx,
            y=snapshot.baseline_temps,
            mode="lines",
            line=dict(color="rgba(150,170,190,0.6)", width=1, dash="dot"),
            name="Baseline",
            hovertemplate="Sensor %{x}<br>Baseline %{y:.2f}°C<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=idx,
            y=temps,
            mode="lines+markers",
            line=dict(color="rgba(200,220,235,0.5)", width=1),
            marker=dict(
                size=6,
                color=temps,
                colorscale=THERMAL_COLORSCALE,
                cmin=THERMAL_SCALE_LO,
                cmax=THERMAL_SCALE_HI,
                colorbar=dict(title="°C"),
            ),
            name="Fiber",
            hovertemplate="Sensor %{x}<br>%{y:.2f}°C<extra></extra>",
        )
    )

    for b in snapshot.active_breaches:
        fig.add_vline(
            x=b.position,
            line=dict(color="#f87171", width=1, dash="dash"),
            annotation_text=b.label,
            annotation_font_color="#f87171",
        )

    fig.add_hline(
        y=A1_LIMIT_C,
        line=dict(color="#fbbf24", width=1, dash="dashdot"),
        annotation_text="ASHRAE A1 limit",
    )

    fig.update_layout(
        title="Fiber Temperature Profile",
        xaxis_title="Sensor (north → south)",
        yaxis_title="Temperature (°C)",
        template="plotly_dark",
        height=360,
        showlegend=False,
        margin=dict(l=60, r=20, t=50, b=50),
    )
    return fig


def create_pressure_figure(snapshot: EngineSnapshot) -> go.Figure:
    """Quadrant differential pressure against its baseline."""
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=ZONE_NAMES,
            y=snapshot.baseline_pressure,
            name="Baseline",
            marker_color="rgba(96,165,250,0.35)",
        )
    )
    fig.add_trace(
        go.Bar(
            x=ZONE_NAMES,
            y=snapshot.pressures,
            name="Current",
            marker_color="#60a5fa",
            hovertemplate="%{x}<br>%{y:.2f} Pa<extra></extra>",
        )
    )
    fig.update_layout(
        title="Containment Differential Pressure",
        yaxis_title="ΔP (Pa)",
        barmode="group",
        template="plotly_dark",
        height=300,
    )
    return fig


def create_rack_zone_figure(snapshot: EngineSnapshot) -> go.Figure:
    """Mean inlet temperature per rack, colored by ASHRAE class."""
    zones = snapshot.rack_zones
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[z.rack_id for z in zones],
            y=[z.mean_temp for z in zones],
            marker_color=[ASHRAE_COLORS[z.ashrae_class] for z in zones],
            customdata=[(z.ashrae_class, z.delta, z.power_kw) for z in zones],
            hovertemplate=(
                "%{x}: %{y:.1f}°C (%{customdata[0]})<br>"
                "Δ %{customdata[1]:+.1f}°C<br>"
                "Power %{customdata[2]:.0f} kW<extra></extra>"
            ),
            name="Rack inlet",
        )
    )
    fig.add_hline(y=A1_LIMIT_C, line=dict(color="#fbbf24", width=1, dash="dashdot"))
    fig.update_layout(
        title="Rack Inlet Temperature",
        yaxis_title="Temperature (°C)",
        template="plotly_dark",
        height=300,
    )
    return fig


def create_bari_gauge(snapshot: EngineSnapshot) -> go.Figure:
    """0-100 gauge of the composite risk index."""
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=snapshot.risk.bari_pct,
            title=dict(text=f"BARI — {snapshot.classification.replace('_', ' ')}"),
            gauge=dict(
                axis=dict(range=[0, 100]),
                bar=dict(color=bari_color(snapshot.bari)),
                steps=[
                    dict(range=[0, 30], color="rgba(34,211,160,0.12)"),
                    dict(range=[30, 55], color="rgba(251,191,36,0.12)"),
                    dict(range=[55, 80], color="rgba(251,146,60,0.12)"),
                    dict(range=[80, 100], color="rgba(248,113,113,0.12)"),
                ],
            ),
        )
    )
    fig.update_layout(template="plotly_dark", height=260, margin=dict(l=30, r=30, t=60, b=10))
    return fig


def create_scenario_history(
    result: ScenarioResult,
    watch_position: Optional[int] = None,
) -> go.Figure:
    """BARI over a scenario run, optionally with one watched sensor reading."""
    if not result.bari_history:
        fig = go.Figure()
        fig.add_annotation(text="No ticks recorded", showarrow=False)
        return fig

    seconds = (np.arange(result.num_ticks) + 1) * result.tick_interval_ms / 1000.0
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=seconds,
            y=result.bari_history,
            mode="lines",
            name="BARI",
            line=dict(color="#22d3a0", width=2),
        )
    )
    alert_x: List[float] = [seconds[t] for t in result.auto_alert_ticks]
    if alert_x:
        fig.add_trace(
            go.Scatter(
                x=alert_x,
                y=[result.bari_history[t] for t in result.auto_alert_ticks],
                mode="markers",
                marker=dict(size=10, color="#fbbf24", symbol="triangle-up"),
                name="Auto-alert",
            )
        )
    if watch_position is not None and watch_position in result.watched:
        fig.add_trace(
            go.Scatter(
                x=seconds,
                y=result.watched[watch_position],
                mode="lines",
                name=f"Sensor {watch_position} (°C)",
                line=dict(color="#f87171", width=1),
                yaxis="y2",
            )
        )
        fig.update_layout(
            yaxis2=dict(title="Temperature (°C)", overlaying="y", side="right"),
        )

    fig.update_layout(
        title=f"Scenario {result.scenario_name}",
        xaxis_title="Time (s)",
        yaxis=dict(title="BARI", range=[0, 1]),
        template="plotly_dark",
        height=320,
    )
    return fig
