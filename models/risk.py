"""
Breach Risk Model (BARI).

Turns the current sensor and pressure arrays into a composite 0-1 risk
index.  Three sub-scores feed it:

    thermal   - hottest excursion above the per-sensor baseline
    pressure  - mean loss of containment differential pressure
    rack      - mean inlet temperature over the central racks

    BARI = clamp01(0.5 * thermal + 0.3 * pressure + 0.2 * rack)

Everything here is a pure function of its arguments; the engine calls it
once per tick and never stores the result on its own.
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional

from config import (
    THERMAL_SCORE_OFFSET_C,
    THERMAL_SCORE_SPAN_C,
    PRESSURE_SCORE_SPAN_PA,
    RACK_SCORE_OFFSET_C,
    RACK_SCORE_SPAN_C,
    BARI_WEIGHTS,
    BARI_CLASSIFICATIONS,
    RACK_MEAN_EDGE_DIVISOR,
    ASHRAE_CLASS_LIMITS,
    ASHRAE_FALLBACK_CLASS,
    A1_LIMIT_C,
    STATUS_BREACH_THRESHOLD,
    STATUS_ELEVATED_THRESHOLD,
    REFERENCE_BREACH_INTENSITY,
    BYPASS_KW_PER_REFERENCE_BREACH,
)
from data.facility_layout import rack_sensor_slices
from models.breach import Breach


@dataclass(frozen=True)
class RiskScore:
    """Composite risk derived from one snapshot of the arrays."""

    thermal_score: float
    pressure_score: float
    rack_score: float
    bari: float
    classification: str
    max_delta: float
    peak_index: int

    @property
    def bari_pct(self) -> int:
        return int(round(self.bari * 100))


@dataclass(frozen=True)
class RackZone:
    """Mean inlet conditions of one rack."""

    rack_id: str
    mean_temp: float
    delta: float
    power_kw: float
    ashrae_class: str


@dataclass(frozen=True)
class BypassImpact:
    """Cost of hot-air bypass through the currently active breaches."""

    bypass_kw: float
    cost_per_hour: float
    co2_g_per_hour: float


def clamp01(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


def thermal_excursion(sensor_temps: np.ndarray, baseline_temps: np.ndarray):
    """Return (max_delta, peak_index); max_delta is floored at 0."""
    deltas = np.asarray(sensor_temps) - np.asarray(baseline_temps)
    peak_index = int(np.argmax(deltas))
    return max(0.0, float(deltas[peak_index])), peak_index


def rack_mean_temp(sensor_temps: np.ndarray) -> float:
    """Mean over the central sensors, trimming N // 12 at each end of the fiber."""
    temps = np.asarray(sensor_temps)
    edge = len(temps) // RACK_MEAN_EDGE_DIVISOR
    central = temps[edge:len(temps) - edge] if len(temps) > 2 * edge else temps
    return float(np.mean(central))


def classify_bari(bari: float) -> str:
    """
    Map a BARI value onto its band.

    Bands are inclusive-lower, exclusive-upper, except CRITICAL which
    also includes 1.0:
        [0, 0.30) ALL_CLEAR, [0.30, 0.55) ELEVATED,
        [0.55, 0.80) HIGH_RISK, [0.80, 1.0] CRITICAL
    """
    for lower, label in BARI_CLASSIFICATIONS:
        if bari >= lower:
            return label
    return BARI_CLASSIFICATIONS[-1][1]


def compute_risk(
    sensor_temps: np.ndarray,
    pressures: np.ndarray,
    baseline_temps: np.ndarray,
    baseline_pressure: np.ndarray,
    baseline_temp: float,
) -> RiskScore:
    """
    Compute the sub-scores, BARI and its classification.

    Args:
        sensor_temps: Current fiber readings (degC).
        pressures: Current quadrant differential pressures (Pa).
        baseline_temps: Per-sensor thermal baseline (degC).
        baseline_pressure: Per-quadrant pressure baseline (Pa).
        baseline_temp: Nominal cold-aisle temperature used by the rack score.

    Returns:
        RiskScore with every field in its documented range.
    """
    max_delta, peak_index = thermal_excursion(sensor_temps, baseline_temps)
    thermal = clamp01((max_delta - THERMAL_SCORE_OFFSET_C) / THERMAL_SCORE_SPAN_C)

    pressure_loss = float(np.mean(np.asarray(baseline_pressure) - np.asarray(pressures)))
    pressure = clamp01(pressure_loss / PRESSURE_SCORE_SPAN_PA)

    rack_mean = rack_mean_temp(sensor_temps)
    rack = clamp01((rack_mean - baseline_temp - RACK_SCORE_OFFSET_C) / RACK_SCORE_SPAN_C)

    bari = clamp01(
        BARI_WEIGHTS["thermal"] * thermal
        + BARI_WEIGHTS["pressure"] * pressure
        + BARI_WEIGHTS["rack"] * rack
    )
    return RiskScore(
        thermal_score=thermal,
        pressure_score=pressure,
        rack_score=rack,
        bari=bari,
        classification=classify_bari(bari),
        max_delta=max_delta,
        peak_index=peak_index,
    )


def system_status(bari: float) -> str:
    if bari > STATUS_BREACH_THRESHOLD:
        return "BREACH DETECTED"
    if bari > STATUS_ELEVATED_THRESHOLD:
        return "ELEVATED"
    return "NOMINAL"


def ashrae_class(temp: float) -> str:
    """ASHRAE thermal guideline class whose allowable inlet range covers temp."""
    for upper, cls in ASHRAE_CLASS_LIMITS:
        if temp <= upper:
            return cls
    return ASHRAE_FALLBACK_CLASS


def compute_rack_zones(
    sensor_temps: np.ndarray,
    rack_power: np.ndarray,
    baseline_temp: float,
) -> List[RackZone]:
    """Average the fiber segment in front of each rack and classify it."""
    temps = np.asarray(sensor_temps)
    zones = []
    for i, (start, end) in enumerate(rack_sensor_slices(len(temps), len(rack_power))):
        mean_temp = float(np.mean(temps[start:end]))
        zones.append(RackZone(
            rack_id=f"R{i + 1}",
            mean_temp=mean_temp,
            delta=mean_temp - baseline_temp,
            power_kw=float(rack_power[i]),
            ashrae_class=ashrae_class(mean_temp),
        ))
    return zones


def time_to_limit(max_rack_temp: float, trend_c_per_min: float) -> Optional[float]:
    """Minutes until the hottest rack crosses the A1 limit, None without a trend."""
    if trend_c_per_min <= 0:
        return None
    return max(0.0, (A1_LIMIT_C - max_rack_temp) / trend_c_per_min)


def compute_bypass_impact(
    breaches: Iterable[Breach],
    energy_rate: float,
    co2_factor: float,
) -> BypassImpact:
    """Estimate cooling power lost to bypass through the active breaches."""
    bypass_kw = sum(
        (b.intensity / REFERENCE_BREACH_INTENSITY) * BYPASS_KW_PER_REFERENCE_BREACH
        for b in breaches
    )
    return BypassImpact(
        bypass_kw=float(bypass_kw),
        cost_per_hour=float(bypass_kw * energy_rate),
        co2_g_per_hour=float(bypass_kw * co2_factor * 1000.0),
    )
