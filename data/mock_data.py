"""
Mock Data for the Containment Breach Simulation Engine.

Provides the synthetic baselines a real deployment would learn during
commissioning: the per-sensor thermal profile of the fiber, the per-zone
differential pressure and the initial rack power draw.
Designed to be swapped out for recorded commissioning data later.
"""

import numpy as np
from typing import List

from config import (
    EngineConfig,
    N_PRESSURE_ZONES,
    BASELINE_SINE_AMPLITUDE,
    BASELINE_SINE_PERIOD,
    BASELINE_TEMP_JITTER,
    BASELINE_PRESSURE_JITTER,
    RACK_POWER_MIN_KW,
    RACK_POWER_SPAN_KW,
    PRESET_BREACH_ZONES,
)


def make_baseline_temps(rng: np.random.Generator, config: EngineConfig) -> np.ndarray:
    """
    Return the fixed thermal baseline of every sensor on the fiber.

    Profile: baseline_temp + A * sin(i / period) + U(-jitter/2, jitter/2).
    The sinusoid stands in for the airflow pattern along the aisle, the
    jitter for per-splice calibration offsets.

    Returns:
        (sensor_count,) array in degC.
    """
    idx = np.arange(config.sensor_count)
    ripple = np.sin(idx / BASELINE_SINE_PERIOD) * BASELINE_SINE_AMPLITUDE
    jitter = (rng.random(config.sensor_count) - 0.5) * BASELINE_TEMP_JITTER
    return config.baseline_temp + ripple + jitter


def make_baseline_pressure(rng: np.random.Generator, config: EngineConfig) -> np.ndarray:
    """Return the fixed differential-pressure baseline of each quadrant (Pa)."""
    jitter = (rng.random(N_PRESSURE_ZONES) - 0.5) * BASELINE_PRESSURE_JITTER
    return config.baseline_pressure + jitter


def make_rack_power(rng: np.random.Generator, config: EngineConfig) -> np.ndarray:
    """Return initial rack power draw (kW), one value per rack."""
    return RACK_POWER_MIN_KW + rng.random(config.rack_count) * RACK_POWER_SPAN_KW


def get_preset_breach_zones() -> List[dict]:
    """
    Return the demo breach sites offered to the operator.

    Returns:
        List of dicts with keys: 'position' (sensor index), 'label'.
    """
    return [dict(z) for z in PRESET_BREACH_ZONES]
