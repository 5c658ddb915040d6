"""
Signal Generator.

Owns the fiber temperature, quadrant pressure and rack power arrays and
advances them one tick at a time.  Each array relaxes toward a noisy
target through a first-order low-pass filter:

    reading' = retain * reading + (1 - retain) * target

so a breach appearing or vanishing shows up over 3-4 ticks rather than as
a step.  The three arrays are replaced together; a SignalFrame is always
one consistent tick.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from config import (
    EngineConfig,
    N_PRESSURE_ZONES,
    THERMAL_RETAIN,
    THERMAL_NOISE,
    PRESSURE_RETAIN,
    PRESSURE_NOISE,
    RACK_POWER_RETAIN,
    RACK_POWER_TARGET_MIN_KW,
    RACK_POWER_TARGET_SPAN_KW,
    TREND_MIN_INTENSITY,
    TREND_BASE_C_PER_MIN,
    TREND_SPAN_C_PER_MIN,
)
from data.facility_layout import zone_center
from data.mock_data import make_baseline_temps, make_baseline_pressure, make_rack_power
from models.breach import Breach, active_breaches
from models.thermal_plume import total_thermal_rise, pressure_drop


def frozen_copy(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, dtype=float, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class SignalFrame:
    """One tick worth of readings.  Arrays are read-only copies."""

    timestamp: float
    sensor_temps: np.ndarray
    pressures: np.ndarray
    rack_power: np.ndarray
    trend_c_per_min: float


class SignalGenerator:
    """Synthesizes fiber, pressure and rack power readings.

    Args:
        config: Engine configuration (array sizes and baselines).
        rng: Random generator shared with the owning engine.
    """

    def __init__(self, config: EngineConfig, rng: np.random.Generator):
        self.config = config
        self._rng = rng

        self.baseline_temps = frozen_copy(make_baseline_temps(rng, config))
        self.baseline_pressure = frozen_copy(make_baseline_pressure(rng, config))

        self._sensor_index = np.arange(config.sensor_count)
        self._zone_centers = np.array(
            [zone_center(j, config.sensor_count) for j in range(N_PRESSURE_ZONES)]
        )

        self._temps = np.array(self.baseline_temps)
        self._pressures = np.array(self.baseline_pressure)
        self._rack_power = make_rack_power(rng, config)
        self._trend = 0.0

    def frame(self, timestamp: float) -> SignalFrame:
        """Copy out the current readings."""
        return SignalFrame(
            timestamp=timestamp,
            sensor_temps=frozen_copy(self._temps),
            pressures=frozen_copy(self._pressures),
            rack_power=frozen_copy(self._rack_power),
            trend_c_per_min=self._trend,
        )

    def thermal_target(self, breaches: List[Breach]) -> np.ndarray:
        """Baseline plus noise plus the summed plumes of the given breaches."""
        n = self.config.sensor_count
        noise = (self._rng.random(n) - 0.5) * (2.0 * THERMAL_NOISE)
        return self.baseline_temps + noise + total_thermal_rise(self._sensor_index, breaches)

    def pressure_target(self, breaches: List[Breach]) -> np.ndarray:
        """Baseline plus noise minus the pressure drop of the given breaches."""
        noise = (self._rng.random(N_PRESSURE_ZONES) - 0.5) * (2.0 * PRESSURE_NOISE)
        drop = pressure_drop(self._zone_centers, breaches, self.config.sensor_count)
        return self.baseline_pressure + noise - drop

    def tick(self, breaches: List[Breach], now: float) -> SignalFrame:
        """
        Advance every array by one step.

        Breaches whose lifetime has elapsed at ``now`` are ignored.

        Returns:
            The new SignalFrame.
        """
        live = active_breaches(breaches, now)

        temps = THERMAL_RETAIN * self._temps + (1.0 - THERMAL_RETAIN) * self.thermal_target(live)
        pressures = (
            PRESSURE_RETAIN * self._pressures
            + (1.0 - PRESSURE_RETAIN) * self.pressure_target(live)
        )
        rack_target = RACK_POWER_TARGET_MIN_KW + self._rng.random(self.config.rack_count) * RACK_POWER_TARGET_SPAN_KW
        rack_power = RACK_POWER_RETAIN * self._rack_power + (1.0 - RACK_POWER_RETAIN) * rack_target

        strongest = max((b.intensity for b in live), default=0.0)
        if strongest > TREND_MIN_INTENSITY:
            trend = TREND_BASE_C_PER_MIN + self._rng.random() * TREND_SPAN_C_PER_MIN
        else:
            trend = 0.0

        self._temps, self._pressures, self._rack_power, self._trend = (
            temps, pressures, rack_power, trend,
        )
        return self.frame(now)
