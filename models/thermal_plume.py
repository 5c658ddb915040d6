"""
Thermal Plume and Pressure Drop Model.

A containment breach lets hot-aisle exhaust recirculate into the cold
aisle.  Along the fiber this shows up as a Gaussian temperature bump
centered on the breach, and in the quadrant pressure sensors as a loss of
differential pressure that falls off linearly with distance.

Convention:
  - Positions are sensor indices along the fiber (0 = north end).
  - Temperatures in degC, pressures in Pa.
  - Contributions of concurrent breaches add up and are never capped.
"""

import numpy as np
from typing import Iterable

from config import (
    PLUME_CUTOFF_WIDTHS,
    PLUME_SIGMA_FRACTION,
    REFERENCE_BREACH_INTENSITY,
    PRESSURE_DROP_MAX_PA,
)
from models.breach import Breach


def thermal_plume(sensor_index: np.ndarray, breach: Breach) -> np.ndarray:
    """
    Temperature rise at each sensor caused by a single breach.

    Model:
        rise = I * exp(-0.5 * ((i - p) / (0.5 * w))^2)   for |i - p| < 2w
        rise = 0                                          otherwise

    Args:
        sensor_index: Sensor indices (any shape), typically np.arange(N).
        breach: The breach producing the plume.

    Returns:
        Temperature rise in degC, same shape as sensor_index.
    """
    dist = np.abs(sensor_index - breach.position)
    sigma = PLUME_SIGMA_FRACTION * breach.width
    rise = breach.intensity * np.exp(-0.5 * (dist / sigma) ** 2)
    return np.where(dist < PLUME_CUTOFF_WIDTHS * breach.width, rise, 0.0)


def total_thermal_rise(sensor_index: np.ndarray, breaches: Iterable[Breach]) -> np.ndarray:
    """Sum of the plumes of all given breaches."""
    rise = np.zeros(np.shape(sensor_index), dtype=float)
    for b in breaches:
        rise += thermal_plume(sensor_index, b)
    return rise


def pressure_drop(
    zone_centers: np.ndarray,
    breaches: Iterable[Breach],
    sensor_count: int,
) -> np.ndarray:
    """
    Differential-pressure loss in each quadrant caused by the given breaches.

    Model, per breach:
        drop = max(0, 1 - |p - c| / (N / 3)) * (I / 14) * 9

    A reference-intensity breach at the center of a quadrant removes
    PRESSURE_DROP_MAX_PA from that quadrant; the effect fades to zero a
    third of the fiber away.

    Args:
        zone_centers: Fiber position of each quadrant center.
        breaches: Active breaches.
        sensor_count: Fiber length in sensors.

    Returns:
        Pressure drop (Pa, >= 0) per quadrant.
    """
    falloff = sensor_count / 3.0
    drop = np.zeros(np.shape(zone_centers), dtype=float)
    for b in breaches:
        dist = np.abs(b.position - zone_centers)
        weight = np.maximum(0.0, 1.0 - dist / falloff)
        drop += weight * (b.intensity / REFERENCE_BREACH_INTENSITY) * PRESSURE_DROP_MAX_PA
    return drop
