"""
Alert Evaluator.

Three sources feed the alert log:

  1. Automatic thermal detection - raised when the hottest excursion
     above baseline crosses a fixed threshold, and held back while the
     most recent alert of any level is younger than the suppression
     window.  A sustained excursion therefore re-alerts at most once per
     window instead of every tick.
  2. Breach induction - an explicit operator action, never suppressed.
  3. Clear-all - likewise never suppressed.
"""

import logging
import numpy as np
from typing import Optional

from config import (
    AUTO_ALERT_WARNING_DELTA_C,
    AUTO_ALERT_CRITICAL_DELTA_C,
    ALERT_SUPPRESSION_MS,
)
from data.facility_layout import zone_label, physical_location
from models.alert import Alert, AlertLog, WARNING, CRITICAL, BREACH, CLEAR
from models.breach import Breach
from models.risk import thermal_excursion

logger = logging.getLogger(__name__)


def auto_alert_level(max_delta: float) -> Optional[str]:
    """Severity for a thermal excursion, None when below the warning threshold."""
    if max_delta <= AUTO_ALERT_WARNING_DELTA_C:
        return None
    return CRITICAL if max_delta > AUTO_ALERT_CRITICAL_DELTA_C else WARNING


def is_suppressed(most_recent: Optional[Alert], now: float) -> bool:
    return most_recent is not None and now - most_recent.timestamp < ALERT_SUPPRESSION_MS


def evaluate_auto_alert(
    sensor_temps: np.ndarray,
    baseline_temps: np.ndarray,
    alert_log: AlertLog,
    now: float,
    rack_count: int,
) -> Optional[Alert]:
    """
    Raise a thermal alert if the current readings warrant one.

    Args:
        sensor_temps: Latest fiber readings.
        baseline_temps: Per-sensor baseline.
        alert_log: Log to check for suppression and to push into.
        now: Evaluation time in milliseconds.
        rack_count: Racks along the fiber, for the location text.

    Returns:
        The new alert, or None if nothing crossed the threshold or the
        suppression window is still open.
    """
    max_delta, peak = thermal_excursion(sensor_temps, baseline_temps)
    level = auto_alert_level(max_delta)
    if level is None:
        return None

    if is_suppressed(alert_log.most_recent(), now):
        logger.debug("Thermal excursion %.1fC at sensor %d suppressed", max_delta, peak)
        return None

    n = len(sensor_temps)
    location = physical_location(peak, n, rack_count)
    return alert_log.push(
        level=level,
        message=f"Thermal anomaly ΔT +{max_delta:.1f}°C above baseline",
        timestamp=now,
        zone_label=zone_label(peak, n),
        physical_location=location,
        recommended_action=f"Dispatch to {location} — inspect curtain seam",
    )


def push_breach_alert(alert_log: AlertLog, breach: Breach, now: float, rack_count: int) -> Alert:
    location = physical_location(breach.position, breach.sensor_count, rack_count)
    return alert_log.push(
        level=BREACH,
        message="Containment breach — thermal excursion detected",
        timestamp=now,
        zone_label=breach.label,
        physical_location=location,
        recommended_action=f"Inspect & reseal at {location}",
    )


def push_clear_alert(alert_log: AlertLog, now: float) -> Alert:
    return alert_log.push(
        level=CLEAR,
        message="All breaches cleared — returning to baseline",
        timestamp=now,
        zone_label="All Zones",
    )
