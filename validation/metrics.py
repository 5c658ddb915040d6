"""
Validation metrics for breach scenario runs.

Quantifies how quickly the engine reacts to a breach and how cleanly it
recovers once the breach is gone.
"""

import numpy as np
from typing import Dict, List, Optional

from config import BARI_CLASSIFICATIONS

# Classification bands from least to most severe
SEVERITY_ORDER = [label for _, label in reversed(BARI_CLASSIFICATIONS)]


# ---------------------------------------------------------------------------
# Response metrics
# ---------------------------------------------------------------------------

def first_tick_at_or_above(
    classification_history: List[str],
    minimum: str = "ELEVATED",
) -> Optional[int]:
    """First tick whose classification is at least as severe as *minimum*.

    Returns:
        Tick index, or None if the threshold was never reached.
    """
    floor = SEVERITY_ORDER.index(minimum)
    for i, label in enumerate(classification_history):
        if SEVERITY_ORDER.index(label) >= floor:
            return i
    return None


def first_crossing_tick(readings: List[float], threshold: float) -> Optional[int]:
    """First tick at which a recorded reading exceeds *threshold*."""
    for i, value in enumerate(readings):
        if value > threshold:
            return i
    return None


def first_auto_alert_tick(auto_alert_ticks: List[int]) -> Optional[int]:
    return auto_alert_ticks[0] if auto_alert_ticks else None


def recovery_tick(
    classification_history: List[str],
    after_tick: Optional[int],
) -> Optional[int]:
    """Ticks from *after_tick* until the classification is ALL_CLEAR again.

    Returns:
        Number of ticks, or None if the run never recovered (or there
        was nothing to recover from).
    """
    if after_tick is None:
        return None
    for i in range(after_tick, len(classification_history)):
        if classification_history[i] == SEVERITY_ORDER[0]:
            return i - after_tick
    return None


def is_monotonic_relaxation(readings: List[float], tolerance: float = 0.0) -> bool:
    """True if successive readings never rise by more than *tolerance*."""
    diffs = np.diff(np.asarray(readings, dtype=float))
    return bool(np.all(diffs <= tolerance))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def summarize_runs(rows: List[dict], metrics: List[str]) -> Dict[str, Dict[str, float]]:
    """Mean and standard deviation of each metric across runs.

    ``None`` values (metric not reached) are skipped; a metric that was
    never reached reports NaN.
    """
    summary = {}
    for name in metrics:
        values = [r[name] for r in rows if r.get(name) is not None]
        if values:
            summary[name] = {"mean": float(np.mean(values)), "std": float(np.std(values))}
        else:
            summary[name] = {"mean": float("nan"), "std": float("nan")}
    return summary
