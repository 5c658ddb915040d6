"""
Containment Engine.

The single owner of simulation state.  A periodic caller drives
``tick()``; between ticks the operator may induce breaches, clear them or
acknowledge alerts.  Every public method takes the same re-entrant lock,
so an operator action can never observe (or produce) a half-finished
tick, and every read goes through an immutable EngineSnapshot.

Typical use::

    engine = ContainmentEngine(seed=7)
    engine.induce_breach(32, "Zone B — Curtain Seam")
    for _ in range(10):
        snap = engine.tick()
    print(snap.classification, snap.bari)
"""

import logging
import threading
import time
import numpy as np
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from config import (
    EngineConfig,
    ALERT_LOG_SIZE,
    BREACH_WIDTH_RANGE,
    BREACH_INTENSITY_RANGE,
    BREACH_DURATION_RANGE_MS,
)
from data.facility_layout import zone_label
from models.alert import Alert, AlertLog, ACTIONABLE_LEVELS, URGENT_LEVELS
from models.breach import Breach, active_breaches, validate_breach_params
from models.risk import (
    RiskScore,
    RackZone,
    BypassImpact,
    compute_risk,
    compute_rack_zones,
    compute_bypass_impact,
    system_status,
    time_to_limit,
)
from monitoring.alerts import evaluate_auto_alert, push_breach_alert, push_clear_alert
from monitoring.signal_generator import SignalGenerator, SignalFrame, frozen_copy

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class EngineSnapshot:
    """Everything a consumer may read about the engine at one instant.

    Arrays are read-only copies; breaches and alerts are frozen records.
    """

    timestamp: float
    tick_count: int
    sensor_temps: np.ndarray
    baseline_temps: np.ndarray
    pressures: np.ndarray
    baseline_pressure: np.ndarray
    rack_power: np.ndarray
    active_breaches: Tuple[Breach, ...]
    alerts: Tuple[Alert, ...]
    risk: RiskScore
    rack_zones: Tuple[RackZone, ...]
    trend_c_per_min: float
    time_to_limit_min: Optional[float]
    bypass: BypassImpact

    @property
    def bari(self) -> float:
        return self.risk.bari

    @property
    def classification(self) -> str:
        return self.risk.classification

    @property
    def system_status(self) -> str:
        return system_status(self.risk.bari)

    @property
    def max_rack_temp(self) -> float:
        return max(z.mean_temp for z in self.rack_zones)

    @property
    def unacknowledged_count(self) -> int:
        return sum(
            1 for a in self.alerts
            if not a.acknowledged and a.level in ACTIONABLE_LEVELS
        )

    @property
    def critical_alert(self) -> Optional[Alert]:
        """Newest unacknowledged CRITICAL or BREACH alert."""
        return next(
            (a for a in self.alerts if not a.acknowledged and a.level in URGENT_LEVELS),
            None,
        )


class ContainmentEngine:
    """Simulated fiber-optic containment monitor.

    Args:
        config: Array sizes, baselines and cost factors.
        seed: Seed for the engine's random generator (None = nondeterministic).
        clock: Callable returning the current time in milliseconds.  Each
            public method also accepts an explicit ``now`` override.
        alert_log_size: Number of alerts retained.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        alert_log_size: int = ALERT_LOG_SIZE,
    ):
        self.config = config or EngineConfig()
        self._rng = np.random.default_rng(seed)
        self._clock = clock or wall_clock_ms
        self._lock = threading.RLock()

        self._generator = SignalGenerator(self.config, self._rng)
        self._alerts = AlertLog(alert_log_size)
        self._breaches: List[Breach] = []
        self._last_breach_id = 0
        self._tick_count = 0

        self._frame = self._generator.frame(self._clock())
        self._risk = self._score(self._frame)

    # -- internals ----------------------------------------------------------

    def _now(self, now: Optional[float]) -> float:
        return float(self._clock() if now is None else now)

    def _score(self, frame: SignalFrame) -> RiskScore:
        return compute_risk(
            frame.sensor_temps,
            frame.pressures,
            self._generator.baseline_temps,
            self._generator.baseline_pressure,
            self.config.baseline_temp,
        )

    def _live_breaches(self, now: float) -> List[Breach]:
        """Breaches still alive at now; expired ones are pruned by tick()."""
        return active_breaches(self._breaches, now)

    def _snapshot(self, now: float) -> EngineSnapshot:
        frame = self._frame
        live = self._live_breaches(now)
        zones = tuple(compute_rack_zones(
            frame.sensor_temps, frame.rack_power, self.config.baseline_temp,
        ))
        return EngineSnapshot(
            timestamp=frame.timestamp,
            tick_count=self._tick_count,
            sensor_temps=frozen_copy(frame.sensor_temps),
            baseline_temps=frozen_copy(self._generator.baseline_temps),
            pressures=frozen_copy(frame.pressures),
            baseline_pressure=frozen_copy(self._generator.baseline_pressure),
            rack_power=frozen_copy(frame.rack_power),
            active_breaches=tuple(live),
            alerts=self._alerts.entries(),
            risk=self._risk,
            rack_zones=zones,
            trend_c_per_min=frame.trend_c_per_min,
            time_to_limit_min=time_to_limit(
                max(z.mean_temp for z in zones), frame.trend_c_per_min,
            ),
            bypass=compute_bypass_impact(
                live, self.config.energy_rate, self.config.co2_factor,
            ),
        )

    # -- periodic step ------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> EngineSnapshot:
        """
        Advance the simulation by one step and evaluate alerts.

        Expired breaches are dropped first, then the signal arrays are
        updated, BARI is recomputed and the auto-alert rule is applied to
        the fresh readings.

        Returns:
            Snapshot of the state after the step.
        """
        with self._lock:
            now = self._now(now)
            live = []
            for b in self._breaches:
                if b.is_active(now):
                    live.append(b)
                else:
                    logger.debug("Breach #%d (%s) expired", b.id, b.label)
            self._breaches = live

            self._frame = self._generator.tick(live, now)
            self._risk = self._score(self._frame)
            evaluate_auto_alert(
                self._frame.sensor_temps,
                self._generator.baseline_temps,
                self._alerts,
                now,
                self.config.rack_count,
            )
            self._tick_count += 1
            return self._snapshot(now)

    # -- operator actions ---------------------------------------------------

    def induce_breach(
        self,
        position: int,
        label: Optional[str] = None,
        width: Optional[float] = None,
        intensity: Optional[float] = None,
        duration_ms: Optional[float] = None,
        now: Optional[float] = None,
    ) -> Breach:
        """
        Start a breach at a sensor position and raise a BREACH alert.

        Parameters left as None are drawn from the demo ranges in config.
        The alert bypasses the auto-alert suppression window.

        Raises:
            ValidationError: position outside [0, sensor_count) or an
                invalid width/intensity/duration.  Nothing changes.
        """
        with self._lock:
            n = self.config.sensor_count
            validate_breach_params(
                position, n, width=width, intensity=intensity, duration_ms=duration_ms,
            )
            now = self._now(now)
            if width is None:
                width = self._rng.uniform(*BREACH_WIDTH_RANGE)
            if intensity is None:
                intensity = self._rng.uniform(*BREACH_INTENSITY_RANGE)
            if duration_ms is None:
                duration_ms = self._rng.uniform(*BREACH_DURATION_RANGE_MS)

            breach = Breach(
                id=self._last_breach_id + 1,
                position=int(position),
                width=float(width),
                intensity=float(intensity),
                duration_ms=float(duration_ms),
                created_at=now,
                label=label if label is not None else zone_label(position, n),
                sensor_count=n,
            )
            self._last_breach_id = breach.id
            self._breaches.append(breach)
            logger.info(
                "Breach #%d induced at sensor %d (%s): width=%.1f intensity=%.1f duration=%.0fms",
                breach.id, breach.position, breach.label,
                breach.width, breach.intensity, breach.duration_ms,
            )
            push_breach_alert(self._alerts, breach, now, self.config.rack_count)
            return breach

    def clear_all_breaches(self, now: Optional[float] = None) -> None:
        """Remove every active breach and raise a single CLEAR alert."""
        with self._lock:
            now = self._now(now)
            logger.info("Clearing %d active breach(es)", len(self._breaches))
            self._breaches = []
            push_clear_alert(self._alerts, now)

    def acknowledge_alert(self, alert_id: int) -> None:
        """
        Mark an alert as acknowledged.  Display state only.

        Raises:
            ValidationError: No alert with that id is in the log.
        """
        with self._lock:
            self._alerts.acknowledge(alert_id)

    # -- reads --------------------------------------------------------------

    def get_snapshot(self) -> EngineSnapshot:
        """State as of the engine clock; breaches past their lifetime are omitted."""
        with self._lock:
            return self._snapshot(self._clock())

    @property
    def active_breaches(self) -> Tuple[Breach, ...]:
        with self._lock:
            return tuple(self._live_breaches(self._clock()))
