"""
Breach Scenario Twin.

Drives a ContainmentEngine headlessly on a simulated clock so breach
scenarios can be replayed deterministically.  The twin:

  1. Applies scripted operator events (induce / clear) just before the
     tick they are scheduled for.
  2. Ticks the engine at the fixed interval, never sleeping.
  3. Records BARI, classification, peak excursion and the readings at
     watched sensors after every tick, plus which ticks raised an
     automatic thermal alert.

Scenarios come from ``validation.scenarios``; metrics over the recorded
history live in ``validation.metrics``.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from config import EngineConfig, TICK_INTERVAL_MS
from models.alert import WARNING, CRITICAL
from models.errors import ValidationError
from monitoring.engine import ContainmentEngine, EngineSnapshot

INDUCE = "induce"
CLEAR = "clear"


@dataclass(frozen=True)
class ScenarioEvent:
    """An operator action scheduled before a given tick.

    Args:
        tick: Zero-based tick index the action precedes.
        action: "induce" or "clear".
        position: Sensor index (induce only).
        label: Breach label (induce only, defaults to the zone label).
        width, intensity, duration_ms: Breach parameters; None draws
            from the engine's demo ranges.
    """

    tick: int
    action: str
    position: Optional[int] = None
    label: Optional[str] = None
    width: Optional[float] = None
    intensity: Optional[float] = None
    duration_ms: Optional[float] = None

    def __post_init__(self):
        if self.tick < 0:
            raise ValidationError(f"Event tick must be >= 0, got {self.tick}")
        if self.action not in (INDUCE, CLEAR):
            raise ValidationError(f"Unknown scenario action: {self.action}")
        if self.action == INDUCE and self.position is None:
            raise ValidationError("An induce event needs a position")


@dataclass
class ScenarioResult:
    """Per-tick history of one scenario run."""

    scenario_name: str
    num_ticks: int
    tick_interval_ms: float
    bari_history: List[float]
    classification_history: List[str]
    max_delta_history: List[float]
    active_breach_history: List[int]
    watched: Dict[int, List[float]]
    auto_alert_ticks: List[int]
    final_snapshot: EngineSnapshot

    @property
    def peak_bari(self) -> float:
        return max(self.bari_history) if self.bari_history else 0.0

    @property
    def total_auto_alerts(self) -> int:
        return len(self.auto_alert_ticks)

    @property
    def breach_end_tick(self) -> Optional[int]:
        """First tick after which no breach remained active for good."""
        last_active = None
        for i, n in enumerate(self.active_breach_history):
            if n > 0:
                last_active = i
        if last_active is None or last_active + 1 >= self.num_ticks:
            return None
        return last_active + 1


class ScenarioTwin:
    """Replays a scripted breach scenario against a fresh engine.

    Args:
        events: Scripted operator actions.
        config: Engine configuration.
        tick_interval_ms: Simulated time between ticks.
        watch_positions: Sensor indices whose readings are recorded.
        start_ms: Simulated wall-clock time of tick 0.
        name: Label carried into the result.
    """

    def __init__(
        self,
        events: Sequence[ScenarioEvent],
        config: Optional[EngineConfig] = None,
        tick_interval_ms: float = TICK_INTERVAL_MS,
        watch_positions: Sequence[int] = (),
        start_ms: float = 0.0,
        name: str = "scenario",
    ):
        self.events = sorted(events, key=lambda e: e.tick)
        self.config = config or EngineConfig()
        self.tick_interval_ms = tick_interval_ms
        self.watch_positions = list(watch_positions)
        self.start_ms = start_ms
        self.name = name

    def _apply(self, engine: ContainmentEngine, event: ScenarioEvent, now: float) -> None:
        if event.action == INDUCE:
            engine.induce_breach(
                event.position,
                label=event.label,
                width=event.width,
                intensity=event.intensity,
                duration_ms=event.duration_ms,
                now=now,
            )
        else:
            engine.clear_all_breaches(now=now)

    def run(self, num_ticks: int, seed: int = 42) -> ScenarioResult:
        """Run the scenario for ``num_ticks`` ticks.

        Operator events scheduled for tick k happen at
        ``start + k * interval``; tick k itself runs at
        ``start + (k + 1) * interval``.

        Raises:
            ValidationError: An event is scheduled at or after ``num_ticks``
                and would never run.
        """
        late = [e for e in self.events if e.tick >= num_ticks]
        if late:
            raise ValidationError(
                f"{len(late)} event(s) scheduled at or after tick {num_ticks} would never run"
            )
        clock = {"now": self.start_ms}
        engine = ContainmentEngine(config=self.config, seed=seed, clock=lambda: clock["now"])

        bari_history: List[float] = []
        classification_history: List[str] = []
        max_delta_history: List[float] = []
        active_breach_history: List[int] = []
        watched: Dict[int, List[float]] = {p: [] for p in self.watch_positions}
        auto_alert_ticks: List[int] = []

        pending = list(self.events)
        snap = engine.get_snapshot()
        for step in range(num_ticks):
            clock["now"] = self.start_ms + step * self.tick_interval_ms
            while pending and pending[0].tick == step:
                self._apply(engine, pending.pop(0), clock["now"])

            last_id = max((a.id for a in engine.get_snapshot().alerts), default=0)
            clock["now"] = self.start_ms + (step + 1) * self.tick_interval_ms
            snap = engine.tick()

            if any(a.id > last_id and a.level in (WARNING, CRITICAL) for a in snap.alerts):
                auto_alert_ticks.append(step)
            bari_history.append(snap.bari)
            classification_history.append(snap.classification)
            max_delta_history.append(snap.risk.max_delta)
            active_breach_history.append(len(snap.active_breaches))
            for p in self.watch_positions:
                watched[p].append(float(snap.sensor_temps[p]))

        return ScenarioResult(
            scenario_name=self.name,
            num_ticks=num_ticks,
            tick_interval_ms=self.tick_interval_ms,
            bari_history=bari_history,
            classification_history=classification_history,
            max_delta_history=max_delta_history,
            active_breach_history=active_breach_history,
            watched=watched,
            auto_alert_ticks=auto_alert_ticks,
            final_snapshot=snap,
        )


def build_twin(scenario: dict, config: Optional[EngineConfig] = None) -> ScenarioTwin:
    """Construct a twin from a scenario dict (see validation.scenarios)."""
    return ScenarioTwin(
        events=scenario["events"],
        config=config,
        watch_positions=scenario.get("watch_positions", ()),
        name=scenario.get("name", "scenario"),
    )
