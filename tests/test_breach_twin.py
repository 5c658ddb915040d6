"""Tests for the scenario twin, the scenario library and validation metrics."""

import math

import numpy as np
import pytest

from models.alert import BREACH, CLEAR
from models.errors import ValidationError
from validation.breach_twin import ScenarioEvent, ScenarioTwin, build_twin, INDUCE, CLEAR as CLEAR_ACTION
from validation.scenarios import (
    scenario_a_single_breach,
    scenario_b_concurrent,
    scenario_c_clear_all,
    scenario_d_short_lived,
    scenario_e_quiet,
    all_scenarios,
)
from validation.metrics import (
    SEVERITY_ORDER,
    first_tick_at_or_above,
    first_crossing_tick,
    first_auto_alert_tick,
    recovery_tick,
    is_monotonic_relaxation,
    summarize_runs,
)


def _run(scenario, seed=42):
    return build_twin(scenario).run(scenario["num_ticks"], seed=seed)


class TestScenarioEvent:

    def test_negative_tick(self):
        with pytest.raises(ValidationError):
            ScenarioEvent(tick=-1, action=CLEAR_ACTION)

    def test_unknown_action(self):
        with pytest.raises(ValidationError, match="Unknown"):
            ScenarioEvent(tick=0, action="explode")

    def test_induce_needs_position(self):
        with pytest.raises(ValidationError, match="position"):
            ScenarioEvent(tick=0, action=INDUCE)


class TestScenarioLibrary:

    def test_all_scenarios_well_formed(self):
        scenarios = all_scenarios()
        assert [s["name"] for s in scenarios] == ["A", "B", "C", "D", "E"]
        for s in scenarios:
            assert {"name", "events", "watch_positions", "num_ticks", "description"} <= set(s)
            assert s["num_ticks"] > 0
            assert all(isinstance(e, ScenarioEvent) for e in s["events"])


class TestScenarioA:
    """Single breach at sensor 32."""

    @pytest.fixture(scope="class")
    def result(self):
        return _run(scenario_a_single_breach())

    def test_history_lengths(self, result):
        assert len(result.bari_history) == 40
        assert len(result.classification_history) == 40
        assert len(result.watched[32]) == 40

    def test_crosses_23c_within_five_ticks(self, result):
        tick = first_crossing_tick(result.watched[32], 23.0)
        assert tick is not None and tick <= 4

    def test_becomes_elevated(self, result):
        tick = first_tick_at_or_above(result.classification_history, "ELEVATED")
        assert tick is not None and tick <= 4
        assert all(0.0 <= b <= 1.0 for b in result.bari_history)

    def test_auto_alerts_spaced_by_window(self, result):
        """BREACH at t=0 holds auto-alerts until 9 s, then every 9 s."""
        assert result.auto_alert_ticks == [17, 35]
        assert first_auto_alert_tick(result.auto_alert_ticks) == 17

    def test_breach_still_active(self, result):
        assert result.breach_end_tick is None
        assert len(result.final_snapshot.active_breaches) == 1

    def test_reproducible(self, result):
        again = _run(scenario_a_single_breach())
        assert again.bari_history == result.bari_history


class TestScenarioB:
    """Three concurrent breaches."""

    @pytest.fixture(scope="class")
    def result(self):
        return _run(scenario_b_concurrent())

    def test_all_breaches_active(self, result):
        assert len(result.final_snapshot.active_breaches) == 3
        assert result.active_breach_history[:5] == [1, 1, 2, 2, 3]

    def test_three_breach_alerts(self, result):
        levels = [a.level for a in result.final_snapshot.alerts]
        assert levels.count(BREACH) == 3

    def test_first_auto_alert_after_last_breach_window(self, result):
        """The last BREACH alert at 2 s delays auto-alerts until 11 s."""
        assert result.auto_alert_ticks[0] == 21

    def test_each_site_heats(self, result):
        for p in (8, 64, 91):
            assert result.watched[p][-1] > 25.0


class TestScenarioC:
    """Breach followed by clear-all."""

    @pytest.fixture(scope="class")
    def result(self):
        return _run(scenario_c_clear_all())

    def test_clear_ends_breach(self, result):
        assert result.active_breach_history[19] == 1
        assert result.active_breach_history[20] == 0
        assert result.breach_end_tick == 20

    def test_single_clear_alert_after_breach(self, result):
        alerts = result.final_snapshot.alerts
        assert [a.level for a in alerts].count(CLEAR) == 1
        assert alerts[0].level == CLEAR

    def test_monotonic_relaxation(self, result):
        assert is_monotonic_relaxation(result.watched[32][19:26])

    def test_recovers_to_all_clear(self, result):
        ticks = recovery_tick(result.classification_history, result.breach_end_tick)
        assert ticks is not None and ticks <= 10
        assert result.classification_history[-1] == "ALL_CLEAR"

    def test_no_auto_alert_after_clear(self, result):
        assert result.auto_alert_ticks == [17]


class TestScenarioD:
    """Breach that expires on its own."""

    @pytest.fixture(scope="class")
    def result(self):
        return _run(scenario_d_short_lived())

    def test_expires_at_five_seconds(self, result):
        """Tick 8 runs at 4.5 s (active), tick 9 at 5 s (expired)."""
        assert result.active_breach_history[8] == 1
        assert result.active_breach_history[9] == 0
        assert result.breach_end_tick == 9

    def test_no_auto_alert(self, result):
        """The excursion has decayed by the time the window opens."""
        assert result.auto_alert_ticks == []


class TestScenarioE:
    """Quiet run."""

    def test_no_false_alarms(self):
        result = _run(scenario_e_quiet())
        assert result.auto_alert_ticks == []
        assert result.final_snapshot.alerts == ()
        assert result.peak_bari < 0.05
        assert set(result.classification_history) == {"ALL_CLEAR"}
        assert result.breach_end_tick is None
        assert recovery_tick(result.classification_history, result.breach_end_tick) is None


class TestScenarioTwin:

    def test_events_sorted_by_tick(self):
        events = [
            ScenarioEvent(tick=4, action=CLEAR_ACTION),
            ScenarioEvent(tick=0, action=INDUCE, position=10),
        ]
        twin = ScenarioTwin(events)
        assert [e.tick for e in twin.events] == [0, 4]

    def test_event_beyond_run_rejected(self):
        """An event that would never run is an error, not silently dropped."""
        twin = ScenarioTwin([ScenarioEvent(tick=5, action=CLEAR_ACTION)])
        with pytest.raises(ValidationError, match="never run"):
            twin.run(5)

    def test_event_on_last_tick_accepted(self):
        result = ScenarioTwin([ScenarioEvent(tick=4, action=CLEAR_ACTION)]).run(5)
        assert result.final_snapshot.alerts[0].level == CLEAR

    def test_zero_ticks(self):
        result = ScenarioTwin([]).run(0)
        assert result.bari_history == []
        assert result.peak_bari == 0.0
        assert result.final_snapshot.tick_count == 0

    def test_start_offset(self):
        twin = ScenarioTwin([ScenarioEvent(tick=0, action=INDUCE, position=10)], start_ms=1_000_000.0)
        result = twin.run(3)
        assert result.final_snapshot.timestamp == 1_001_500.0
        assert result.final_snapshot.active_breaches[0].created_at == 1_000_000.0


class TestMetrics:

    def test_severity_order(self):
        assert SEVERITY_ORDER == ["ALL_CLEAR", "ELEVATED", "HIGH_RISK", "CRITICAL"]

    def test_first_tick_at_or_above(self):
        history = ["ALL_CLEAR", "ALL_CLEAR", "HIGH_RISK", "ELEVATED"]
        assert first_tick_at_or_above(history, "ELEVATED") == 2
        assert first_tick_at_or_above(history, "CRITICAL") is None

    def test_first_crossing_is_strict(self):
        assert first_crossing_tick([20.0, 23.0, 23.1], 23.0) == 2
        assert first_crossing_tick([20.0], 23.0) is None

    def test_first_auto_alert_tick(self):
        assert first_auto_alert_tick([]) is None
        assert first_auto_alert_tick([5, 9]) == 5

    def test_recovery_tick(self):
        history = ["ELEVATED", "ELEVATED", "ELEVATED", "ALL_CLEAR"]
        assert recovery_tick(history, 1) == 2
        assert recovery_tick(history[:3], 1) is None
        assert recovery_tick(history, None) is None

    def test_monotonic_relaxation(self):
        assert is_monotonic_relaxation([30.0, 25.0, 22.0, 22.0])
        assert not is_monotonic_relaxation([30.0, 25.0, 25.5])
        assert is_monotonic_relaxation([30.0, 25.0, 25.05], tolerance=0.1)

    def test_summarize_runs(self):
        rows = [{"t": 2}, {"t": 4}, {"t": None}]
        summary = summarize_runs(rows, ["t", "missing"])
        assert summary["t"]["mean"] == pytest.approx(3.0)
        assert summary["t"]["std"] == pytest.approx(1.0)
        assert math.isnan(summary["missing"]["mean"])
