"""Tests for automatic thermal alerts and their suppression window."""

import numpy as np
import pytest

from models.alert import AlertLog, WARNING, CRITICAL, BREACH, CLEAR
from monitoring.alerts import (
    auto_alert_level,
    is_suppressed,
    evaluate_auto_alert,
    push_breach_alert,
    push_clear_alert,
)


def _spike(baseline, delta, at=32):
    temps = baseline.copy()
    temps[at] += delta
    return temps


class TestAutoAlertLevel:

    @pytest.mark.parametrize("delta,level", [
        (0.0, None),
        (4.5, None),
        (4.51, WARNING),
        (7.0, WARNING),
        (7.01, CRITICAL),
        (15.0, CRITICAL),
    ])
    def test_thresholds_are_strict(self, delta, level):
        assert auto_alert_level(delta) == level


class TestSuppression:

    def test_empty_log_never_suppresses(self):
        assert not is_suppressed(None, 0.0)

    def test_window_boundary(self):
        """Suppressed for 9 s after the most recent alert, then open again."""
        log = AlertLog()
        recent = push_clear_alert(log, 1000.0)
        assert is_suppressed(recent, 1000.0)
        assert is_suppressed(recent, 9999.0)
        assert not is_suppressed(recent, 10000.0)


class TestEvaluateAutoAlert:
    """Tests for the per-tick auto-alert rule."""

    def test_below_threshold_no_alert(self, flat_baseline):
        log = AlertLog()
        assert evaluate_auto_alert(_spike(flat_baseline, 4.0), flat_baseline, log, 0.0, 8) is None
        assert len(log) == 0

    def test_warning_alert_content(self, flat_baseline):
        """A +5 degC excursion at sensor 32 raises a located WARNING."""
        log = AlertLog()
        alert = evaluate_auto_alert(_spike(flat_baseline, 5.0), flat_baseline, log, 0.0, 8)
        assert alert.level == WARNING
        assert alert.message == "Thermal anomaly ΔT +5.0°C above baseline"
        assert alert.zone_label == "Zone B"
        assert alert.physical_location == "Rack R3, 10'8\" from N"
        assert alert.recommended_action.startswith("Dispatch to Rack R3")
        assert log.most_recent() is alert

    def test_critical_alert(self, flat_baseline):
        log = AlertLog()
        alert = evaluate_auto_alert(_spike(flat_baseline, 9.0), flat_baseline, log, 0.0, 8)
        assert alert.level == CRITICAL

    def test_two_excursions_within_window_alert_once(self, flat_baseline):
        """A second excursion 5 s later is held back."""
        log = AlertLog()
        temps = _spike(flat_baseline, 6.0)
        assert evaluate_auto_alert(temps, flat_baseline, log, 0.0, 8) is not None
        assert evaluate_auto_alert(temps, flat_baseline, log, 5000.0, 8) is None
        assert len(log) == 1

    def test_excursions_nine_seconds_apart_alert_twice(self, flat_baseline):
        log = AlertLog()
        temps = _spike(flat_baseline, 6.0)
        evaluate_auto_alert(temps, flat_baseline, log, 0.0, 8)
        assert evaluate_auto_alert(temps, flat_baseline, log, 9000.0, 8) is not None
        assert len(log) == 2

    def test_suppressed_by_any_level(self, flat_baseline):
        """A fresh BREACH or CLEAR alert also opens a quiet window."""
        log = AlertLog()
        push_clear_alert(log, 0.0)
        assert evaluate_auto_alert(_spike(flat_baseline, 8.0), flat_baseline, log, 8999.0, 8) is None
        assert evaluate_auto_alert(_spike(flat_baseline, 8.0), flat_baseline, log, 9000.0, 8) is not None


class TestOperatorAlerts:

    def test_breach_alert_ignores_window(self, make_breach):
        """Breach alerts are pushed even right after another alert."""
        log = AlertLog()
        push_clear_alert(log, 0.0)
        alert = push_breach_alert(log, make_breach(position=32, label="Zone B — Curtain Seam"), 1.0, 8)
        assert alert.level == BREACH
        assert alert.zone_label == "Zone B — Curtain Seam"
        assert alert.recommended_action == "Inspect & reseal at Rack R3, 10'8\" from N"
        assert len(log) == 2

    def test_clear_alert(self):
        log = AlertLog()
        alert = push_clear_alert(log, 0.0)
        assert alert.level == CLEAR
        assert alert.zone_label == "All Zones"
        assert alert.recommended_action is None
