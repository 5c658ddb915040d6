"""
Pre-defined breach scenarios for validation.

Each scenario function returns a dict with:
    - name: short identifier
    - events: list of ScenarioEvent (operator actions by tick)
    - watch_positions: sensor indices whose readings are recorded
    - num_ticks: suggested run length at 500 ms per tick
    - description: human-readable summary
"""

from typing import List

from data.mock_data import get_preset_breach_zones
from validation.breach_twin import ScenarioEvent, INDUCE, CLEAR


def _preset(position: int) -> dict:
    """Look up a demo breach site by sensor index."""
    return next(z for z in get_preset_breach_zones() if z["position"] == position)


def scenario_a_single_breach() -> dict:
    """Scenario A: One curtain-seam breach with fixed parameters.

    Intensity 12 degC, width 5 sensors, 60 s lifetime at sensor 32.  The
    reading at the breach should cross 23 degC within five ticks and the
    classification should leave ALL_CLEAR.
    """
    zone = _preset(32)
    return {
        "name": "A",
        "events": [
            ScenarioEvent(tick=0, action=INDUCE, position=zone["position"],
                          label=zone["label"], width=5.0, intensity=12.0,
                          duration_ms=60000.0),
        ],
        "watch_positions": [zone["position"]],
        "num_ticks": 40,
        "description": "Single breach at sensor 32 (I=12, w=5), 60 s lifetime",
    }


def scenario_b_concurrent() -> dict:
    """Scenario B: Three breaches opened a second apart.

    Tests additive plumes and the interaction of explicit BREACH alerts
    with the auto-alert suppression window.
    """
    sites = [_preset(8), _preset(64), _preset(91)]
    events = [
        ScenarioEvent(tick=2 * i, action=INDUCE, position=z["position"],
                      label=z["label"], width=5.0, intensity=11.0,
                      duration_ms=60000.0)
        for i, z in enumerate(sites)
    ]
    return {
        "name": "B",
        "events": events,
        "watch_positions": [z["position"] for z in sites],
        "num_ticks": 60,
        "description": "Three concurrent breaches (sensors 8, 64, 91)",
    }


def scenario_c_clear_all() -> dict:
    """Scenario C: A breach followed by an operator clear-all.

    Readings should relax monotonically back toward baseline after the
    clear and the classification should return to ALL_CLEAR.
    """
    zone = _preset(32)
    return {
        "name": "C",
        "events": [
            ScenarioEvent(tick=0, action=INDUCE, position=zone["position"],
                          label=zone["label"], width=5.0, intensity=12.0,
                          duration_ms=60000.0),
            ScenarioEvent(tick=20, action=CLEAR),
        ],
        "watch_positions": [zone["position"]],
        "num_ticks": 60,
        "description": "Breach at sensor 32 cleared by the operator after 10 s",
    }


def scenario_d_short_lived() -> dict:
    """Scenario D: A breach that expires on its own after 5 s.

    Tests breach expiry: no explicit end event, the plume simply stops
    being applied once the lifetime has elapsed.
    """
    zone = _preset(64)
    return {
        "name": "D",
        "events": [
            ScenarioEvent(tick=0, action=INDUCE, position=zone["position"],
                          label=zone["label"], width=6.0, intensity=13.0,
                          duration_ms=5000.0),
        ],
        "watch_positions": [zone["position"]],
        "num_ticks": 40,
        "description": "Breach at sensor 64 expiring after 5 s",
    }


def scenario_e_quiet() -> dict:
    """Scenario E: No breaches.  Nothing should alert and BARI stays low."""
    return {
        "name": "E",
        "events": [],
        "watch_positions": [0, 60, 119],
        "num_ticks": 40,
        "description": "No breaches (false-alarm check)",
    }


def all_scenarios() -> List[dict]:
    return [
        scenario_a_single_breach(),
        scenario_b_concurrent(),
        scenario_c_clear_all(),
        scenario_d_short_lived(),
        scenario_e_quiet(),
    ]
