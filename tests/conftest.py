"""Shared fixtures for the Containment Breach Simulation Engine test suite."""

import sys
import os
import pytest
import numpy as np

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import EngineConfig
from models.breach import Breach
from monitoring.engine import ContainmentEngine


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def engine_config():
    """Default 120-sensor, 8-rack configuration."""
    return EngineConfig()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    """A seeded engine on a fake clock starting at t = 0."""
    return ContainmentEngine(seed=7, clock=clock)


@pytest.fixture
def flat_baseline():
    """A perfectly flat 120-sensor baseline at 19.2 degC."""
    return np.full(120, 19.2)


@pytest.fixture
def make_breach():
    """Factory for breaches with sensible defaults."""
    def _make(**overrides):
        params = {
            "id": 1,
            "position": 32,
            "width": 5.0,
            "intensity": 12.0,
            "duration_ms": 60000.0,
            "created_at": 0.0,
            "label": "Test Breach",
            "sensor_count": 120,
        }
        params.update(overrides)
        return Breach(**params)
    return _make
