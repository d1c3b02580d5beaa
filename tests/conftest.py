"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.multiplay.config import DrillConfig  # noqa: E402
from src.multiplay.session import create_engine  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Millisecond clock the test moves by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingSink:
    """RewardSink that remembers every rewarded pair."""

    def __init__(self):
        self.rewarded = []

    def reward(self, pair):
        self.rewarded.append(pair)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config(tmp_path):
    """Default drill settings with state kept under tmp_path."""
    return DrillConfig(
        max_factor=12,
        n_choices=4,
        sufficient=2,
        fast_milliseconds=2000.0,
        timing_samples=5,
        state_path=tmp_path / "state.json",
        seed=None,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def session(config, clock, sink):
    """Fresh seeded session with a fake clock and recording reward sink."""
    return create_engine(
        config=config,
        rng=random.Random(1234),
        clock=clock,
        feedback=sink,
    )


@pytest.fixture
def pose(session):
    """Force the session to show a pair, with its product as the first choice."""

    def _pose(pair):
        a, b = pair
        session.problem = pair
        session.choices = [a * b, a * b + 1, a * b + 2, a * b + 3]

    return _pose
