"""
Root pytest configuration for the grid world SARSA tests.

Provides shared fixtures and the `slow` marker. Slow tests replay the full
default scenario (epsilon 0.1 on a 5x5 grid), whose first episodes can need
millions of steps before the goal is found for the first time.
That reference run (5x5 grid, alpha 0.5, gamma 0.9, epsilon 0.1, 100 seeded
episodes, every episode reaching the goal) is
`tests/test_experiment.py::TestTrain::test_reference_scenario` and only runs
with `pytest --run-slow` (about two minutes).
"""

import pytest

from gridworld_sarsa import GridWorld, SARSAAgent


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow-running (enable with --run-slow)"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow end-to-end training tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless explicitly requested."""
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="slow test (use --run-slow to enable)")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture
def grid():
    """Seeded 5x5 grid."""
    env = GridWorld(size=5)
    env.reset(seed=0)
    return env


@pytest.fixture
def make_agent(grid):
    """Factory for SARSA agents on the shared grid with a fixed seed."""

    def _make(learning_rate=0.5, gamma=0.9, epsilon=0.1, seed=0, env=None, **kwargs):
        return SARSAAgent(
            env=env if env is not None else grid,
            learning_rate=learning_rate,
            gamma=gamma,
            epsilon=epsilon,
            seed=seed,
            **kwargs,
        )

    return _make
