from __future__ import annotations

from typing import Callable

import pytest

from simulation import Simulation


@pytest.fixture
def sim() -> Simulation:
    return Simulation()


def run_until(
    simulation: Simulation,
    predicate: Callable[[Simulation], bool],
    limit: float = 60.0,
    dt: float = 0.05,
) -> float:
    """Tick until ``predicate`` holds and return the simulated time it first did."""
    end = simulation.current_time + limit
    while simulation.current_time < end:
        simulation.tick(dt)
        if predicate(simulation):
            return simulation.current_time
    raise AssertionError(f"condition not reached within {limit}s of simulated time")
