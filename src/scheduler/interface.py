from __future__ import annotations

from typing import Optional, Protocol, Sequence


class Scheduler(Protocol):
    """Strategy interface for choosing the car's next target floor."""

    def select_target(self, current_floor: float, pending: Sequence[int]) -> Optional[int]:
        """
        Return the floor the car should head for next, or ``None`` to idle.

        ``current_floor`` is fractional while the car is between floors.
        ``pending`` lists car calls before hall calls, each floor once.
        """
        ...
