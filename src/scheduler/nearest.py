from __future__ import annotations

from typing import Optional, Sequence


class NearestCallScheduler:
    """Heads for the pending floor closest to the car.

    Ties go to whichever floor appears first in ``pending``, so car calls win
    over hall calls at equal distance. Hall call direction is ignored.
    """

    def select_target(self, current_floor: float, pending: Sequence[int]) -> Optional[int]:
        if not pending:
            return None
        # min() keeps the first of equally distant floors.
        return min(pending, key=lambda floor: abs(floor - current_floor))
