from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List

logger = logging.getLogger(__name__)

# Absorbs float drift from accumulating many small ticks.
FIRE_EPSILON = 1e-9


@dataclass(order=True)
class ScheduledAction:
    fire_at: float
    sequence: int
    label: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)


class ActionScheduler:
    """Pending delayed actions, drained in fire-time order by the tick driver.

    Actions scheduled for the same instant fire in the order they were
    scheduled. Callbacks are expected to re-check whatever state they depend
    on, since ticks may have changed it since scheduling.
    """

    def __init__(self) -> None:
        self._queue: List[ScheduledAction] = []
        self._counter = itertools.count()

    def schedule(self, fire_at: float, label: str, callback: Callable[[], None]) -> ScheduledAction:
        action = ScheduledAction(fire_at, next(self._counter), label, callback)
        heapq.heappush(self._queue, action)
        logger.debug("scheduled %s at t=%.3f", label, fire_at)
        return action

    def run_due(self, now: float) -> int:
        """Fire every action due at or before ``now``; return how many fired.

        Actions scheduled by a firing callback that are already due run in the
        same drain.
        """
        fired = 0
        while self._queue and self._queue[0].fire_at <= now + FIRE_EPSILON:
            action = heapq.heappop(self._queue)
            logger.debug("firing %s (due t=%.3f)", action.label, action.fire_at)
            action.callback()
            fired += 1
        return fired

    def pending_labels(self) -> List[str]:
        return [action.label for action in sorted(self._queue)]

    def __len__(self) -> int:
        return len(self._queue)
