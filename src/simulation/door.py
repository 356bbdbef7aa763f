from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPENING = "opening"
OPEN = "open"
CLOSING = "closing"

# Events reported by DoorController.step
OPENED = "opened"
REOPENING = "reopening"
SHUT = "shut"


@dataclass
class DoorController:
    """Door state machine driven one tick at a time.

    The controller never starts a cycle on its own: ``request_open`` and
    ``request_close`` come from dispatch. ``step`` only completes a motion or
    turns a closing door around when something is in the doorway.
    """

    speed: float = 1.0
    state: str = CLOSED
    open_fraction: float = 0.0

    @property
    def is_closed(self) -> bool:
        return self.state == CLOSED

    def request_open(self) -> bool:
        if self.state != CLOSED:
            return False
        self.state = OPENING
        logger.debug("door opening")
        return True

    def request_close(self) -> bool:
        if self.state != OPEN:
            return False
        self.state = CLOSING
        logger.debug("door closing")
        return True

    def step(self, dt: float, obstructed: bool) -> Optional[str]:
        """Advance the door by ``dt`` and return the event it produced, if any."""
        if self.state == OPENING:
            self.open_fraction = min(1.0, self.open_fraction + self.speed * dt)
            if self.open_fraction >= 1.0:
                self.state = OPEN
                return OPENED
            return None

        if self.state == CLOSING:
            if obstructed:
                self.state = OPENING
                return REOPENING
            self.open_fraction = max(0.0, self.open_fraction - self.speed * dt)
            if self.open_fraction <= 0.0:
                self.state = CLOSED
                return SHUT
            return None

        # Open doors hold until dispatch asks them to close; closed doors idle.
        return None
