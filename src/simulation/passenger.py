from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Lifecycle states; a finished passenger is deleted rather than marked done.
WAITING = "waiting"
BOARDING = "boarding"
IN_CAR = "in_car"
EXITING = "exiting"


@dataclass
class Passenger:
    """Represents a rider travelling from ``source`` to ``target``."""

    passenger_id: int
    source: int
    target: int
    spawned_at: float
    state: str = WAITING
    boarded_at: Optional[float] = None
    exited_at: Optional[float] = None

    @property
    def direction(self) -> str:
        """Return ``"up"`` or ``"down"``."""
        return "up" if self.target > self.source else "down"

    @property
    def transit_floor(self) -> Optional[int]:
        """Floor at which this passenger is crossing the door threshold, if any."""
        if self.state == BOARDING:
            return self.source
        if self.state == EXITING:
            return self.target
        return None

    def start_boarding(self, time: float) -> None:
        self.state = BOARDING
        self.boarded_at = time

    def finish_boarding(self) -> None:
        self.state = IN_CAR

    def start_exiting(self, time: float) -> None:
        self.state = EXITING
        self.exited_at = time

