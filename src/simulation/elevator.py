from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .door import DoorController


@dataclass
class Elevator:
    """The car: shaft position, travel direction and its door."""

    position: float = 0.0
    direction: str = "idle"  # up, down, idle
    target_floor: Optional[int] = None
    door: DoorController = field(default_factory=DoorController)

    @property
    def door_state(self) -> str:
        return self.door.state

    @property
    def door_open_fraction(self) -> float:
        return self.door.open_fraction

    def move_towards(self, target_position: float, max_step: float) -> None:
        """Travel toward ``target_position`` by at most ``max_step``, never overshooting."""
        dy = target_position - self.position
        if dy == 0:
            return
        self.direction = "up" if dy > 0 else "down"
        self.position += math.copysign(min(abs(dy), max_step), dy)

    def park(self, position: float) -> None:
        self.position = position
        self.direction = "idle"
        self.target_floor = None
