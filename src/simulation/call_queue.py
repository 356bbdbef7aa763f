from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .building import is_floor_index
from .errors import InvalidRequestError

HALL_DIRECTIONS = ("up", "down")


@dataclass(frozen=True)
class HallCall:
    floor: int
    direction: str = "up"


@dataclass
class CallQueue:
    """Pending car and hall calls for a building of ``floor_count`` floors.

    Only one hall call is kept per floor; the direction of the first request
    wins. Ordering beyond enumeration order is left to the scheduler.
    """

    floor_count: int
    car_calls: List[int] = field(default_factory=list)
    hall_calls: List[HallCall] = field(default_factory=list)

    def request_car_call(self, floor: int) -> bool:
        self._check_floor(floor)
        if floor in self.car_calls:
            return False
        self.car_calls.append(floor)
        self.car_calls.sort()
        return True

    def request_hall_call(self, floor: int, direction: str = "up") -> bool:
        self._check_floor(floor)
        if direction not in HALL_DIRECTIONS:
            raise InvalidRequestError(f"Unknown hall call direction '{direction}'")
        if self.has_hall_call(floor):
            return False
        self.hall_calls.append(HallCall(floor, direction))
        return True

    def has_hall_call(self, floor: int) -> bool:
        return any(call.floor == floor for call in self.hall_calls)

    def clear(self, floor: int) -> None:
        self.car_calls = [f for f in self.car_calls if f != floor]
        self.hall_calls = [call for call in self.hall_calls if call.floor != floor]

    def pending(self) -> List[int]:
        """Car call floors followed by hall call floors, each floor listed once."""
        floors: List[int] = []
        for floor in [*self.car_calls, *(call.floor for call in self.hall_calls)]:
            if floor not in floors:
                floors.append(floor)
        return floors

    def __len__(self) -> int:
        return len(self.pending())

    def _check_floor(self, floor: int) -> None:
        if not is_floor_index(floor, self.floor_count):
            raise InvalidRequestError(
                f"Floor {floor} is not a floor of the building (0..{self.floor_count - 1})"
            )
