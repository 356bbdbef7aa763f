from __future__ import annotations

from dataclasses import dataclass, field

from .config import BuildingConfig
from .errors import InvalidRequestError


def is_floor_index(floor: object, floor_count: int) -> bool:
    """True for a whole-number index in ``0..floor_count-1``; bools and floats are not floors."""
    return isinstance(floor, int) and not isinstance(floor, bool) and 0 <= floor < floor_count


@dataclass(frozen=True)
class Building:
    """Shaft geometry: maps floor indices to elevations along the shaft."""

    config: BuildingConfig = field(default_factory=BuildingConfig)

    @property
    def floor_count(self) -> int:
        return self.config.floor_count

    @property
    def floor_height(self) -> float:
        return self.config.floor_height

    @property
    def top_floor(self) -> int:
        return self.floor_count - 1

    def contains(self, floor: int) -> bool:
        return is_floor_index(floor, self.floor_count)

    def check_floor(self, floor: int) -> None:
        if not self.contains(floor):
            raise InvalidRequestError(f"Floor {floor} is not a floor of the building (0..{self.top_floor})")

    def elevation(self, floor: int) -> float:
        return floor * self.floor_height

    def floor_at(self, position: float) -> float:
        """Fractional floor index for a shaft position."""
        return position / self.floor_height

    def is_at_floor(self, position: float, floor: int, tolerance: float) -> bool:
        return abs(self.elevation(floor) - position) < tolerance
