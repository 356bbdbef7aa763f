from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class BuildingConfig:
    """Fixed shape of the building served by the car."""

    floor_count: int = 8
    floor_height: float = 1.5

    def __post_init__(self) -> None:
        if self.floor_count < 2:
            raise ValueError(f"floor_count must be at least 2, got {self.floor_count}")
        if self.floor_height <= 0:
            raise ValueError(f"floor_height must be positive, got {self.floor_height}")


@dataclass(frozen=True)
class ControllerTiming:
    """Speeds, tolerances and dwell times used by the door and dispatch controllers.

    Delays are measured in simulated seconds from the moment the car arrives at
    a floor, except the dwells, which start when the passenger transition fires.
    """

    car_speed: float = 1.0
    door_speed: float = 1.0
    arrival_tolerance: float = 0.05
    obstruction_tolerance: float = 0.1
    exit_delay: float = 1.5
    boarding_delay: float = 2.5
    boarding_dwell: float = 2.5
    exit_dwell: float = 4.0
    close_delay: float = 5.5
    reopen_dwell: float = 1.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value <= 0:
                raise ValueError(f"{item.name} must be positive, got {value}")
        if self.exit_delay > self.boarding_delay:
            raise ValueError("exit_delay must not exceed boarding_delay")
        if self.close_delay <= self.boarding_delay:
            raise ValueError("close_delay must exceed boarding_delay")
