from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from .activity_log import LogEntry
from .call_queue import HallCall


@dataclass(frozen=True)
class PassengerView:
    passenger_id: int
    source: int
    target: int
    state: str
    spawned_at: float
    boarded_at: Optional[float] = None
    exited_at: Optional[float] = None


@dataclass(frozen=True)
class SimulationSnapshot:
    """Immutable view of the simulation handed to renderers and API clients."""

    time: float
    position: float
    current_floor: float
    target_floor: Optional[int]
    direction: str
    door_state: str
    door_open_fraction: float
    passengers: Tuple[PassengerView, ...]
    pending_calls: Tuple[int, ...]
    car_calls: Tuple[int, ...]
    hall_calls: Tuple[HallCall, ...]
    logs: Tuple[LogEntry, ...]

    def to_dict(self) -> dict:
        data = asdict(self)
        for entry, log in zip(self.logs, data["logs"]):
            log["label"] = entry.label
        return data
