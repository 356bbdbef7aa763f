from __future__ import annotations

import logging
import math
import random
from typing import Callable, Dict, List, Optional

from scheduler import get_scheduler

from .activity_log import DEFAULT_CAPACITY, ActivityLog, LogEntry
from .building import Building
from .call_queue import CallQueue
from .config import BuildingConfig, ControllerTiming
from .dispatch import DispatchController
from .door import DoorController
from .elevator import Elevator
from .errors import InvalidRequestError
from .passenger import Passenger
from .snapshot import PassengerView, SimulationSnapshot
from .timers import ActionScheduler

logger = logging.getLogger(__name__)


class Simulation:
    """Tick-driven single-car simulation owning all mutable state.

    Collaborators drive it through ``tick`` and ``spawn_passenger`` and read it
    through ``snapshot`` or ``on_event`` callbacks; nothing outside this object
    mutates the car, the call queue, the passengers or the log.
    """

    def __init__(
        self,
        building: Optional[Building] = None,
        timing: Optional[ControllerTiming] = None,
        scheduler_name: str = "nearest",
        log_capacity: int = DEFAULT_CAPACITY,
        random_seed: Optional[int] = None,
    ) -> None:
        self.building = building or Building(BuildingConfig())
        self.timing = timing or ControllerTiming()
        self.elevator = Elevator(door=DoorController(speed=self.timing.door_speed))
        self.calls = CallQueue(self.building.floor_count)
        self.passengers: List[Passenger] = []
        self.log = ActivityLog(log_capacity)
        self.timers = ActionScheduler()
        self.scheduler_name = scheduler_name
        self.dispatcher = DispatchController(self, get_scheduler(scheduler_name))
        self.random = random.Random(random_seed)
        self.current_time: float = 0.0
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._next_passenger_id = 0

    def tick(self, dt: float) -> None:
        """Advance simulated time by ``dt`` and bring every state machine up to date."""
        if not math.isfinite(dt) or dt <= 0:
            raise InvalidRequestError(f"tick duration must be positive, got {dt}")
        self.current_time += dt
        self.timers.run_due(self.current_time)
        self.dispatcher.step(dt)
        if self.event_hooks.get("tick"):
            self._emit("tick", self.snapshot())

    def run(self, duration: float, dt: float = 0.1) -> None:
        end = self.current_time + duration
        while self.current_time < end - 1e-9:
            self.tick(min(dt, end - self.current_time))

    def spawn_passenger(self, source: int, target: int) -> PassengerView:
        self.building.check_floor(source)
        self.building.check_floor(target)
        if source == target:
            raise InvalidRequestError(f"Passenger source and target are both Floor {source}")

        passenger = Passenger(
            passenger_id=self._next_passenger_id,
            source=source,
            target=target,
            spawned_at=self.current_time,
        )
        self._next_passenger_id += 1
        self.passengers.append(passenger)
        self.calls.request_hall_call(source, passenger.direction)
        self.record(f"New passenger spawned at Floor {source}")
        view = _view(passenger)
        self._emit("spawn", view)
        return view

    def spawn_random_passenger(self) -> PassengerView:
        floors = range(self.building.floor_count)
        source = self.random.choice(floors)
        target = self.random.choice([f for f in floors if f != source])
        return self.spawn_passenger(source, target)

    def find_passenger(self, passenger_id: int) -> Optional[Passenger]:
        for passenger in self.passengers:
            if passenger.passenger_id == passenger_id:
                return passenger
        return None

    def remove_passenger(self, passenger_id: int) -> None:
        self.passengers = [p for p in self.passengers if p.passenger_id != passenger_id]
        logger.debug("passenger %s removed at t=%.2f", passenger_id, self.current_time)

    def is_obstructed(self) -> bool:
        """True while someone is boarding or exiting at the floor the car is at."""
        position = self.elevator.position
        tolerance = self.timing.obstruction_tolerance
        return any(
            p.transit_floor is not None
            and self.building.is_at_floor(position, p.transit_floor, tolerance)
            for p in self.passengers
        )

    def is_parked_at(self, floor: int) -> bool:
        return not self.elevator.door.is_closed and self.building.is_at_floor(
            self.elevator.position, floor, self.timing.obstruction_tolerance
        )

    def record(self, message: str) -> LogEntry:
        entry = self.log.add(self.current_time, message)
        self._emit("log", entry)
        return entry

    def separator(self) -> LogEntry:
        entry = self.log.separator(self.current_time)
        self._emit("log", entry)
        return entry

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def snapshot(self) -> SimulationSnapshot:
        car = self.elevator
        return SimulationSnapshot(
            time=self.current_time,
            position=car.position,
            current_floor=self.building.floor_at(car.position),
            target_floor=car.target_floor,
            direction=car.direction,
            door_state=car.door_state,
            door_open_fraction=car.door_open_fraction,
            passengers=tuple(_view(p) for p in self.passengers),
            pending_calls=tuple(self.calls.pending()),
            car_calls=tuple(self.calls.car_calls),
            hall_calls=tuple(self.calls.hall_calls),
            logs=tuple(self.log.entries()),
        )

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)


def _view(passenger: Passenger) -> PassengerView:
    return PassengerView(
        passenger_id=passenger.passenger_id,
        source=passenger.source,
        target=passenger.target,
        state=passenger.state,
        spawned_at=passenger.spawned_at,
        boarded_at=passenger.boarded_at,
        exited_at=passenger.exited_at,
    )
