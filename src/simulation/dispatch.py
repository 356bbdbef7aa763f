from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, List

from scheduler import Scheduler

from .door import OPEN, OPENED, REOPENING, SHUT
from .passenger import BOARDING, EXITING, IN_CAR, WAITING, Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .simulation import Simulation

logger = logging.getLogger(__name__)


class DispatchController:
    """Moves the car toward calls and sequences each stop.

    While the door is closed the controller picks a target and drives the car;
    otherwise it drives the door. An arrival opens the door and schedules the
    unload, load and close actions, each of which re-checks live state when it
    fires.
    """

    def __init__(self, simulation: "Simulation", scheduler: Scheduler) -> None:
        self.simulation = simulation
        self.scheduler = scheduler
        self._reclose_after_reopen = False

    def step(self, dt: float) -> None:
        door = self.simulation.elevator.door
        if not door.is_closed:
            self._step_door(dt)
            return
        self._step_car(dt)

    def _step_car(self, dt: float) -> None:
        sim = self.simulation
        car = sim.elevator
        building = sim.building

        target = self.scheduler.select_target(building.floor_at(car.position), sim.calls.pending())
        if target is None:
            car.direction = "idle"
            car.target_floor = None
            return

        car.target_floor = target
        target_position = building.elevation(target)
        if abs(target_position - car.position) < sim.timing.arrival_tolerance:
            self._arrive(target)
            # An opening door is never at fraction 0, so it starts moving this tick.
            self._step_door(dt)
        else:
            car.move_towards(target_position, sim.timing.car_speed * dt)

    def _step_door(self, dt: float) -> None:
        sim = self.simulation
        event = sim.elevator.door.step(dt, sim.is_obstructed())
        if event == OPENED:
            sim.record("Doors fully open")
            if self._reclose_after_reopen:
                self._reclose_after_reopen = False
                self._schedule_close(sim.timing.reopen_dwell)
        elif event == REOPENING:
            sim.record("Doors re-opening (Passenger detected)")
            self._reclose_after_reopen = True
        elif event == SHUT:
            sim.record("Doors closed")
            sim.separator()

    def _arrive(self, floor: int) -> None:
        sim = self.simulation
        timing = sim.timing
        now = sim.current_time

        sim.elevator.park(sim.building.elevation(floor))
        sim.elevator.door.request_open()
        sim.separator()
        sim.record(f"Arrived at Floor {floor}")
        # Cleared on arrival so riders boarding here cannot re-trigger the call.
        sim.calls.clear(floor)

        sim.timers.schedule(now + timing.exit_delay, f"unload floor {floor}", partial(self._unload, floor))
        sim.timers.schedule(now + timing.boarding_delay, f"load floor {floor}", partial(self._load, floor))
        self._schedule_close(timing.close_delay)

    def _unload(self, floor: int) -> None:
        sim = self.simulation
        riders = [p for p in sim.passengers if p.state == IN_CAR and p.target == floor]
        if not riders:
            return
        if not sim.is_parked_at(floor):
            logger.warning("car left floor %s before unloading; keeping riders aboard", floor)
            for passenger in riders:
                sim.calls.request_car_call(passenger.target)
            return

        for passenger in riders:
            passenger.start_exiting(sim.current_time)
            sim.separator()
            sim.record(f"Passenger exiting at Floor {floor}")
            sim.separator()
            sim.timers.schedule(
                sim.current_time + sim.timing.exit_dwell,
                f"remove passenger {passenger.passenger_id}",
                partial(self._remove, passenger.passenger_id),
            )

    def _load(self, floor: int) -> None:
        sim = self.simulation
        waiting: List[Passenger] = [p for p in sim.passengers if p.state == WAITING and p.source == floor]
        if not waiting:
            return
        if not sim.is_parked_at(floor):
            logger.warning("car left floor %s before loading; re-registering hall call", floor)
            for passenger in waiting:
                sim.calls.request_hall_call(passenger.source, passenger.direction)
            return

        for passenger in waiting:
            passenger.start_boarding(sim.current_time)
            sim.separator()
            sim.record(f"Passenger boarding at Floor {floor}")
            sim.separator()
            sim.timers.schedule(
                sim.current_time + sim.timing.boarding_dwell,
                f"seat passenger {passenger.passenger_id}",
                partial(self._seat, passenger.passenger_id),
            )
        # Riders who pressed the hall button after arrival were just picked up too.
        sim.calls.clear(floor)

    def _seat(self, passenger_id: int) -> None:
        sim = self.simulation
        passenger = sim.find_passenger(passenger_id)
        if passenger is None or passenger.state != BOARDING:
            return
        passenger.finish_boarding()
        sim.calls.request_car_call(passenger.target)
        sim.record(f"Passenger requested Floor {passenger.target}")

    def _remove(self, passenger_id: int) -> None:
        sim = self.simulation
        passenger = sim.find_passenger(passenger_id)
        if passenger is None or passenger.state != EXITING:
            return
        sim.remove_passenger(passenger_id)

    def _schedule_close(self, delay: float) -> None:
        sim = self.simulation
        sim.timers.schedule(sim.current_time + delay, "close doors", self._close)

    def _close(self) -> None:
        sim = self.simulation
        door = sim.elevator.door
        if door.state != OPEN:
            return
        if sim.is_obstructed():
            self._schedule_close(sim.timing.reopen_dwell)
            return
        door.request_close()
        sim.record("Doors closing...")
