"""Single-car elevator simulation primitives."""

from .activity_log import ActivityLog, LogEntry
from .building import Building
from .call_queue import CallQueue, HallCall
from .config import BuildingConfig, ControllerTiming
from .dispatch import DispatchController
from .door import DoorController
from .elevator import Elevator
from .errors import InvalidRequestError, SimulationError
from .passenger import Passenger
from .simulation import Simulation
from .snapshot import PassengerView, SimulationSnapshot
from .timers import ActionScheduler

__all__ = [
    "ActionScheduler",
    "ActivityLog",
    "Building",
    "BuildingConfig",
    "CallQueue",
    "ControllerTiming",
    "DispatchController",
    "DoorController",
    "Elevator",
    "HallCall",
    "InvalidRequestError",
    "LogEntry",
    "Passenger",
    "PassengerView",
    "Simulation",
    "SimulationError",
    "SimulationSnapshot",
]
