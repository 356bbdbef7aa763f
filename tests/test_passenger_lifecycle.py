import pytest

from conftest import run_until
from simulation import ControllerTiming, HallCall, InvalidRequestError, Simulation


def _state(sim, passenger_id):
    passenger = sim.find_passenger(passenger_id)
    return passenger.state if passenger else None


def test_single_ride_from_lobby_to_floor_three(sim):
    view = sim.spawn_passenger(0, 3)
    pid = view.passenger_id
    assert view.state == "waiting"
    assert sim.calls.hall_calls == [HallCall(0, "up")]

    run_until(sim, lambda s: s.elevator.door_state == "opening")
    assert sim.calls.pending() == []

    run_until(sim, lambda s: s.elevator.door_state == "open")
    run_until(sim, lambda s: _state(s, pid) == "boarding")
    assert sim.elevator.door_state == "open"
    assert sim.is_obstructed()

    run_until(sim, lambda s: _state(s, pid) == "in_car")
    assert sim.calls.car_calls == [3]
    assert sim.log.messages()[0] == "Passenger requested Floor 3"

    run_until(sim, lambda s: s.elevator.door_state == "closing")
    run_until(sim, lambda s: s.elevator.door_state == "closed")
    assert sim.elevator.position == 0.0

    run_until(sim, lambda s: s.elevator.position > 0.0)
    assert sim.elevator.direction == "up"

    run_until(sim, lambda s: s.elevator.door_state == "opening")
    assert sim.elevator.position == sim.building.elevation(3)
    assert sim.calls.pending() == []

    run_until(sim, lambda s: _state(s, pid) == "exiting")
    assert sim.elevator.door_state == "open"

    run_until(sim, lambda s: not s.passengers)
    run_until(sim, lambda s: s.elevator.door_state == "closed")
    assert sim.calls.pending() == []

    messages = list(reversed(sim.log.messages()))
    assert messages == [
        "New passenger spawned at Floor 0",
        "Arrived at Floor 0",
        "Doors fully open",
        "Passenger boarding at Floor 0",
        "Passenger requested Floor 3",
        "Doors closing...",
        "Doors closed",
        "Arrived at Floor 3",
        "Doors fully open",
        "Passenger exiting at Floor 3",
        "Doors closing...",
        "Doors closed",
    ]


def test_doors_never_close_on_a_passenger(sim):
    pid = sim.spawn_passenger(2, 0).passenger_id
    while sim.current_time < 40.0:
        sim.tick(0.05)
        passenger = sim.find_passenger(pid)
        if passenger and passenger.transit_floor is not None and sim.is_obstructed():
            assert sim.elevator.door_state in ("opening", "open")
    assert sim.passengers == []


def test_long_exit_holds_doors_open():
    sim = Simulation(timing=ControllerTiming(exit_dwell=10.0))
    pid = sim.spawn_passenger(0, 1).passenger_id
    run_until(sim, lambda s: _state(s, pid) == "exiting")

    while sim.passengers:
        sim.tick(0.05)
        if sim.passengers:
            assert sim.elevator.door_state == "open"

    run_until(sim, lambda s: s.elevator.door_state == "closed", limit=5.0)


def test_two_passengers_are_both_delivered(sim):
    first = sim.spawn_passenger(0, 3).passenger_id
    second = sim.spawn_passenger(5, 1).passenger_id
    assert sim.calls.hall_calls == [HallCall(0, "up"), HallCall(5, "down")]

    run_until(sim, lambda s: _state(s, second) == "boarding", limit=90.0)
    assert _state(sim, first) is None

    run_until(sim, lambda s: not s.passengers and s.elevator.door_state == "closed", limit=90.0)
    assert sim.calls.pending() == []
    assert sim.elevator.position == sim.building.elevation(1)


def test_passenger_spawned_at_open_floor_is_picked_up(sim):
    sim.spawn_passenger(0, 2)
    run_until(sim, lambda s: s.elevator.door_state == "open")
    late = sim.spawn_passenger(0, 4).passenger_id
    assert sim.calls.has_hall_call(0)

    run_until(sim, lambda s: _state(s, late) == "boarding")
    assert not sim.calls.has_hall_call(0)


def test_waiting_passenger_is_not_stranded_when_car_has_left(sim):
    pid = sim.spawn_passenger(0, 2).passenger_id
    sim.tick(0.05)
    assert sim.elevator.door_state == "opening"

    # Pretend the car has drifted away before the boarding window opens.
    sim.elevator.position = sim.building.elevation(1)
    run_until(sim, lambda s: s.calls.has_hall_call(0))
    assert _state(sim, pid) == "waiting"

    sim.elevator.position = 0.0
    run_until(sim, lambda s: _state(s, pid) == "in_car", limit=30.0)


@pytest.mark.parametrize(
    "source, target",
    [(2, 2), (-1, 3), (0, 8), (8, 0), (1.5, 3), (0, 2.0), (True, 3), ("1", 3)],
)
def test_invalid_spawn_is_rejected_without_side_effects(sim, source, target):
    with pytest.raises(InvalidRequestError):
        sim.spawn_passenger(source, target)
    assert sim.passengers == []
    assert sim.calls.pending() == []
    assert len(sim.log) == 0


def test_random_spawn_uses_distinct_floors():
    sim = Simulation(random_seed=3)
    for _ in range(20):
        view = sim.spawn_random_passenger()
        assert view.source != view.target
        assert 0 <= view.source < 8 and 0 <= view.target < 8
    assert len(sim.passengers) == 20
    assert [p.passenger_id for p in sim.passengers] == list(range(20))


def test_spawn_and_log_observers(sim):
    spawned, logged = [], []
    sim.on_event("spawn", spawned.append)
    sim.on_event("log", logged.append)
    view = sim.spawn_passenger(1, 4)
    assert spawned == [view]
    assert [entry.message for entry in logged] == ["New passenger spawned at Floor 1"]


def test_snapshot_is_detached_from_live_state(sim):
    sim.spawn_passenger(0, 3)
    snapshot = sim.snapshot()
    run_until(sim, lambda s: s.elevator.door_state == "open")
    assert snapshot.door_state == "closed"
    assert snapshot.pending_calls == (0,)
    assert snapshot.passengers[0].state == "waiting"
    data = snapshot.to_dict()
    assert data["hall_calls"] == ({"floor": 0, "direction": "up"},)
    assert data["logs"][0]["label"] == "[00:00.0]"


def _check_door_fraction(snapshot):
    fraction = snapshot.door_open_fraction
    assert 0.0 <= fraction <= 1.0
    assert (fraction == 0.0) == (snapshot.door_state == "closed")
    assert (fraction == 1.0) == (snapshot.door_state == "open")


@pytest.mark.parametrize("dt", [0.05, 0.1, 0.3])
def test_door_fraction_matches_door_state_after_every_tick(dt):
    sim = Simulation()
    snapshots = []
    sim.on_event("tick", snapshots.append)
    sim.spawn_passenger(0, 3)
    sim.spawn_passenger(5, 1)

    run_until(sim, lambda s: not s.passengers and s.elevator.door_state == "closed", limit=120.0, dt=dt)
    assert {s.door_state for s in snapshots} == {"closed", "opening", "open", "closing"}
    for snapshot in snapshots:
        _check_door_fraction(snapshot)


def test_door_fraction_matches_state_while_a_close_is_deferred():
    sim = Simulation(timing=ControllerTiming(exit_dwell=10.0))
    snapshots = []
    sim.on_event("tick", snapshots.append)
    sim.spawn_passenger(0, 1)

    run_until(sim, lambda s: not s.passengers and s.elevator.door_state == "closed")
    for snapshot in snapshots:
        _check_door_fraction(snapshot)


def test_passenger_view_carries_lifecycle_times(sim):
    pid = sim.spawn_passenger(0, 2).passenger_id
    boarded = run_until(sim, lambda s: _state(s, pid) == "boarding")
    exited = run_until(sim, lambda s: _state(s, pid) == "exiting")

    view = sim.snapshot().passengers[0]
    assert view.spawned_at == 0.0
    assert view.boarded_at == pytest.approx(boarded)
    assert view.exited_at == pytest.approx(exited)
