"""CLI for running offline elevator scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from simulation import Building, BuildingConfig, ControllerTiming, Simulation


def build_simulation(config: Dict) -> Simulation:
    building = Building(BuildingConfig(**config.get("building", {})))
    timing = ControllerTiming(**config.get("timing", {}))
    return Simulation(
        building=building,
        timing=timing,
        scheduler_name=config.get("scheduler", "nearest"),
        log_capacity=config.get("log_capacity", 50),
        random_seed=config.get("random_seed"),
    )


def _spawn_due(simulation: Simulation, arrivals: List[Dict]) -> List[Dict]:
    remaining: List[Dict] = []
    for arrival in arrivals:
        if arrival.get("time", 0) > simulation.current_time + 1e-9:
            remaining.append(arrival)
        elif arrival.get("random"):
            simulation.spawn_random_passenger()
        else:
            simulation.spawn_passenger(arrival["source"], arrival["target"])
    return remaining


def run_simulation(simulation: Simulation, config: Dict) -> None:
    duration = config.get("duration", 60.0)
    dt = config.get("dt", 0.1)
    arrivals = sorted(config.get("passengers", []), key=lambda a: a.get("time", 0))

    end = simulation.current_time + duration
    arrivals = _spawn_due(simulation, arrivals)
    while simulation.current_time < end - 1e-9:
        simulation.tick(min(dt, end - simulation.current_time))
        arrivals = _spawn_due(simulation, arrivals)


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the final snapshot as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every activity entry as it happens")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    run_simulation(simulation, config)

    snapshot = simulation.snapshot()
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 60.0),
        "final_state": snapshot.to_dict(),
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Duration: {results['duration']}s simulated")
    print("Activity log (oldest first):")
    for entry in reversed(snapshot.logs):
        if entry.is_separator:
            print()
        else:
            print(f"  {entry.label} {entry.message}")
    print(f"Passengers still in the building: {len(snapshot.passengers)}")
    print(f"Pending calls: {list(snapshot.pending_calls)}")
    if args.output:
        print(f"Saved final state to {args.output}")


if __name__ == "__main__":
    main()
