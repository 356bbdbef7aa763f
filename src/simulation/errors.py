from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors raised by the simulation."""


class InvalidRequestError(SimulationError, ValueError):
    """A caller asked for something outside the building or the model's rules."""
