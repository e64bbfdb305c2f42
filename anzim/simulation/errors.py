"""Errors — the two failure classes of the simulation core.

Configuration problems are caught up front.  Everything else that can go
wrong inside a tick is a logic defect: the world is left in a state that
cannot be trusted, so the tick aborts with an ``InvariantViolation``
naming the cells and ants involved.
"""

from __future__ import annotations


class AnzimError(Exception):
    """Base class for all simulation errors."""


class ConfigError(AnzimError, ValueError):
    """Raised when a ``SimulationConfig`` holds unusable values."""


class InvariantViolation(AnzimError, RuntimeError):
    """Raised when a world invariant is broken mid-tick.

    These are never recovered from; they indicate a bug in proposal,
    resolution, or application logic rather than a simulation outcome.
    """
