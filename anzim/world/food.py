"""Food — stochastic placement of new food packages.

Food generation is probabilistic and biased towards rows and columns
that have recently seen food activity.  Rather than scanning the grid,
the world keeps one running weight per row and one per column; a
placement or removal bumps the weights of that row and column and of
their neighbours on either side.  Sampling a location is then two
independent weighted draws.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from anzim.world.geometry import Coord

if TYPE_CHECKING:
    from numpy.random import Generator

    from anzim.world.world import World

logger = logging.getLogger(__name__)

_SPREAD = (-1, 0, 1)  # cross pattern around a food event


@dataclass
class FoodActivity:
    """Per-row and per-column food-activity weights.

    Attributes:
        side: World side length.
        rows: Weight of each row (starts at 1).
        cols: Weight of each column (starts at 1).
    """

    side: int
    rows: NDArray[np.int64] = field(init=False, repr=False)
    cols: NDArray[np.int64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Seed every row and column with weight 1."""
        self.rows = np.ones(self.side, dtype=np.int64)
        self.cols = np.ones(self.side, dtype=np.int64)

    def record(self, coord: Coord) -> None:
        """Note that food was placed at or removed from ``coord``."""
        row, col = coord
        for offset in _SPREAD:
            self.rows[(row + offset) % self.side] += 1
            self.cols[(col + offset) % self.side] += 1

    def sample(self, rng: Generator) -> Coord:
        """Draw a ``(row, col)`` weighted by recent activity."""
        return (_weighted_index(self.rows, rng), _weighted_index(self.cols, rng))


def _weighted_index(weights: NDArray[np.int64], rng: Generator) -> int:
    """Return the first index whose cumulative weight exceeds a uniform roll."""
    cumulative = np.cumsum(weights)
    roll = int(rng.integers(int(cumulative[-1])))
    return int(np.searchsorted(cumulative, roll, side="right"))


def generate_food(world: World, rng: Generator) -> Coord | None:
    """Maybe place one food package somewhere in the world.

    Steps, any of which may end the attempt without placing food:

    1. Roll a disturbance offset in {-1, 0, 1} on each axis; only a
       dead-centre roll (both zero) goes on.
    2. Draw a target row and column from the activity weights.
    3. The target cell must hold no nest and no ants.
    4. Pick one of the cell's non-full package tiers uniformly and add
       a package there.

    Args:
        world: The world to place food in.
        rng: Seeded random generator.

    Returns:
        Coordinates of the cell that received food, or None.
    """
    drow, dcol = (int(v) for v in rng.integers(-1, 2, size=2))
    if drow or dcol:
        logger.debug("food roll (%d, %d) off centre, skipping", drow, dcol)
        return None

    coord = world.food_activity.sample(rng)
    existing = world.peek(*coord)
    if existing is not None and (existing.nest is not None or existing.occupants):
        logger.debug(
            "food target %s has nest=%s ants=%s, skipping",
            coord,
            existing.nest,
            existing.occupants,
        )
        return None

    cell = world.cell(*coord)
    free = cell.free_package_slots()
    if not free:
        logger.debug("food target %s is full %s, skipping", coord, cell.food_packages)
        return None

    slot = free[int(rng.integers(len(free)))]
    world.add_food(coord, slot)
    logger.debug("food package tier %d placed at %s", slot, coord)
    return coord
