"""PheromoneField — the trail-marker grid.

Pheromone levels are stored as one integer NumPy 2D array covering the
whole toroidal world, so that per-tick decay is a single vectorised
operation.  The field provides deposit/read operations and delegates
decay to ``decay.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from anzim.world.geometry import Coord


@dataclass
class PheromoneField:
    """Pheromone levels for every cell of a world.

    Attributes:
        side: Grid side length (must match World).
        grid: Non-negative integer levels indexed as ``grid[row, col]``.
    """

    side: int
    grid: NDArray[np.int64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create a zeroed grid."""
        self.grid = np.zeros((self.side, self.side), dtype=np.int64)

    def deposit(self, coord: Coord, amount: int) -> None:
        """Add pheromone at a cell.

        Args:
            coord: Wrapped ``(row, col)``.
            amount: Quantity to add (must be ≥ 0).
        """
        row, col = coord
        self.grid[row, col] += amount

    def read(self, coord: Coord) -> int:
        """Return the pheromone level at a cell."""
        row, col = coord
        return int(self.grid[row, col])

    def total(self) -> int:
        """Return the sum of all levels."""
        return int(self.grid.sum())
