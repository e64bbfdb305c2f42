"""Cell — a single tile in the world grid.

Each cell holds up to two ants, a small stack of loose food and an
optional nest.  Pheromone concentrations are stored externally in the
``PheromoneField`` so the cell itself stays lightweight.  Ants and nests
are referenced by key/index only; the world owns the objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from anzim.simulation.errors import InvariantViolation

if TYPE_CHECKING:
    from anzim.colony.ant import AntKey
    from anzim.world.geometry import Coord

CELL_CAPACITY = 2
"""Most ants a cell can hold at once."""

FOOD_SLOT_CAPACITY = 2
"""Most units a single ``food_packages`` slot can hold."""


@dataclass
class Cell:
    """A single tile in the world grid.

    Attributes:
        row: Row position.
        col: Column position.
        food_packages: Loose food counts.  Index 0 counts dead-ant
            remains, index ``i > 0`` counts packages of tier ``i``.
        occupants: Keys of the ants standing here, in arrival order.
        nest: Index of the nest built on this cell, if any.
    """

    row: int
    col: int
    food_packages: list[int]
    occupants: list[AntKey] = field(default_factory=list)
    nest: int | None = None

    @property
    def coord(self) -> Coord:
        """Return ``(row, col)``."""
        return (self.row, self.col)

    @property
    def is_full(self) -> bool:
        """Return True if no further ant fits."""
        return len(self.occupants) >= CELL_CAPACITY

    @property
    def has_loose_food(self) -> bool:
        """Return True if any remains or packages lie here."""
        return any(self.food_packages)

    def loose_food_slots(self) -> list[int]:
        """Return one slot index per loose food unit, ascending."""
        return [
            slot for slot, count in enumerate(self.food_packages) for _ in range(count)
        ]

    def add_occupant(self, key: AntKey) -> None:
        """Register an ant as standing on this cell.

        Raises:
            InvariantViolation: If the cell is already full.
        """
        if self.is_full:
            msg = (
                f"cell {self.coord} already holds {self.occupants}, "
                f"cannot admit ant {key}"
            )
            raise InvariantViolation(msg)
        self.occupants.append(key)

    def remove_occupant(self, key: AntKey) -> None:
        """Unregister an ant from this cell.

        Raises:
            InvariantViolation: If the ant is not here.
        """
        if key not in self.occupants:
            msg = f"ant {key} is not on cell {self.coord} ({self.occupants})"
            raise InvariantViolation(msg)
        self.occupants.remove(key)

    def other_occupant(self, key: AntKey) -> AntKey | None:
        """Return the key of the ant sharing this cell with ``key``."""
        for other in self.occupants:
            if other != key:
                return other
        return None

    def free_package_slots(self) -> list[int]:
        """Return the package tiers (remains excluded) that have room."""
        return [
            slot
            for slot, count in enumerate(self.food_packages)
            if slot > 0 and count < FOOD_SLOT_CAPACITY
        ]

    def add_food(self, slot: int) -> None:
        """Add one unit of food to ``food_packages[slot]``.

        Raises:
            InvariantViolation: If the slot is already full.
        """
        if self.food_packages[slot] >= FOOD_SLOT_CAPACITY:
            msg = f"food slot {slot} overflows on cell {self.coord}"
            raise InvariantViolation(msg)
        self.food_packages[slot] += 1

    def remove_food(self, slot: int) -> None:
        """Take one unit of food from ``food_packages[slot]``.

        Raises:
            InvariantViolation: If the slot is empty.
        """
        if self.food_packages[slot] <= 0:
            msg = f"food slot {slot} is empty on cell {self.coord}"
            raise InvariantViolation(msg)
        self.food_packages[slot] -= 1
