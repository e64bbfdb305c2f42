"""Nest — a colony's food bank and hatchery.

A nest sits on one cell for its whole life.  Food dropped there by its
ants is added to the reserve; the world asks it to hatch a new ant each
tick when the nest cell has room.
"""

from __future__ import annotations

from dataclasses import dataclass

from anzim.colony.ant import Ant
from anzim.world.geometry import Coord


@dataclass
class Nest:
    """A colony nest bound to a single cell.

    Attributes:
        index: Position of this nest in the world's nest list.
        cell: Coordinates of the nest cell.
        food_reserve: Stored food.
        next_id: Id handed to the next hatched ant.  Never reused.
    """

    index: int
    cell: Coord
    food_reserve: int = 0
    next_id: int = 0

    def can_hatch(self, cost: int) -> bool:
        """Return True if the reserve covers one more ant."""
        return self.food_reserve >= cost

    def hatch(self, cost: int, health: int) -> Ant | None:
        """Pay for and create a new ant standing on the nest cell.

        The caller is responsible for placing the ant in the world.

        Args:
            cost: Food taken from the reserve.
            health: Starting health of the ant.

        Returns:
            The new Ant, or None when the reserve is too low.
        """
        if not self.can_hatch(cost):
            return None
        ant = Ant(
            nest=self.index,
            ant_id=self.next_id,
            cell=self.cell,
            previous_cell=self.cell,
            health=health,
        )
        self.food_reserve -= cost
        self.next_id += 1
        return ant
