"""Ant -- individual agent state.

An ant is pure state: where it stands, where it stood last tick, how
healthy it is, what it carries, and how strongly it prefers each of the
eight compass directions.  Deciding what to do lives in ``decision.py``;
applying the decision lives in the tick driver.

Direction preferences:

- **Newborns** have no preferred direction; every octant gets the same
  weight.
- **After a move** the weights are replaced by a fixed curve peaking on
  the direction of travel, so ants keep walking roughly straight.
- **Handling food** (picking, dropping, passing) turns the preferences
  around by 180 degrees so the ant heads back the way it came.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from anzim.simulation.errors import InvariantViolation
from anzim.world.geometry import Coord, Direction

# -- Constants ---------------------------------------------------------------

INITIAL_WEIGHT = 4
MOTION_CURVE = (16, 8, 4, 2, 1)  # weight by angular distance from travel

AntKey = tuple[int, int]
"""``(nest index, ant id)``, unique for the life of the simulation."""


@dataclass
class Ant:
    """A single ant agent.

    Attributes:
        nest: Index of the nest that hatched this ant.
        ant_id: Sequential id within the nest.
        cell: Current ``(row, col)``.
        previous_cell: Cell at the start of the last tick; equal to
            ``cell`` when the ant did not move.
        health: Remaining health; the ant dies below zero.
        carried_food: Food value of the unit being carried (0 if none).
        carried_tier: ``food_packages`` slot the carried unit came from.
        direction_weights: One non-negative preference per Direction.
        last_motion_direction: Direction of the move that brought the
            ant to its current cell, if any.
        last_motion_weight: Score that move was drawn with.
    """

    nest: int
    ant_id: int
    cell: Coord
    previous_cell: Coord
    health: int
    carried_food: int = 0
    carried_tier: int | None = None
    direction_weights: list[int] = field(
        default_factory=lambda: [INITIAL_WEIGHT] * len(Direction),
    )
    last_motion_direction: Direction | None = None
    last_motion_weight: int = 0

    @property
    def key(self) -> AntKey:
        """Return the registry key of this ant."""
        return (self.nest, self.ant_id)

    @property
    def is_alive(self) -> bool:
        """Return True while health has not dropped below zero."""
        return self.health >= 0

    @property
    def is_carrying(self) -> bool:
        """Return True if the ant holds a food unit."""
        return self.carried_tier is not None

    @property
    def is_resident(self) -> bool:
        """Return True if the ant did not arrive on its cell last tick."""
        return self.previous_cell == self.cell

    @property
    def arrived_orthogonally(self) -> bool:
        """Return True if the last move was along N/S/E/W."""
        direction = self.last_motion_direction
        return direction is not None and direction.is_orthogonal

    def take_food(self, amount: int, tier: int) -> None:
        """Start carrying one food unit.

        Raises:
            InvariantViolation: If the ant already carries food.
        """
        if self.is_carrying:
            msg = f"ant {self.key} already carries tier {self.carried_tier}"
            raise InvariantViolation(msg)
        self.carried_food = amount
        self.carried_tier = tier

    def release_food(self) -> tuple[int, int]:
        """Stop carrying and return ``(amount, tier)`` of the unit.

        Raises:
            InvariantViolation: If the ant carries nothing.
        """
        if self.carried_tier is None:
            msg = f"ant {self.key} has no food to release"
            raise InvariantViolation(msg)
        released = (self.carried_food, self.carried_tier)
        self.carried_food = 0
        self.carried_tier = None
        return released

    def reverse_preference(self) -> None:
        """Rotate the direction weights by 180 degrees."""
        weights = self.direction_weights
        self.direction_weights = [weights[d.opposite] for d in Direction]

    def orient_towards(self, direction: Direction) -> None:
        """Reset the weights to the travel curve centred on ``direction``."""
        self.direction_weights = [
            MOTION_CURVE[direction.distance(d)] for d in Direction
        ]

    def record_move(self, target: Coord, direction: Direction, weight: int) -> None:
        """Update position and heading after an accepted move."""
        self.previous_cell = self.cell
        self.cell = target
        self.last_motion_direction = direction
        self.last_motion_weight = weight
        self.orient_towards(direction)

    def stay(self) -> None:
        """Mark the ant as stationary for this tick."""
        self.previous_cell = self.cell
