"""World — the single container for all mutable simulation state.

The World owns the lazily created cells of a toroidal grid, the
pheromone field, the nests, the registry of living ants and the food
activity weights.  Every tick phase receives the World explicitly;
nothing in the core reaches for global state.

Coordinates wrap: ``(row, col)`` and ``(row + side, col - side)`` name
the same cell.  Cells are created the first time they are asked for and
are never destroyed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from anzim.pheromones.fields import PheromoneField
from anzim.simulation.errors import InvariantViolation
from anzim.world.cell import Cell
from anzim.world.food import FoodActivity
from anzim.world.geometry import Coord, Direction
from anzim.world.nest import Nest

if TYPE_CHECKING:
    from anzim.colony.ant import Ant, AntKey
    from anzim.simulation.config import SimulationConfig

logger = logging.getLogger(__name__)


@dataclass
class World:
    """A toroidal grid world that contains all simulation state.

    Attributes:
        config: Parameters the world was built with.
        cells: Materialised cells keyed by wrapped ``(row, col)``.
        pheromones: Pheromone levels for the whole grid.
        food_activity: Row/column weights steering food placement.
        nests: All nests, indexed by ``Nest.index``.
        ants: Living ants keyed by ``(nest, ant_id)``, in hatch order.
    """

    config: SimulationConfig
    cells: dict[Coord, Cell] = field(init=False, repr=False)
    pheromones: PheromoneField = field(init=False, repr=False)
    food_activity: FoodActivity = field(init=False, repr=False)
    nests: list[Nest] = field(init=False, default_factory=list)
    ants: dict[AntKey, Ant] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        """Set up the empty grid, pheromone field and food weights."""
        self.cells = {}
        self.pheromones = PheromoneField(side=self.side)
        self.food_activity = FoodActivity(side=self.side)

    @property
    def side(self) -> int:
        """Return the grid side length."""
        return self.config.world_side

    # -- Addressing --

    def wrap(self, row: int, col: int) -> Coord:
        """Return the canonical coordinates of ``(row, col)``."""
        return (row % self.side, col % self.side)

    def has_cell(self, row: int, col: int) -> bool:
        """Return True if the cell at ``(row, col)`` was ever created."""
        return self.wrap(row, col) in self.cells

    def peek(self, row: int, col: int) -> Cell | None:
        """Return the cell at ``(row, col)`` without creating it."""
        return self.cells.get(self.wrap(row, col))

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at ``(row, col)``, creating it on first use."""
        coord = self.wrap(row, col)
        cell = self.cells.get(coord)
        if cell is None:
            cell = Cell(
                row=coord[0],
                col=coord[1],
                food_packages=[0] * self.config.food_slots,
            )
            self.cells[coord] = cell
        return cell

    def neighbour(self, coord: Coord, direction: Direction) -> Coord:
        """Return the wrapped coordinates one step from ``coord``."""
        drow, dcol = direction.offset
        return self.wrap(coord[0] + drow, coord[1] + dcol)

    def direction_between(self, origin: Coord, target: Coord) -> Direction | None:
        """Return the direction leading from ``origin`` to adjacent ``target``.

        Returns:
            The Direction, or None if the cells are not neighbours.
        """
        for direction in Direction:
            if self.neighbour(origin, direction) == target:
                return direction
        return None

    # -- Nests and ants --

    def add_nest(self, row: int, col: int, reserve: int | None = None) -> Nest:
        """Build a nest on the cell at ``(row, col)``.

        Args:
            row: Row of the nest cell.
            col: Column of the nest cell.
            reserve: Starting food; defaults to the configured reserve.

        Raises:
            InvariantViolation: If the cell already has a nest.
        """
        cell = self.cell(row, col)
        if cell.nest is not None:
            msg = f"cell {cell.coord} already hosts nest {cell.nest}"
            raise InvariantViolation(msg)
        if reserve is None:
            reserve = self.config.initial_nest_reserve
        nest = Nest(index=len(self.nests), cell=cell.coord, food_reserve=reserve)
        cell.nest = nest.index
        self.nests.append(nest)
        return nest

    def place_ant(self, ant: Ant) -> None:
        """Register an ant and put it on the cell it names.

        Raises:
            InvariantViolation: If the key is taken or the cell is full.
        """
        if ant.key in self.ants:
            msg = f"ant {ant.key} is already registered"
            raise InvariantViolation(msg)
        ant.cell = self.wrap(*ant.cell)
        ant.previous_cell = self.wrap(*ant.previous_cell)
        self.cell(*ant.cell).add_occupant(ant.key)
        self.ants[ant.key] = ant

    def remove_ant(self, key: AntKey) -> Ant:
        """Take an ant off its cell and out of the registry."""
        ant = self.ants.pop(key)
        self.cell(*ant.cell).remove_occupant(key)
        return ant

    def spawn_ant(self, nest: Nest) -> Ant | None:
        """Hatch an ant on ``nest`` if the cell has room and food allows.

        Returns:
            The new Ant, or None when nothing was hatched.
        """
        if self.cell(*nest.cell).is_full:
            return None
        ant = nest.hatch(self.config.spawn_cost, self.config.ant_health)
        if ant is None:
            return None
        self.place_ant(ant)
        logger.debug("nest %d hatched ant %s", nest.index, ant.key)
        return ant

    def will_spawn(self, cell: Cell) -> bool:
        """Return True if the nest on ``cell`` can afford to hatch an ant."""
        if cell.nest is None:
            return False
        return self.nests[cell.nest].can_hatch(self.config.spawn_cost)

    # -- Food --

    def add_food(self, coord: Coord, slot: int) -> None:
        """Put one unit into ``food_packages[slot]`` and record activity."""
        self.cell(*coord).add_food(slot)
        self.food_activity.record(self.wrap(*coord))

    def remove_food(self, coord: Coord, slot: int) -> None:
        """Take one unit out of ``food_packages[slot]`` and record activity."""
        self.cell(*coord).remove_food(slot)
        self.food_activity.record(self.wrap(*coord))

    def food_mass(self) -> int:
        """Return all food in the world: loose, carried and in reserve."""
        loose = sum(
            count * self.config.package_value(slot)
            for cell in self.cells.values()
            for slot, count in enumerate(cell.food_packages)
        )
        carried = sum(ant.carried_food for ant in self.ants.values())
        stored = sum(nest.food_reserve for nest in self.nests)
        return loose + carried + stored
