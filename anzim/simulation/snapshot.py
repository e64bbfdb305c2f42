"""Snapshot — read-only views of the world for renderers and exporters.

A snapshot copies what an outside observer may look at into frozen
records, so nothing outside the core can mutate simulation state or
observe a half-applied tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from anzim.colony.ant import Ant, AntKey
    from anzim.world.cell import Cell
    from anzim.world.geometry import Coord, Direction
    from anzim.world.world import World


@dataclass(frozen=True)
class CellView:
    """Observable state of one cell.

    Attributes:
        row: Row position.
        col: Column position.
        occupants: Keys of the ants standing here.
        food_packages: Remains count followed by per-tier package counts.
        pheromone: Pheromone level.
        nest_reserve: Food reserve of the nest here, or None.
    """

    row: int
    col: int
    occupants: tuple[AntKey, ...]
    food_packages: tuple[int, ...]
    pheromone: int
    nest_reserve: int | None


@dataclass(frozen=True)
class AntView:
    """Observable state of one living ant."""

    key: AntKey
    health: int
    carried_food: int
    cell: Coord
    previous_cell: Coord
    last_motion_direction: Direction | None
    last_motion_weight: int


@dataclass(frozen=True)
class WorldSnapshot:
    """Everything a renderer or exporter may read after a tick.

    Attributes:
        tick: Number of completed ticks.
        side: Grid side length.
        food_slots: Length of each ``food_packages`` tuple.
        cells: Views of every materialised cell.
        ants: Views of every living ant, in hatch order.
    """

    tick: int
    side: int
    food_slots: int
    cells: dict[Coord, CellView] = field(default_factory=dict)
    ants: tuple[AntView, ...] = ()

    def cell(self, row: int, col: int) -> CellView:
        """Return the view at ``(row, col)``; untouched cells read as empty."""
        row, col = row % self.side, col % self.side
        view = self.cells.get((row, col))
        if view is None:
            return CellView(
                row=row,
                col=col,
                occupants=(),
                food_packages=(0,) * self.food_slots,
                pheromone=0,
                nest_reserve=None,
            )
        return view


def _cell_view(world: World, cell: Cell) -> CellView:
    reserve = None
    if cell.nest is not None:
        reserve = world.nests[cell.nest].food_reserve
    return CellView(
        row=cell.row,
        col=cell.col,
        occupants=tuple(cell.occupants),
        food_packages=tuple(cell.food_packages),
        pheromone=world.pheromones.read(cell.coord),
        nest_reserve=reserve,
    )


def _ant_view(ant: Ant) -> AntView:
    return AntView(
        key=ant.key,
        health=ant.health,
        carried_food=ant.carried_food,
        cell=ant.cell,
        previous_cell=ant.previous_cell,
        last_motion_direction=ant.last_motion_direction,
        last_motion_weight=ant.last_motion_weight,
    )


def take_snapshot(world: World, tick: int) -> WorldSnapshot:
    """Copy the observable state of ``world`` into a WorldSnapshot."""
    return WorldSnapshot(
        tick=tick,
        side=world.side,
        food_slots=world.config.food_slots,
        cells={
            coord: _cell_view(world, cell)
            for coord, cell in sorted(world.cells.items())
        },
        ants=tuple(_ant_view(ant) for ant in world.ants.values()),
    )
