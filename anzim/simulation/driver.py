"""Driver — the mutating half of a tick.

Once the resolver has produced a conflict-free plan, these functions
apply it and then run the end-of-tick bookkeeping, in this order:

1. ``apply_resolution``: food actions first, then all moves (every
   departure before any arrival, so a cycle of moves never overfills a
   cell mid-way).  Ants without an accepted move are marked stationary.
2. ``age_ants``: everyone loses one health; ants below zero die and
   leave remains behind.
3. ``decay`` (pheromones): whole grid halves.
4. ``spawn_ants``: each nest hatches an ant if it can.
5. ``check_invariants``: optional full sweep.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from anzim.colony.actions import (
    DropFood,
    EatFood,
    GetFood,
    MoveTo,
    PassFood,
    PickFood,
)
from anzim.simulation.errors import InvariantViolation
from anzim.world.cell import CELL_CAPACITY, FOOD_SLOT_CAPACITY

if TYPE_CHECKING:
    from anzim.colony.ant import Ant
    from anzim.simulation.resolver import Resolution
    from anzim.world.world import World

logger = logging.getLogger(__name__)


def apply_resolution(world: World, resolution: Resolution) -> None:
    """Apply every accepted action to the world.

    Args:
        world: The world to mutate.
        resolution: Output of ``resolve_conflicts`` for this tick.

    Raises:
        InvariantViolation: If an action cannot be applied as resolved.
    """
    moves: list[tuple[Ant, MoveTo]] = []

    for key, action in resolution.accepted.items():
        ant = world.ants[key]
        match action:
            case EatFood():
                amount, _ = ant.release_food()
                ant.health = min(world.config.ant_health, ant.health + amount)
            case DropFood():
                amount, _ = ant.release_food()
                world.nests[ant.nest].food_reserve += amount
                ant.reverse_preference()
            case PassFood(to=to):
                amount, tier = ant.release_food()
                world.ants[to].take_food(amount, tier)
                ant.reverse_preference()
            case GetFood():
                ant.reverse_preference()
            case PickFood(cell=cell, slot=slot):
                if slot is None:
                    msg = f"ant {key} was granted a pick-up without a slot"
                    raise InvariantViolation(msg)
                world.remove_food(cell, slot)
                ant.take_food(world.config.package_value(slot), slot)
                ant.reverse_preference()
            case MoveTo():
                moves.append((ant, action))

    _apply_moves(world, moves)

    moved = {ant.key for ant, _ in moves}
    for key, ant in world.ants.items():
        if key not in moved:
            ant.stay()


def _apply_moves(world: World, moves: list[tuple[Ant, MoveTo]]) -> None:
    unit = world.config.pheromone_unit
    for ant, _ in moves:
        world.cell(*ant.cell).remove_occupant(ant.key)
        world.pheromones.deposit(ant.cell, unit)
    for ant, move in moves:
        world.cell(*move.target).add_occupant(ant.key)
        ant.record_move(move.target, move.direction, move.weight)


def age_ants(world: World) -> list[Ant]:
    """Take one health from every ant and bury those that fall below zero.

    A dead ant leaves one unit of remains on its cell and drops what it
    carried there, each only if that slot has room.

    Returns:
        The ants that died.
    """
    dead: list[Ant] = []
    for ant in world.ants.values():
        ant.health -= 1
        if not ant.is_alive:
            dead.append(ant)

    for ant in dead:
        world.remove_ant(ant.key)
        cell = world.cell(*ant.cell)
        if cell.food_packages[0] < FOOD_SLOT_CAPACITY:
            world.add_food(ant.cell, 0)
        if ant.carried_tier is not None:
            _, tier = ant.release_food()
            if cell.food_packages[tier] < FOOD_SLOT_CAPACITY:
                world.add_food(ant.cell, tier)
        logger.debug("ant %s died at %s", ant.key, ant.cell)
    return dead


def spawn_ants(world: World) -> list[Ant]:
    """Let every nest hatch at most one ant.

    Returns:
        The ants hatched this tick.
    """
    hatched: list[Ant] = []
    for nest in world.nests:
        ant = world.spawn_ant(nest)
        if ant is not None:
            hatched.append(ant)
    return hatched


def check_invariants(world: World) -> None:
    """Verify the structural invariants of the whole world.

    Raises:
        InvariantViolation: Naming the first offending cell or ant.
    """
    for coord, cell in world.cells.items():
        if len(cell.occupants) > CELL_CAPACITY:
            msg = f"cell {coord} holds {len(cell.occupants)} ants: {cell.occupants}"
            raise InvariantViolation(msg)
        for slot, count in enumerate(cell.food_packages):
            if not 0 <= count <= FOOD_SLOT_CAPACITY:
                msg = f"cell {coord} has {count} units in food slot {slot}"
                raise InvariantViolation(msg)
        for key in cell.occupants:
            ant = world.ants.get(key)
            if ant is None or ant.cell != coord:
                msg = f"cell {coord} lists ant {key} which is not standing there"
                raise InvariantViolation(msg)

    for key, ant in world.ants.items():
        if key not in world.cell(*ant.cell).occupants:
            msg = f"ant {key} is missing from the occupants of cell {ant.cell}"
            raise InvariantViolation(msg)
        if not 0 <= ant.health <= world.config.ant_health:
            msg = f"ant {key} has health {ant.health}"
            raise InvariantViolation(msg)

    if (world.pheromones.grid < 0).any():
        msg = "pheromone field holds negative levels"
        raise InvariantViolation(msg)
