"""Decision -- each ant's proposal for the coming tick.

An ant decides from a read-only view of the world as it stood at the end
of the previous tick: its own state, its cell, the ant sharing the cell
(if any) and the pheromone on the eight neighbouring cells.  Nothing here
mutates the world; the only side effect is drawing from the RNG.

Decision order when carrying food:

1. Hand the food to a hungry, empty-handed cell mate.
2. Eat it if below half health.
3. Drop it if standing on the own nest.
4. Otherwise walk.

Decision order when empty-handed:

1. Pick up any loose food on the cell.
2. Take food from a cell mate who would hand it over.
3. Otherwise walk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from anzim.colony.actions import (
    Action,
    DropFood,
    EatFood,
    GetFood,
    MoveTo,
    PassFood,
    PickFood,
)
from anzim.world.geometry import Direction

if TYPE_CHECKING:
    from numpy.random import Generator

    from anzim.colony.ant import Ant
    from anzim.world.world import World


def should_share(giver: Ant, taker: Ant) -> bool:
    """Return True if ``giver`` would hand its food to ``taker``.

    Both sides of a hand-off evaluate this same predicate, so a pass and
    its matching get are always proposed together.
    """
    return 2 * taker.health < giver.health + 1


def propose_action(ant: Ant, world: World, rng: Generator) -> Action:
    """Compute the single action ``ant`` wants to take this tick.

    Args:
        ant: The deciding ant.
        world: World state at the end of the previous tick.
        rng: Seeded random generator, used only for movement.

    Returns:
        One of the Action variants.
    """
    cell = world.cell(*ant.cell)
    mate_key = cell.other_occupant(ant.key)
    mate = world.ants[mate_key] if mate_key is not None else None

    if ant.is_carrying:
        if (
            mate is not None
            and not mate.is_carrying
            and not cell.has_loose_food
            and should_share(ant, mate)
        ):
            return PassFood(to=mate.key)
        if 2 * ant.health < world.config.ant_health:
            return EatFood()
        if cell.nest == ant.nest:
            return DropFood(amount=ant.carried_food)
        return propose_move(ant, world, rng)

    if cell.has_loose_food:
        return PickFood(cell=cell.coord)
    if mate is not None and mate.is_carrying and should_share(mate, ant):
        return GetFood(giver=mate.key)
    return propose_move(ant, world, rng)


def movement_weights(ant: Ant, world: World) -> list[int]:
    """Score each direction for a move from the ant's current cell.

    The score is ``w * (pheromone + w)`` where ``w`` is the ant's
    preference for that direction.  The direction leading straight back
    to the previous cell loses half a pheromone unit, floored at zero.
    """
    back = None
    if not ant.is_resident:
        back = world.direction_between(ant.cell, ant.previous_cell)
    penalty = world.config.pheromone_unit // 2

    weights: list[int] = []
    for direction in Direction:
        preference = ant.direction_weights[direction]
        level = world.pheromones.read(world.neighbour(ant.cell, direction))
        score = preference * (level + preference)
        if direction == back:
            score = max(0, score - penalty)
        weights.append(score)
    return weights


def propose_move(ant: Ant, world: World, rng: Generator) -> MoveTo:
    """Draw a direction in proportion to its movement weight.

    A uniform roll in ``[0, total)`` selects the first direction whose
    cumulative weight exceeds it.  If every weight is zero the direction
    is drawn uniformly.
    """
    weights = movement_weights(ant, world)
    total = sum(weights)
    if total <= 0:
        direction = Direction(int(rng.integers(len(Direction))))
    else:
        roll = int(rng.integers(total))
        cumulative = 0
        for direction, weight in zip(Direction, weights, strict=True):
            cumulative += weight
            if roll < cumulative:
                break
    return MoveTo(
        weight=weights[direction],
        direction=direction,
        target=world.neighbour(ant.cell, direction),
    )
