"""Resolver — turn every ant's proposal into a conflict-free plan.

The resolver reads the world but never changes it.  Given one proposal
per living ant it decides which proposals are accepted and which are
discarded (a discarded ant simply stays put this tick).

Conflict classes:

- **Hand-offs** (``PassFood``/``GetFood``) must come in matching pairs
  and are then always accepted.
- **Eat/drop** never conflict and are always accepted.
- **Pick-ups** compete per cell for the loose food units lying there.
- **Moves** compete per destination cell for its two places.  Places
  free up only when occupants leave, so moves are settled by repeating
  per-cell passes until nothing changes, then breaking any remaining
  wait-cycle (A waits for B's cell, B for C's, ..., back to A) by moving
  everyone on the cycle at once.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
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
from anzim.simulation.errors import InvariantViolation
from anzim.world.cell import CELL_CAPACITY

if TYPE_CHECKING:
    from anzim.colony.ant import Ant, AntKey
    from anzim.world.geometry import Coord
    from anzim.world.world import World

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Outcome of resolving one tick's proposals.

    Attributes:
        accepted: Actions that will be applied, by ant key.  Accepted
            pick-ups carry the slot they were granted.
        discarded: Proposals that were turned down, by ant key.
        cycles: Number of wait-cycles broken while settling moves.
    """

    accepted: dict[AntKey, Action] = field(default_factory=dict)
    discarded: dict[AntKey, Action] = field(default_factory=dict)
    cycles: int = 0


def resolve_conflicts(world: World, proposals: dict[AntKey, Action]) -> Resolution:
    """Resolve all proposals of a tick.

    Args:
        world: World state the proposals were made against.
        proposals: One action per living ant.

    Returns:
        The accepted and discarded proposals.  Every key of
        ``proposals`` ends up in exactly one of the two maps.

    Raises:
        InvariantViolation: On mismatched hand-offs, impossible priority
            ties, or inconsistent motion bookkeeping.
    """
    resolution = Resolution()
    picks: dict[Coord, list[AntKey]] = defaultdict(list)
    moves: dict[Coord, list[AntKey]] = defaultdict(list)

    for key, action in proposals.items():
        match action:
            case PassFood() | GetFood():
                _check_hand_off(key, action, proposals)
                resolution.accepted[key] = action
            case EatFood() | DropFood():
                resolution.accepted[key] = action
            case PickFood(cell=cell):
                picks[cell].append(key)
            case MoveTo(target=target):
                moves[target].append(key)
            case _:
                msg = f"ant {key} proposed unknown action {action!r}"
                raise InvariantViolation(msg)

    for cell, contenders in picks.items():
        _resolve_picks(world, cell, contenders, proposals, resolution)

    _MotionResolver(world, proposals, moves, resolution).run()
    return resolution


# -- Priorities --------------------------------------------------------------


def pick_priority(ant: Ant) -> tuple[bool, bool, int, AntKey]:
    """Rank an ant competing for loose food; larger goes first.

    Ants that were already on the cell beat newcomers, then an
    orthogonal arrival beats a diagonal one, then the heavier arriving
    move, then the higher key.
    """
    return (
        ant.is_resident,
        ant.arrived_orthogonally,
        ant.last_motion_weight,
        ant.key,
    )


def motion_priority(ant: Ant, move: MoveTo) -> tuple[bool, bool, int, int, AntKey]:
    """Rank an ant competing for a destination cell; larger goes first.

    Orthogonal moves beat diagonal ones, then food carriers, then the
    weaker ant, then the heavier move, then the higher key.
    """
    return (
        move.direction.is_orthogonal,
        ant.is_carrying,
        -ant.health,
        move.weight,
        ant.key,
    )


def rank(
    keys: Iterable[AntKey],
    priority: Callable[[AntKey], tuple],
) -> list[AntKey]:
    """Sort ``keys`` by descending priority.

    Raises:
        InvariantViolation: If two different ants rank exactly equal.
    """
    scored = sorted(((priority(key), key) for key in keys), reverse=True)
    for (high, high_key), (low, low_key) in zip(scored, scored[1:]):
        if high == low:
            msg = f"impossible tie between ants {high_key} and {low_key}: {high}"
            raise InvariantViolation(msg)
    return [key for _, key in scored]


# -- Hand-offs and pick-ups --------------------------------------------------


def _check_hand_off(
    key: AntKey,
    action: PassFood | GetFood,
    proposals: dict[AntKey, Action],
) -> None:
    """Verify that the partner proposed the exact dual of ``action``."""
    if isinstance(action, PassFood):
        partner, expected = action.to, GetFood(giver=key)
    else:
        partner, expected = action.giver, PassFood(to=key)
    if proposals.get(partner) != expected:
        msg = (
            f"ant {key} proposed {action!r} but partner {partner} "
            f"proposed {proposals.get(partner)!r}"
        )
        raise InvariantViolation(msg)


def _resolve_picks(
    world: World,
    coord: Coord,
    contenders: list[AntKey],
    proposals: dict[AntKey, Action],
    resolution: Resolution,
) -> None:
    """Hand the cell's loose food units out in priority order."""
    cell = world.peek(*coord)
    slots = cell.loose_food_slots() if cell is not None else []
    ranked = rank(contenders, lambda key: pick_priority(world.ants[key]))
    for key, slot in zip(ranked, slots):
        resolution.accepted[key] = replace(proposals[key], slot=slot)
    for key in ranked[len(slots) :]:
        resolution.discarded[key] = proposals[key]


# -- Moves -------------------------------------------------------------------


class _MotionResolver:
    """Settle all moves of a tick.

    ``pending`` maps each unsettled destination to its remaining
    contenders in priority order.  An ant whose move is still pending
    keeps its place in its current cell until the move is settled.
    """

    def __init__(
        self,
        world: World,
        proposals: dict[AntKey, Action],
        moves: dict[Coord, list[AntKey]],
        resolution: Resolution,
    ) -> None:
        self.world = world
        self.proposals = proposals
        self.resolution = resolution
        self.incoming: Counter[Coord] = Counter()
        self.pending: dict[Coord, list[AntKey]] = {
            target: rank(keys, self._priority) for target, keys in moves.items()
        }
        self.waiting: set[AntKey] = {
            key for keys in self.pending.values() for key in keys
        }

    def run(self) -> None:
        """Alternate fixed-point passes and cycle breaking until done."""
        while self.pending:
            self._settle_until_stable()
            if self.pending:
                self._break_cycle()

    def _priority(self, key: AntKey) -> tuple[bool, bool, int, int, AntKey]:
        return motion_priority(self.world.ants[key], self._move(key))

    def _move(self, key: AntKey) -> MoveTo:
        move = self.proposals[key]
        if not isinstance(move, MoveTo):
            msg = f"ant {key} is waiting on a move but proposed {move!r}"
            raise InvariantViolation(msg)
        return move

    def _is_leaving(self, key: AntKey) -> bool:
        return isinstance(self.resolution.accepted.get(key), MoveTo)

    def _capacity(self, target: Coord) -> tuple[int, int, int]:
        """Return ``(available, blocked, pending_out)`` for a destination.

        ``blocked`` counts places that are taken for good this tick:
        occupants that stay, accepted arrivals, and the place a nest
        keeps for the ant it is about to hatch.  ``available`` counts
        places free right now; occupants with undecided moves still
        hold theirs.
        """
        cell = self.world.peek(*target)
        staying = pending_out = 0
        spawn = False
        if cell is not None:
            for key in cell.occupants:
                if key in self.waiting:
                    pending_out += 1
                elif not self._is_leaving(key):
                    staying += 1
            spawn = self.world.will_spawn(cell)
        blocked = staying + self.incoming[target]
        if spawn and blocked < CELL_CAPACITY:
            blocked += 1
        return CELL_CAPACITY - blocked - pending_out, blocked, pending_out

    def _accept(self, key: AntKey) -> None:
        move = self._move(key)
        self.resolution.accepted[key] = move
        self.incoming[move.target] += 1
        self.waiting.discard(key)

    def _discard(self, key: AntKey) -> None:
        self.resolution.discarded[key] = self.proposals[key]
        self.waiting.discard(key)

    def _settle(self, target: Coord) -> bool:
        """Run one pass over a destination; return True if anything changed."""
        contenders = self.pending[target]
        available, blocked, _ = self._capacity(target)

        if blocked >= CELL_CAPACITY:
            for key in contenders:
                self._discard(key)
            del self.pending[target]
            return True

        if len(contenders) <= available:
            for key in contenders:
                self._accept(key)
            del self.pending[target]
            return True

        room = CELL_CAPACITY - blocked
        changed = False
        for key in contenders[room:]:
            self._discard(key)
            changed = True
        kept = contenders[:room]
        while available > 0 and kept:
            self._accept(kept.pop(0))
            available -= 1
            changed = True

        if kept:
            self.pending[target] = kept
        else:
            del self.pending[target]
        return changed

    def _settle_until_stable(self) -> None:
        changed = True
        while changed:
            changed = False
            for target in list(self.pending):
                if target in self.pending and self._settle(target):
                    changed = True

    def _blocking_mover(self, target: Coord) -> AntKey:
        """Return the highest-priority occupant of ``target`` still waiting."""
        cell = self.world.peek(*target)
        occupants = [] if cell is None else cell.occupants
        movers = [key for key in occupants if key in self.waiting]
        if not movers:
            msg = f"pending cell {target} has no occupant waiting to leave"
            raise InvariantViolation(msg)
        return rank(movers, self._priority)[0]

    def _break_cycle(self) -> None:
        """Find one wait-cycle and move every ant on it.

        Every still-pending destination is full of ants that are
        themselves waiting to move, and each of those wants a pending
        destination too.  Following "cell -> destination of the ant
        blocking it" therefore stays among pending cells and must come
        back to a cell already seen.  Moving each blocking ant on that
        loop one step leaves every cell on it exactly as full as before.

        Raises:
            InvariantViolation: If the walk leaves the pending set.
        """
        path: list[AntKey] = []
        seen: dict[Coord, int] = {}
        target = next(iter(self.pending))
        while target not in seen:
            if target not in self.pending:
                msg = f"wait chain reached settled cell {target} via {path}"
                raise InvariantViolation(msg)
            seen[target] = len(path)
            mover = self._blocking_mover(target)
            path.append(mover)
            target = self._move(mover).target

        cycle = path[seen[target] :]
        for key in cycle:
            destination = self._move(key).target
            self.pending[destination].remove(key)
            if not self.pending[destination]:
                del self.pending[destination]
            self._accept(key)
        self.resolution.cycles += 1
        logger.debug("broke wait-cycle of %d ants: %s", len(cycle), cycle)
