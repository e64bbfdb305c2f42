"""Actions -- what an ant can propose to do in one tick.

Actions are small frozen records that refer to other ants and cells by
key and coordinates only.  A proposal map is ``dict[AntKey, Action]``;
the conflict resolver pairs and ranks entries by looking keys up in that
map rather than following object references.
"""

from __future__ import annotations

from dataclasses import dataclass

from anzim.colony.ant import AntKey
from anzim.world.geometry import Coord, Direction


@dataclass(frozen=True)
class EatFood:
    """Consume the carried food to restore health."""


@dataclass(frozen=True)
class DropFood:
    """Deposit the carried food into the own nest's reserve.

    Attributes:
        amount: Food value being dropped.
    """

    amount: int


@dataclass(frozen=True)
class PassFood:
    """Hand the carried food to a cell mate.

    Attributes:
        to: Key of the receiving ant.
    """

    to: AntKey


@dataclass(frozen=True)
class GetFood:
    """Receive food from a cell mate.

    Attributes:
        giver: Key of the ant handing the food over.
    """

    giver: AntKey


@dataclass(frozen=True)
class PickFood:
    """Pick one loose food unit up from a cell.

    Attributes:
        cell: Cell to pick from (the ant's own cell).
        slot: ``food_packages`` index granted by the resolver; None on
            the proposal itself.
    """

    cell: Coord
    slot: int | None = None


@dataclass(frozen=True)
class MoveTo:
    """Step to a neighbouring cell.

    Attributes:
        weight: Score the direction was drawn with.
        direction: Direction of travel.
        target: Destination cell.
    """

    weight: int
    direction: Direction
    target: Coord


Action = EatFood | DropFood | PassFood | GetFood | PickFood | MoveTo
