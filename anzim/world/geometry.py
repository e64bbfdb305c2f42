"""Geometry — coordinates and the eight movement octants."""

from __future__ import annotations

from enum import IntEnum

Coord = tuple[int, int]
"""A ``(row, col)`` pair, always already wrapped into ``[0, side)``."""


class Direction(IntEnum):
    """The eight compass octants, numbered clockwise from north."""

    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7

    @property
    def offset(self) -> Coord:
        """Return the ``(drow, dcol)`` step for this direction."""
        return _OFFSETS[self]

    @property
    def is_orthogonal(self) -> bool:
        """Return True for N, E, S and W."""
        return self % 2 == 0

    @property
    def opposite(self) -> Direction:
        """Return the direction rotated by 180 degrees."""
        return Direction((self + 4) % 8)

    def distance(self, other: Direction) -> int:
        """Return the angular distance to ``other`` in octants (0-4)."""
        diff = abs(self - other) % 8
        return min(diff, 8 - diff)


_OFFSETS: dict[Direction, Coord] = {
    Direction.N: (-1, 0),
    Direction.NE: (-1, 1),
    Direction.E: (0, 1),
    Direction.SE: (1, 1),
    Direction.S: (1, 0),
    Direction.SW: (1, -1),
    Direction.W: (0, -1),
    Direction.NW: (-1, -1),
}
