"""Decay logic for the pheromone field.

Operates on the raw NumPy array inside ``PheromoneField``.  Separated
from ``fields.py`` so the decay rule can change independently of
storage.
"""

from __future__ import annotations

from anzim.pheromones.fields import PheromoneField


def decay(field: PheromoneField) -> None:
    """Halve every pheromone level, rounding down.

    Applied once per tick to the whole grid.  Levels never go below
    zero and never increase.

    Args:
        field: The pheromone field to decay in-place.
    """
    field.grid //= 2
