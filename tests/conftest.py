"""Shared fixtures for the ANZIM test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from anzim.colony.ant import Ant
from anzim.simulation.config import SimulationConfig
from anzim.world.geometry import Coord
from anzim.world.world import World


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_config() -> SimulationConfig:
    """An 8x8 world with no random nests or food, for hand-built scenarios."""
    return SimulationConfig(
        world_side=8,
        ant_health=16,
        pheromone_unit=16,
        small_food=16,
        big_food=64,
        nests=0,
        generate_food=False,
    )


@pytest.fixture
def small_world(small_config: SimulationConfig) -> World:
    """An empty 8x8 world."""
    return World(config=small_config)


def _put_ant(
    world: World,
    ant_id: int,
    cell: Coord,
    *,
    nest: int = 0,
    health: int | None = None,
    previous_cell: Coord | None = None,
) -> Ant:
    """Place a hand-made ant into ``world`` and return it."""
    ant = Ant(
        nest=nest,
        ant_id=ant_id,
        cell=cell,
        previous_cell=previous_cell if previous_cell is not None else cell,
        health=world.config.ant_health if health is None else health,
    )
    world.place_ant(ant)
    return ant


@pytest.fixture
def put_ant() -> Callable[..., Ant]:
    """Helper that places a hand-made ant: ``put_ant(world, id, (r, c))``."""
    return _put_ant
