"""Tests for anzim.world.food — activity weights and food placement."""

from collections.abc import Callable

import numpy as np
from numpy.random import Generator

from anzim.colony.ant import Ant
from anzim.world.food import FoodActivity, generate_food
from anzim.world.world import World


class _CentredRng:
    """Wraps a Generator so the disturbance roll always lands dead centre."""

    def __init__(self, rng: Generator) -> None:
        self._rng = rng

    def integers(
        self,
        low: int,
        high: int | None = None,
        size: int | None = None,
    ) -> object:
        if size == 2 and low == -1 and high == 2:
            return np.zeros(2, dtype=np.int64)
        return self._rng.integers(low, high, size=size)


class TestFoodActivity:
    """Tests for the row/column weights."""

    def test_seeded_uniformly(self) -> None:
        activity = FoodActivity(side=5)
        assert activity.rows.tolist() == [1] * 5
        assert activity.cols.tolist() == [1] * 5

    def test_record_uses_cross_pattern(self) -> None:
        activity = FoodActivity(side=5)
        activity.record((0, 2))
        assert activity.rows.tolist() == [2, 2, 1, 1, 2]
        assert activity.cols.tolist() == [1, 2, 2, 2, 1]
        assert activity.rows.sum() == 5 + 3
        assert activity.cols.sum() == 5 + 3

    def test_sample_follows_weights(self, rng: Generator) -> None:
        activity = FoodActivity(side=4)
        activity.rows[:] = [0, 0, 5, 0]
        activity.cols[:] = [0, 7, 0, 0]
        for _ in range(20):
            assert activity.sample(rng) == (2, 1)

    def test_sample_stays_in_range(self, rng: Generator) -> None:
        activity = FoodActivity(side=6)
        for _ in range(200):
            row, col = activity.sample(rng)
            assert 0 <= row < 6
            assert 0 <= col < 6


class TestGenerateFood:
    """Tests for the per-tick food sampler."""

    def test_gate_usually_closed(self, small_world: World, rng: Generator) -> None:
        placed = sum(generate_food(small_world, rng) is not None for _ in range(270))
        # The centre roll succeeds with probability 1/9.
        assert 10 < placed < 60

    def test_places_one_package(self, small_world: World, rng: Generator) -> None:
        coord = generate_food(small_world, _CentredRng(rng))
        assert coord is not None
        cell = small_world.cell(*coord)
        assert cell.food_packages[0] == 0
        assert sum(cell.food_packages) == 1

    def test_records_activity(self, small_world: World, rng: Generator) -> None:
        coord = generate_food(small_world, _CentredRng(rng))
        assert coord is not None
        side = small_world.side
        assert small_world.food_activity.rows.sum() == side + 3
        assert small_world.food_activity.rows[coord[0]] == 2

    def test_skips_occupied_cell(
        self,
        small_world: World,
        rng: Generator,
        put_ant: Callable[..., Ant],
    ) -> None:
        small_world.food_activity.rows[:] = 0
        small_world.food_activity.cols[:] = 0
        small_world.food_activity.rows[3] = 1
        small_world.food_activity.cols[4] = 1
        put_ant(small_world, 0, (3, 4))
        assert generate_food(small_world, _CentredRng(rng)) is None
        assert not small_world.cell(3, 4).has_loose_food

    def test_skips_nest_cell(self, small_world: World, rng: Generator) -> None:
        small_world.food_activity.rows[:] = 0
        small_world.food_activity.cols[:] = 0
        small_world.food_activity.rows[3] = 1
        small_world.food_activity.cols[4] = 1
        small_world.add_nest(3, 4)
        assert generate_food(small_world, _CentredRng(rng)) is None

    def test_skips_full_cell(self, small_world: World, rng: Generator) -> None:
        small_world.food_activity.rows[:] = 0
        small_world.food_activity.cols[:] = 0
        small_world.food_activity.rows[3] = 1
        small_world.food_activity.cols[4] = 1
        cell = small_world.cell(3, 4)
        cell.food_packages = [0] + [2] * small_world.config.package_tiers
        assert generate_food(small_world, _CentredRng(rng)) is None

    def test_fills_only_free_tiers(self, small_world: World, rng: Generator) -> None:
        small_world.food_activity.rows[:] = 0
        small_world.food_activity.cols[:] = 0
        small_world.food_activity.rows[3] = 1
        small_world.food_activity.cols[4] = 1
        cell = small_world.cell(3, 4)
        cell.food_packages = [0, 2, 2, 1]
        assert generate_food(small_world, _CentredRng(rng)) == (3, 4)
        assert cell.food_packages == [0, 2, 2, 2]

    def test_slots_never_overflow(self, small_world: World, rng: Generator) -> None:
        centred = _CentredRng(rng)
        for _ in range(500):
            generate_food(small_world, centred)
        for cell in small_world.cells.values():
            assert all(0 <= count <= 2 for count in cell.food_packages)
