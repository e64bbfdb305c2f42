"""Tests for anzim.simulation — config loading, the engine and snapshots."""

import dataclasses
import logging
from pathlib import Path

import numpy as np
import pytest

from anzim.__main__ import main
from anzim.colony.actions import MoveTo
from anzim.colony.ant import Ant
from anzim.simulation.config import SimulationConfig
from anzim.simulation.engine import SimulationEngine
from anzim.simulation.errors import ConfigError


class TestSimulationConfig:
    """Tests for YAML config loading and validation."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.world_side == 1024
        assert cfg.ant_health == 256
        assert cfg.package_tiers == 4
        assert cfg.food_slots == 5
        assert cfg.initial_nest_reserve == 256 * 1024

    def test_package_values(self) -> None:
        cfg = SimulationConfig()
        values = [cfg.package_value(slot) for slot in range(cfg.food_slots)]
        assert values == [256, 1024, 2048, 4096, 8192]
        with pytest.raises(IndexError):
            cfg.package_value(cfg.food_slots)

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(
            "seed: 99\nworld_side: 16\nsmall_food: 8\nbig_food: 16\nnests: 2\n",
        )
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.world_side == 16
        assert cfg.package_tiers == 2
        assert cfg.nests == 2
        assert cfg.ant_health == SimulationConfig.ant_health

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()

    def test_shipped_config_loads(self) -> None:
        path = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
        assert SimulationConfig.from_yaml(path) == SimulationConfig()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"world_side": 2},
            {"ant_health": 0},
            {"pheromone_unit": -1},
            {"small_food": 1024, "big_food": 3072},
            {"small_food": 1024, "big_food": 512},
            {"world_side": 4, "nests": 17},
            {"nests": -1},
            {"nest_reserve": -5},
        ],
    )
    def test_rejects_bad_values(self, overrides: dict[str, int]) -> None:
        with pytest.raises(ConfigError):
            SimulationConfig(**overrides)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="world_side"):
            SimulationConfig(world_side=1)


class TestSimulationEngine:
    """Tests for the tick loop."""

    def test_engine_places_nests(self) -> None:
        cfg = SimulationConfig(world_side=8, nests=5, nest_reserve=0)
        engine = SimulationEngine(config=cfg)
        assert engine.tick == 0
        assert len(engine.world.nests) == 5
        cells = {nest.cell for nest in engine.world.nests}
        assert len(cells) == 5
        for nest in engine.world.nests:
            assert engine.world.cell(*nest.cell).nest == nest.index
            assert nest.food_reserve == 0

    def test_advance_tick_reports(self, small_config: SimulationConfig) -> None:
        cfg = dataclasses.replace(small_config, nests=1, nest_reserve=32)
        engine = SimulationEngine(config=cfg)
        engine.advance_tick()
        assert engine.tick == 1
        assert engine.last_report is not None
        assert engine.last_report.tick == 1
        assert engine.last_report.births == 1
        assert len(engine.world.ants) == 1

    def test_run_multiple_ticks(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        engine.run(ticks=10)
        assert engine.tick == 10

    def test_busy_world_keeps_invariants(self) -> None:
        """A crowded run with food and several nests must never trip a check."""
        cfg = SimulationConfig(
            seed=3,
            world_side=6,
            ant_health=24,
            pheromone_unit=32,
            small_food=8,
            big_food=32,
            nests=3,
            nest_reserve=24 * 12,
            check_invariants=True,
        )
        engine = SimulationEngine(config=cfg)
        engine.run(ticks=300)
        assert engine.tick == 300
        for cell in engine.world.cells.values():
            assert len(cell.occupants) <= 2
        assert (engine.world.pheromones.grid >= 0).all()

    def test_determinism(self) -> None:
        """Same seed must produce identical state after N ticks."""
        cfg = SimulationConfig(
            seed=777,
            world_side=8,
            ant_health=32,
            pheromone_unit=16,
            small_food=16,
            big_food=64,
            nests=2,
            nest_reserve=32 * 6,
        )
        engine_a = SimulationEngine(config=cfg)
        engine_b = SimulationEngine(config=cfg)
        engine_a.run(ticks=60)
        engine_b.run(ticks=60)

        assert engine_a.snapshot() == engine_b.snapshot()
        assert np.array_equal(
            engine_a.world.pheromones.grid,
            engine_b.world.pheromones.grid,
        )
        assert engine_a.food_mass() == engine_b.food_mass()

    def test_lone_ant_wanders_until_it_starves(
        self,
        small_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=small_config)
        ant = Ant(nest=0, ant_id=0, cell=(4, 4), previous_cell=(4, 4), health=16)
        engine.world.add_nest(0, 0, reserve=0)
        engine.world.place_ant(ant)

        lifetime = 0
        for _ in range(1000):
            if ant.key in engine.world.ants:
                proposals = engine.propose()
                assert isinstance(proposals[ant.key], MoveTo)
            engine.advance_tick()
            if ant.key in engine.world.ants:
                lifetime += 1
                assert 0 <= ant.health <= small_config.ant_health
        assert lifetime == small_config.ant_health
        assert engine.world.ants == {}
        assert engine.world.cell(*ant.cell).food_packages[0] == 1


class TestSnapshot:
    """Tests for read-only world views."""

    def test_snapshot_reflects_world(self, small_config: SimulationConfig) -> None:
        cfg = dataclasses.replace(small_config, nests=1, nest_reserve=48)
        engine = SimulationEngine(config=cfg)
        engine.advance_tick()
        snapshot = engine.snapshot()
        nest = engine.world.nests[0]

        assert snapshot.tick == 1
        assert snapshot.side == 8
        assert len(snapshot.ants) == 1
        view = snapshot.cell(*nest.cell)
        assert view.nest_reserve == 32
        assert view.occupants == (snapshot.ants[0].key,)
        assert snapshot.ants[0].health == cfg.ant_health

    def test_untouched_cell_reads_empty(
        self,
        small_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=small_config)
        view = engine.snapshot().cell(9, -1)
        assert (view.row, view.col) == (1, 7)
        assert view.occupants == ()
        assert view.food_packages == (0,) * small_config.food_slots
        assert view.nest_reserve is None

    def test_snapshot_is_detached(self, small_config: SimulationConfig) -> None:
        cfg = dataclasses.replace(small_config, nests=1, nest_reserve=16)
        engine = SimulationEngine(config=cfg)
        engine.advance_tick()
        snapshot = engine.snapshot()
        before = snapshot.ants[0]
        engine.run(ticks=3)
        assert snapshot.ants[0] == before
        assert snapshot.tick == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.ants[0].health = 0  # type: ignore[misc]


class TestCommandLine:
    """Tests for the headless entry point."""

    def test_runs_and_reports(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        yaml_file = tmp_path / "tiny.yaml"
        yaml_file.write_text(
            "world_side: 8\nant_health: 16\nsmall_food: 16\nbig_food: 64\n",
        )
        with caplog.at_level(logging.INFO, logger="anzim"):
            main(["-c", str(yaml_file), "--ticks", "6", "--report-every", "3"])
        messages = [record.getMessage() for record in caplog.records]
        assert any(message.startswith("tick 3:") for message in messages)
        assert any(message.startswith("tick 6:") for message in messages)
