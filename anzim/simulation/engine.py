"""SimulationEngine — the tick loop.

Owns the world and the master RNG and advances them in the canonical
tick order:

1. Generate food (stochastic, usually nothing)
2. Collect one proposal per living ant against the unchanged world
3. Resolve conflicts between proposals (pure)
4. Apply accepted actions
5. Age ants, bury the dead
6. Decay pheromones
7. Hatch new ants at nests
8. Sweep invariants (optional)

Steps 4-8 are the only place the world changes.  Renderers and
exporters read ``snapshot()`` between ticks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from anzim.colony.actions import Action
from anzim.colony.ant import AntKey
from anzim.colony.decision import propose_action
from anzim.pheromones.decay import decay
from anzim.simulation.config import SimulationConfig
from anzim.simulation.driver import (
    age_ants,
    apply_resolution,
    check_invariants,
    spawn_ants,
)
from anzim.simulation.resolver import Resolution, resolve_conflicts
from anzim.simulation.snapshot import WorldSnapshot, take_snapshot
from anzim.world.food import generate_food
from anzim.world.world import World

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Counters describing what happened in one tick.

    Attributes:
        tick: Index of the tick (1 for the first one).
        food_placed: Whether the sampler placed a package.
        accepted: Number of accepted proposals.
        discarded: Number of discarded proposals.
        cycles: Wait-cycles broken while settling moves.
        deaths: Ants that died.
        births: Ants hatched.
    """

    tick: int
    food_placed: bool = False
    accepted: int = 0
    discarded: int = 0
    cycles: int = 0
    deaths: int = 0
    births: int = 0


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        world: All mutable simulation state.
        rng: Master seeded random generator.
        tick: Number of completed ticks.
        last_report: Counters from the most recent tick.
    """

    config: SimulationConfig
    world: World = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0
    last_report: TickReport | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Build the world and RNG, then place the configured nests."""
        self.rng = np.random.default_rng(self.config.seed)
        self.world = World(config=self.config)
        while len(self.world.nests) < self.config.nests:
            row, col = (int(v) for v in self.rng.integers(self.world.side, size=2))
            if self.world.has_cell(row, col):
                continue
            self.world.add_nest(row, col)
        logger.info(
            "world %dx%d ready with %d nest(s), seed %d",
            self.world.side,
            self.world.side,
            len(self.world.nests),
            self.config.seed,
        )

    def propose(self) -> dict[AntKey, Action]:
        """Collect every living ant's proposal for the coming tick."""
        return {
            key: propose_action(ant, self.world, self.rng)
            for key, ant in self.world.ants.items()
        }

    def resolve(self, proposals: dict[AntKey, Action]) -> Resolution:
        """Resolve ``proposals`` against the current world."""
        return resolve_conflicts(self.world, proposals)

    def advance_tick(self) -> None:
        """Advance the simulation by one tick.

        Raises:
            InvariantViolation: If the tick exposes a logic defect.  The
                world must not be advanced further afterwards.
        """
        report = TickReport(tick=self.tick + 1)

        if self.config.generate_food:
            report.food_placed = generate_food(self.world, self.rng) is not None

        proposals = self.propose()
        resolution = self.resolve(proposals)
        report.accepted = len(resolution.accepted)
        report.discarded = len(resolution.discarded)
        report.cycles = resolution.cycles

        apply_resolution(self.world, resolution)
        report.deaths = len(age_ants(self.world))
        decay(self.world.pheromones)
        report.births = len(spawn_ants(self.world))

        if self.config.check_invariants:
            check_invariants(self.world)

        self.tick += 1
        self.last_report = report
        logger.debug(
            "tick %d: ants=%d accepted=%d discarded=%d cycles=%d "
            "deaths=%d births=%d food=%s",
            report.tick,
            len(self.world.ants),
            report.accepted,
            report.discarded,
            report.cycles,
            report.deaths,
            report.births,
            report.food_placed,
        )

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.advance_tick()

    def snapshot(self) -> WorldSnapshot:
        """Return a read-only view of the current world."""
        return take_snapshot(self.world, self.tick)

    def food_mass(self) -> int:
        """Return all food currently in the world."""
        return self.world.food_mass()
