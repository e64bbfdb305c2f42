"""Config — load simulation parameters from YAML files.

All tunable constants (world size, ant health, pheromone deposit, food
package sizes) live in YAML and are parsed into a typed dataclass here.
Derived quantities such as the number of food package tiers are exposed
as properties so the rest of the core never recomputes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from anzim.simulation.errors import ConfigError


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_side: Side length of the square toroidal grid.
        ant_health: Health of a newborn ant.  Also the most health an
            ant can have, the food a nest spends to hatch one, and the
            food value of one set of remains.
        pheromone_unit: Pheromone an ant leaves on the cell it departs.
        small_food: Food value of the smallest package tier.
        big_food: Food value of the largest package tier.  Must be
            ``small_food`` times a power of two.
        nests: Number of nests placed at random when the engine starts.
        nest_reserve: Starting food reserve of each nest.  ``None``
            means enough food to hatch a line of ants as long as the
            world side.
        generate_food: Whether the food sampler runs each tick.
        check_invariants: Whether the full invariant sweep runs after
            every tick.
    """

    seed: int = 42
    world_side: int = 1024
    ant_health: int = 256
    pheromone_unit: int = 256
    small_food: int = 1024
    big_food: int = 8192
    nests: int = 1
    nest_reserve: int | None = None
    generate_food: bool = True
    check_invariants: bool = True

    def __post_init__(self) -> None:
        """Reject configurations the simulation cannot run with."""
        if self.world_side < 3:
            msg = f"world_side must be at least 3, got {self.world_side}"
            raise ConfigError(msg)
        for name in ("ant_health", "pheromone_unit", "small_food", "big_food"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ConfigError(msg)
        ratio, rest = divmod(self.big_food, self.small_food)
        if rest or ratio & (ratio - 1):
            msg = (
                f"big_food ({self.big_food}) must be a power-of-two multiple "
                f"of small_food ({self.small_food})"
            )
            raise ConfigError(msg)
        if not 0 <= self.nests <= self.world_side**2:
            msg = f"nests must be between 0 and world_side**2, got {self.nests}"
            raise ConfigError(msg)
        if self.nest_reserve is not None and self.nest_reserve < 0:
            msg = f"nest_reserve must not be negative, got {self.nest_reserve}"
            raise ConfigError(msg)

    @property
    def package_tiers(self) -> int:
        """Number of distinct food package sizes."""
        return (self.big_food // self.small_food).bit_length()

    @property
    def food_slots(self) -> int:
        """Length of a cell's ``food_packages`` array (remains + tiers)."""
        return self.package_tiers + 1

    @property
    def spawn_cost(self) -> int:
        """Food a nest spends to hatch one ant."""
        return self.ant_health

    @property
    def initial_nest_reserve(self) -> int:
        """Food reserve a new nest starts with."""
        if self.nest_reserve is None:
            return self.ant_health * self.world_side
        return self.nest_reserve

    def package_value(self, slot: int) -> int:
        """Return the food value of one unit in ``food_packages[slot]``.

        Slot 0 holds the remains of dead ants; slot ``i`` holds packages
        of ``small_food * 2**(i - 1)``.

        Raises:
            IndexError: If ``slot`` is outside the package array.
        """
        if not 0 <= slot < self.food_slots:
            msg = f"food slot {slot} out of range 0..{self.food_slots - 1}"
            raise IndexError(msg)
        if slot == 0:
            return self.ant_health
        return self.small_food << (slot - 1)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigError: If the loaded values are inconsistent.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            world_side=data.get("world_side", cls.world_side),
            ant_health=data.get("ant_health", cls.ant_health),
            pheromone_unit=data.get("pheromone_unit", cls.pheromone_unit),
            small_food=data.get("small_food", cls.small_food),
            big_food=data.get("big_food", cls.big_food),
            nests=data.get("nests", cls.nests),
            nest_reserve=data.get("nest_reserve", cls.nest_reserve),
            generate_food=data.get("generate_food", cls.generate_food),
            check_invariants=data.get(
                "check_invariants",
                cls.check_invariants,
            ),
        )
