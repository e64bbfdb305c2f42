"""Entry point for ``python -m anzim``.

Loads the YAML config, builds a simulation engine and runs it headless
for a fixed number of ticks, logging a population summary now and then.
Rendering and export are left to separate tools reading snapshots.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from anzim.simulation.config import SimulationConfig
from anzim.simulation.engine import SimulationEngine

logger = logging.getLogger("anzim")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, run ticks."""
    parser = argparse.ArgumentParser(
        prog="anzim",
        description="ANZIM - ant foraging simulator on a toroidal grid",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=1000,
        help="Number of ticks to simulate (default: 1000)",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=100,
        help="Log a summary every N ticks (default: 100)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)

    for _ in range(args.ticks):
        engine.advance_tick()
        if args.report_every > 0 and engine.tick % args.report_every == 0:
            snapshot = engine.snapshot()
            logger.info(
                "tick %d: %d ants, %d cells, food mass %d",
                snapshot.tick,
                len(snapshot.ants),
                len(snapshot.cells),
                engine.food_mass(),
            )


if __name__ == "__main__":
    main()
