#!/usr/bin/env python3
"""Headless natural selection runner.

Runs a seeded simulation for a number of generations without the API and
prints the generation history.

Usage:
    python -m tools.run_headless --generations 20 --seed 42
    python -m tools.run_headless --habitat arctic --wolves --mutate fur=0.5
    python -m tools.run_headless --limited-food --tough-food --mutate teeth=0.25@3
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Any

from natural_selection import Habitat, NaturalSelectionError, SimulationConfig, SimulationController

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
)
logger = logging.getLogger(__name__)


def parse_mutation(text: str) -> tuple[str, float, int]:
    """Parse ``gene=fraction[@generation]`` into its parts.

    The generation defaults to 0 (scheduled before the first boundary).
    """
    try:
        gene, rest = text.split("=", 1)
        if "@" in rest:
            fraction_text, generation_text = rest.split("@", 1)
            generation = int(generation_text)
        else:
            fraction_text, generation = rest, 0
        return gene.strip(), float(fraction_text), generation
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid mutation {text!r}; expected gene=fraction[@generation]"
        ) from exc


def run_headless_simulation(
    *,
    seed: int | None = None,
    generations: int = 10,
    habitat: Habitat = Habitat.EQUATOR,
    wolves: bool = False,
    limited_food: bool = False,
    tough_food: bool = False,
    mutations: list[tuple[str, float, int]] | None = None,
    stats_interval: int = 0,
    quiet: bool = False,
) -> dict[str, Any]:
    """Run a simulation headless.

    Args:
        seed: Optional random seed for deterministic runs
        generations: Number of generation boundaries to run
        habitat: Starting habitat
        wolves: Enable predation
        limited_food: Enable limited food
        tough_food: Enable tough food
        mutations: (gene, fraction, generation) tuples; each is scheduled once
            the run reaches that generation
        stats_interval: Log live counts every N generations (0 = never)
        quiet: Suppress progress output

    Returns:
        Final stats dictionary with the generation history under "history"
    """
    controller = SimulationController(SimulationConfig(habitat=habitat), seed=seed)
    controller.set_environmental_factors(
        wolves=wolves, limited_food=limited_food, tough_food=tough_food
    )
    pending = sorted(mutations or [], key=lambda mutation: mutation[2])

    start_time = time.time()
    controller.start()

    for _ in range(generations):
        while pending and pending[0][2] <= controller.current_generation:
            gene, fraction, _at = pending.pop(0)
            controller.schedule_mutation(gene, fraction)
        if not controller.advance_generations(1):
            break

        generation = controller.current_generation
        if stats_interval and generation % stats_interval == 0 and not quiet:
            logger.info("Generation %d: %s", generation, controller.live_counts().to_dict())

    runtime = time.time() - start_time

    stats = controller.get_stats()
    stats["history"] = [record.to_dict() for record in controller.history()]
    stats["runtime_seconds"] = runtime

    if not quiet:
        logger.info(
            "Completed %d generations in %.2fs (state=%s, live=%d)",
            controller.current_generation,
            runtime,
            stats["state"],
            stats["live_count"],
        )
    return stats


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the headless runner."""
    parser = argparse.ArgumentParser(
        description="Run a natural selection simulation in headless mode",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tools.run_headless --generations 20 --seed 42
  python -m tools.run_headless --habitat arctic --wolves --mutate fur=0.5
  python -m tools.run_headless --limited-food --mutate teeth=0.25@3
        """,
    )
    parser.add_argument(
        "--generations",
        "-g",
        type=int,
        default=10,
        help="Number of generations to run (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for deterministic behavior",
    )
    parser.add_argument(
        "--habitat",
        choices=[habitat.value for habitat in Habitat],
        default=Habitat.EQUATOR.value,
        help="Habitat (default: equator)",
    )
    parser.add_argument("--wolves", action="store_true", help="Enable wolves")
    parser.add_argument("--limited-food", action="store_true", help="Enable limited food")
    parser.add_argument("--tough-food", action="store_true", help="Enable tough food")
    parser.add_argument(
        "--mutate",
        type=parse_mutation,
        action="append",
        default=[],
        metavar="GENE=FRACTION[@GEN]",
        help="Schedule a mutation (repeatable)",
    )
    parser.add_argument(
        "--stats-interval",
        type=int,
        default=1,
        help="Log live counts every N generations (default: 1, 0 = off)",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args(argv)

    if not args.quiet:
        logger.info("Running %d generations (seed=%s)", args.generations, args.seed)

    try:
        stats = run_headless_simulation(
            seed=args.seed,
            generations=args.generations,
            habitat=Habitat(args.habitat),
            wolves=args.wolves,
            limited_food=args.limited_food,
            tough_food=args.tough_food,
            mutations=args.mutate,
            stats_interval=args.stats_interval,
            quiet=args.quiet,
        )
    except NaturalSelectionError as exc:
        logger.error("Simulation rejected the run: %s", exc)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    for record in stats["history"]:
        start, end = record["start_counts"], record["end_counts"]
        print(
            f"gen {record['generation']:>4}  start={start['total_count']:>5}  "
            f"end={end['total_count']:>5}  brown={end['brown_fur_count']:>5}  "
            f"floppy={end['floppy_ears_count']:>5}  long_teeth={end['long_teeth_count']:>5}"
        )
    if stats["completion_reason"]:
        print(f"completed: {stats['completion_reason']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
