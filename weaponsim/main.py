"""
Main entry point for the weapon simulator.

Loads weapon descriptors from a JSON file, simulates attacks with every
weapon, and prints average, critical and best-case damage per damage type
together with the observed critical-hit rate.
"""

import argparse
import logging
import sys
from pathlib import Path

from weaponsim.combat.stats import Stats
from weaponsim.core.content import DEFAULT_CONFIG_PATH, build_weapons, load_config
from weaponsim.core.dice_parser import DiceEngine
from weaponsim.core.error_handling import WeaponSimError
from weaponsim.core.logging import get_logger, setup_logging
from weaponsim.core.random_source import RandomSource, SeededByteProvider
from weaponsim.ui.report import render_report

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Builds the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="weaponsim",
        description="Simulate weapon attacks and report damage statistics.",
    )
    parser.add_argument(
        "config",
        nargs="?",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="JSON file with weapon descriptors (default: bundled sample)",
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=None,
        help="attacks simulated per weapon, overrides the file setting",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="seed for a reproducible run, overrides the file setting",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Runs the simulator from the command line.

    Args:
        argv (list[str] | None): Command-line arguments, sys.argv when None.

    Returns:
        int: The exit status.

    """
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(args.config, verbose=args.verbose)
        seed = args.seed if args.seed is not None else config.seed
        iterations = args.iterations if args.iterations is not None else config.iterations

        provider = SeededByteProvider(seed) if seed is not None else None
        engine = DiceEngine(RandomSource(provider))
        if seed is not None:
            logger.info("Using seeded random source (seed=%d)", seed)

        stats = Stats(build_weapons(config, engine))
        stats.run(iterations)
        render_report(stats)
    except (WeaponSimError, ValueError, TypeError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
