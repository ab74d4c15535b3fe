from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..sim.core.errors import WorldError
from ..sim.core.world import World
from ..sim.io.compare import compare_worlds
from ..sim.io.render import render_grid
from ..sim.io.world_file import format_world, load_world

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecosystem",
        description="Run a rabbits-and-foxes ecosystem for the generations given in INFILE.",
    )
    parser.add_argument("infile", type=Path, help="World description (text, or YAML with a .yaml/.yml suffix)")
    parser.add_argument(
        "--test",
        type=Path,
        default=None,
        metavar="TEST_FILE",
        help="Compare the final world with TEST_FILE instead of printing it; exit 1 if they differ.",
    )
    parser.add_argument("--verbose", action="store_true", help="Print the world after every generation.")
    parser.add_argument(
        "--no-output",
        action="store_true",
        help="Do not print the final world (don't combine with --verbose).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr.",
    )
    return parser


def _load(path: Path, what: str) -> Optional[World]:
    try:
        return load_world(path)
    except (OSError, WorldError) as exc:
        logger.error("failed while reading %s file '%s': %s", what, path, exc)
        return None


def _print_generation(world: World) -> None:
    print(f"\nGeneration {world.generation}")
    print(render_grid(world.grid))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s:%(name)s:%(message)s")

    world = _load(args.infile, "input")
    if world is None:
        return 1

    if args.verbose:
        print("Generation 0")
        print(render_grid(world.grid))

    world.run(_print_generation if args.verbose else None)

    if args.test is None and not args.no_output:
        sys.stdout.write(format_world(world))

    if args.test is None:
        return 0

    expected = _load(args.test, "test")
    if expected is None:
        return 1

    size = f"{world.config.n_rows}x{world.config.n_cols}"
    mismatches = compare_worlds(world, expected)
    if mismatches:
        for line in mismatches:
            logger.info("mismatch: %s", line)
        print(f"Failed test for world size {size}")
        return 1
    print(f"Passed test for world size {size}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
