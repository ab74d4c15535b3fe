#!/usr/bin/env python3
"""Generate a world description file with objects scattered over distinct cells."""
from __future__ import annotations

import argparse
import random
from pathlib import Path


def build_world(
    rows: int,
    cols: int,
    rocks: int,
    rabbits: int,
    foxes: int,
    generations: int,
    gen_proc_rabbits: int,
    gen_proc_foxes: int,
    gen_food_foxes: int,
    seed: int,
) -> str:
    total = rocks + rabbits + foxes
    if total > rows * cols:
        raise ValueError(f"{total} objects do not fit in a {rows}x{cols} grid")

    rng = random.Random(seed)
    cells = rng.sample(range(rows * cols), total)
    kinds = ["ROCK"] * rocks + ["RABBIT"] * rabbits + ["FOX"] * foxes
    placed = sorted(zip(cells, kinds))

    lines = [
        f"{gen_proc_rabbits} {gen_proc_foxes} {gen_food_foxes} {generations} {rows} {cols}",
        str(total),
    ]
    lines.extend(f"{kind} {cell // cols} {cell % cols}" for cell, kind in placed)
    return "\n".join(lines) + "\n"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a random ecosystem world file.")
    parser.add_argument("--rows", type=int, default=10)
    parser.add_argument("--cols", type=int, default=10)
    parser.add_argument("--rocks", type=int, default=6)
    parser.add_argument("--rabbits", type=int, default=16)
    parser.add_argument("--foxes", type=int, default=6)
    parser.add_argument("--generations", type=int, default=20)
    parser.add_argument("--gen-proc-rabbits", type=int, default=2)
    parser.add_argument("--gen-proc-foxes", type=int, default=4)
    parser.add_argument("--gen-food-foxes", type=int, default=3)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--output", type=Path, required=True, help="File to write the world into.")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite an existing file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output: Path = args.output
    if output.exists() and not args.overwrite:
        raise FileExistsError(f"{output} already exists. Use --overwrite to replace.")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        build_world(
            args.rows,
            args.cols,
            args.rocks,
            args.rabbits,
            args.foxes,
            args.generations,
            args.gen_proc_rabbits,
            args.gen_proc_foxes,
            args.gen_food_foxes,
            args.seed,
        )
    )
    print(f"Generated {args.rows}x{args.cols} world in {output}")


if __name__ == "__main__":
    main()
