from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.world import World
from ..sim.io.world_file import load_world
from ..sim.types.metrics import GenerationMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "generation",
    "rabbits",
    "foxes",
    "rocks",
    "rabbit_births",
    "rabbit_deaths",
    "fox_births",
    "fox_deaths",
    "foxes_starved",
    "rabbits_eaten",
    "generation_ms",
]


def _format_row(metrics: GenerationMetrics, generation_ms: float) -> list[object]:
    return [
        metrics.generation,
        metrics.rabbits,
        metrics.foxes,
        metrics.rocks,
        metrics.rabbit_phase.births,
        metrics.rabbit_phase.deaths + metrics.fox_phase.prey_eaten,
        metrics.fox_phase.births,
        metrics.fox_phase.deaths,
        metrics.fox_phase.starved,
        metrics.fox_phase.prey_eaten,
        f"{generation_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
    }


def _peak(series: list[int]) -> dict[str, int]:
    if not series:
        return {"value": 0, "generation": -1}
    value = max(series)
    return {"value": value, "generation": series.index(value)}


def run_headless(
    world_path: Path,
    log_path: Optional[Path] = None,
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    generations: Optional[int] = None,
) -> World:
    world = load_world(world_path)
    steps = world.remaining if generations is None else min(max(0, generations), world.remaining)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    generation_ms_series: list[float] = []
    rabbit_series: list[int] = []
    fox_series: list[int] = []

    try:
        for _ in range(steps):
            metrics = world.step()
            generation_ms = 0.0 if deterministic_log else metrics.duration_ms
            generation_ms_series.append(generation_ms)
            rabbit_series.append(metrics.rabbits)
            fox_series.append(metrics.foxes)
            if writer:
                writer.writerow(_format_row(metrics, generation_ms))
    finally:
        if csv_file:
            csv_file.close()

    logger.info("ran %d generations of %s", steps, world_path)

    if summary_path:
        final = world.population()
        summary = {
            "world": str(world_path),
            "generations": steps,
            "deterministic_log": deterministic_log,
            "generation_ms": _summary_stats(generation_ms_series),
            "rabbits": _summary_stats([float(v) for v in rabbit_series]),
            "foxes": _summary_stats([float(v) for v in fox_series]),
            "peaks": {"rabbits": _peak(rabbit_series), "foxes": _peak(fox_series)},
            "final": {kind.value.lower(): count for kind, count in final.items()},
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return world


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    parser = argparse.ArgumentParser(description="Headless ecosystem run with per-generation metrics")
    parser.add_argument("world", type=Path, help="World description file")
    parser.add_argument("--generations", type=int, default=None, help="Stop early after this many generations")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (generation_ms is forced to 0.000 so identical worlds match).",
    )
    args = parser.parse_args()
    run_headless(
        args.world,
        args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        generations=args.generations,
    )


if __name__ == "__main__":
    main()
