from __future__ import annotations

from typing import List

from ..core.config import WORLD_FIELDS
from ..core.world import World


def _header(world: World) -> tuple[int, ...]:
    config = world.config
    # n_gen is compared as generations still to run, matching the report format.
    return (
        config.gen_proc_rabbits,
        config.gen_proc_foxes,
        config.gen_food_foxes,
        world.remaining,
        config.n_rows,
        config.n_cols,
    )


def compare_worlds(left: World, right: World, limit: int = 10) -> List[str]:
    """Return up to ``limit`` cell mismatches plus any config mismatches; empty when the worlds match.

    Only object types are compared, agent counters are ignored.
    """

    mismatches: List[str] = []
    for name, a, b in zip(WORLD_FIELDS, _header(left), _header(right)):
        if a != b:
            mismatches.append(f"{name}: {a} != {b}")
    if left.grid.shape != right.grid.shape:
        return mismatches

    cell_mismatches = 0
    for x in range(left.grid.n_rows):
        for y in range(left.grid.n_cols):
            a = left.grid.get(x, y).type
            b = right.grid.get(x, y).type
            if a is b:
                continue
            cell_mismatches += 1
            if cell_mismatches <= limit:
                mismatches.append(f"cell ({x}, {y}): {a.value} != {b.value}")
    if cell_mismatches > limit:
        mismatches.append(f"... {cell_mismatches - limit} more cell mismatches")
    return mismatches


def worlds_equal(left: World, right: World) -> bool:
    return _header(left) == _header(right) and left.grid.same_layout(right.grid)
