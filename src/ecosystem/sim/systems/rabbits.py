from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.cell import EMPTY, ObjectType, newborn
from ..types.metrics import PhaseMetrics
from .movement import choose_move, is_empty

if TYPE_CHECKING:
    from ..core.config import WorldConfig
    from ..core.grid import GridState


def run_rabbit_phase(grid: GridState, config: WorldConfig, generation: int) -> PhaseMetrics:
    """Move every rabbit once, writing into scratch, then commit.

    Rabbits are visited in row-major order over the pre-phase grid, so
    rabbits born this phase do not act until the next generation.
    """

    metrics = PhaseMetrics()
    grid.seed_scratch()

    for x, y, cell in grid.objects(ObjectType.RABBIT):
        metrics.population_before += 1
        rabbit = cell.aged()
        can_procreate = rabbit.gen_proc > config.gen_proc_rabbits

        target = choose_move(grid, generation, x, y, is_empty)
        if target is None:
            grid.set_scratch(x, y, rabbit)
            continue

        if can_procreate:
            rabbit = rabbit.with_counters(gen_proc=0)

        tx, ty = target
        occupant = grid.get_scratch(tx, ty)
        if occupant.type is ObjectType.RABBIT:
            # Older rabbit keeps the cell; on a tie the earlier mover stays.
            metrics.conflicts += 1
            if rabbit.gen_proc > occupant.gen_proc:
                grid.set_scratch(tx, ty, rabbit)
        else:
            grid.set_scratch(tx, ty, rabbit)
        metrics.moves += 1

        if can_procreate:
            grid.set_scratch(x, y, newborn(ObjectType.RABBIT))
            metrics.births += 1
        else:
            grid.set_scratch(x, y, EMPTY)

    grid.commit()
    metrics.deaths = metrics.conflicts
    metrics.population_after = grid.count(ObjectType.RABBIT)
    return metrics
