from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.cell import EMPTY, Cell, ObjectType, newborn
from ..types.metrics import PhaseMetrics
from .movement import choose_move, holds_rabbit, is_empty

if TYPE_CHECKING:
    from ..core.config import WorldConfig
    from ..core.grid import GridState


def _keeps_cell(mover: Cell, occupant: Cell) -> bool:
    if mover.gen_proc != occupant.gen_proc:
        return mover.gen_proc > occupant.gen_proc
    return mover.last_ate < occupant.last_ate


def _hunt(grid: GridState, metrics: PhaseMetrics, fox: Cell, target: tuple[int, int]) -> None:
    tx, ty = target
    prey = grid.get_scratch(tx, ty)
    if prey.type is ObjectType.FOX:
        # Another fox already ate here this phase; the later one takes the cell.
        metrics.conflicts += 1
    else:
        metrics.prey_eaten += 1
    grid.set_scratch(tx, ty, fox)


def run_fox_phase(grid: GridState, config: WorldConfig, generation: int) -> PhaseMetrics:
    metrics = PhaseMetrics()
    grid.seed_scratch()

    for x, y, cell in grid.objects(ObjectType.FOX):
        metrics.population_before += 1
        fox = cell.aged()
        can_procreate = fox.gen_proc > config.gen_proc_foxes

        target = choose_move(grid, generation, x, y, holds_rabbit)
        if target is not None:
            fox = fox.with_counters(gen_proc=0 if can_procreate else None, last_ate=0)
            _hunt(grid, metrics, fox, target)
            metrics.moves += 1
            if can_procreate:
                grid.set_scratch(x, y, newborn(ObjectType.FOX))
                metrics.births += 1
            else:
                grid.set_scratch(x, y, EMPTY)
            continue

        fox = fox.hungrier()
        if fox.last_ate >= config.gen_food_foxes:
            grid.set_scratch(x, y, EMPTY)
            metrics.starved += 1
            continue

        target = choose_move(grid, generation, x, y, is_empty)
        if target is None:
            grid.set_scratch(x, y, fox)
            continue

        if can_procreate:
            fox = fox.with_counters(gen_proc=0)

        tx, ty = target
        occupant = grid.get_scratch(tx, ty)
        if occupant.type is ObjectType.FOX:
            metrics.conflicts += 1
            if _keeps_cell(fox, occupant):
                grid.set_scratch(tx, ty, fox)
        else:
            grid.set_scratch(tx, ty, fox)
        metrics.moves += 1

        if can_procreate:
            # The cub starts fed; it never inherits the parent's hunger.
            grid.set_scratch(x, y, newborn(ObjectType.FOX))
            metrics.births += 1
        else:
            grid.set_scratch(x, y, EMPTY)

    grid.commit()
    metrics.deaths = metrics.starved + metrics.conflicts
    metrics.population_after = grid.count(ObjectType.FOX)
    return metrics
