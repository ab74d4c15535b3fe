from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Dict, List, Optional

from .cell import Cell, ObjectType
from .config import WorldConfig
from .errors import InputFormatError, SimulationFinishedError
from .grid import GridState
from ..io.render import render_rows
from ..systems import metrics as metrics_system
from ..systems.foxes import run_fox_phase
from ..systems.rabbits import run_rabbit_phase
from ..types.metrics import GenerationMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata

logger = logging.getLogger(__name__)


class World:
    """Owns the grid pair and advances it one generation at a time.

    Each generation runs the rabbit phase to completion and commits it,
    then runs the fox phase against the committed grid and commits again.
    """

    def __init__(self, config: WorldConfig, grid: Optional[GridState] = None):
        self._config = config
        self._grid = grid if grid is not None else GridState(config.n_rows, config.n_cols)
        if self._grid.shape != config.shape:
            raise InputFormatError(f"grid shape {self._grid.shape} does not match config shape {config.shape}")
        self._initial: Optional[GridState] = None
        self._generation = 0
        self._remaining = config.n_gen
        self._metrics: List[GenerationMetrics] = []

    @property
    def config(self) -> WorldConfig:
        return self._config

    @property
    def grid(self) -> GridState:
        return self._grid

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def finished(self) -> bool:
        return self._remaining <= 0

    @property
    def metrics(self) -> List[GenerationMetrics]:
        return self._metrics

    def place(self, obj_type: ObjectType, x: int, y: int) -> None:
        self._grid.set(x, y, Cell(obj_type))

    def population(self) -> Dict[ObjectType, int]:
        return self._grid.counts()

    def step(self) -> GenerationMetrics:
        if self.finished:
            raise SimulationFinishedError(f"all {self._config.n_gen} generations have run")
        if self._initial is None:
            self._initial = self._grid.copy()

        start = perf_counter()
        generation = self._generation
        rabbit_phase = run_rabbit_phase(self._grid, self._config, generation)
        fox_phase = run_fox_phase(self._grid, self._config, generation)
        self._generation += 1
        self._remaining -= 1

        duration_ms = (perf_counter() - start) * 1000.0
        metrics = metrics_system.create_metrics(
            generation, rabbit_phase, fox_phase, self._grid.counts(), duration_ms
        )
        self._metrics.append(metrics)
        logger.debug(
            "generation %d: rabbits=%d foxes=%d rocks=%d",
            generation,
            metrics.rabbits,
            metrics.foxes,
            metrics.rocks,
        )
        return metrics

    def run(self, on_generation: Optional[Callable[["World"], None]] = None) -> List[GenerationMetrics]:
        produced = []
        while not self.finished:
            produced.append(self.step())
            if on_generation is not None:
                on_generation(self)
        return produced

    def reset(self) -> None:
        if self._initial is not None:
            self._grid = self._initial.copy()
        self._initial = None
        self._generation = 0
        self._remaining = self._config.n_gen
        self._metrics.clear()

    def snapshot(self) -> Snapshot:
        config = self._config
        metadata = SnapshotMetadata(
            n_rows=config.n_rows,
            n_cols=config.n_cols,
            n_gen=config.n_gen,
            gen_proc_rabbits=config.gen_proc_rabbits,
            gen_proc_foxes=config.gen_proc_foxes,
            gen_food_foxes=config.gen_food_foxes,
        )
        return Snapshot(
            generation=self._generation,
            remaining=self._remaining,
            population=metrics_system.population_payload(self._grid.counts()),
            rows=render_rows(self._grid),
            metrics=self._metrics[-1] if self._metrics else None,
            metadata=metadata,
        )
