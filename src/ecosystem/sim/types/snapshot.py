from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .metrics import GenerationMetrics


@dataclass(slots=True)
class Snapshot:
    generation: int
    remaining: int
    population: Dict[str, int]
    rows: List[str]
    metrics: Optional[GenerationMetrics]
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotMetadata:
    n_rows: int
    n_cols: int
    n_gen: int
    gen_proc_rabbits: int
    gen_proc_foxes: int
    gen_food_foxes: int
