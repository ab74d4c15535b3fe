from __future__ import annotations

from typing import Dict

from ..core.cell import ObjectType
from ..types.metrics import GenerationMetrics, PhaseMetrics


def create_metrics(
    generation: int,
    rabbit_phase: PhaseMetrics,
    fox_phase: PhaseMetrics,
    counts: Dict[ObjectType, int],
    duration_ms: float,
) -> GenerationMetrics:
    return GenerationMetrics(
        generation=generation,
        rabbits=counts[ObjectType.RABBIT],
        foxes=counts[ObjectType.FOX],
        rocks=counts[ObjectType.ROCK],
        rabbit_phase=rabbit_phase,
        fox_phase=fox_phase,
        duration_ms=duration_ms,
    )


def population_payload(counts: Dict[ObjectType, int]) -> Dict[str, int]:
    return {
        "rocks": counts[ObjectType.ROCK],
        "rabbits": counts[ObjectType.RABBIT],
        "foxes": counts[ObjectType.FOX],
    }
