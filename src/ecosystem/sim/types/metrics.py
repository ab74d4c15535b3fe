from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class PhaseMetrics:
    population_before: int = 0
    population_after: int = 0
    births: int = 0
    deaths: int = 0
    moves: int = 0
    conflicts: int = 0
    starved: int = 0
    prey_eaten: int = 0


@dataclass(slots=True)
class GenerationMetrics:
    generation: int
    rabbits: int
    foxes: int
    rocks: int
    rabbit_phase: PhaseMetrics = field(default_factory=PhaseMetrics)
    fox_phase: PhaseMetrics = field(default_factory=PhaseMetrics)
    duration_ms: float = 0.0
