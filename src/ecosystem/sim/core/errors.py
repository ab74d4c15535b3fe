"""Error types raised while building or running a world."""

from __future__ import annotations


class WorldError(Exception):
    """Base error for world loading and simulation failures."""


class InputFormatError(WorldError, ValueError):
    """Raised when a world description has a missing or malformed field or an unknown object type."""


class OutOfBoundsError(WorldError, IndexError):
    """Raised when a coordinate falls outside the declared grid."""


class AllocationError(WorldError, MemoryError):
    """Raised when the grid buffers cannot be allocated."""


class SimulationFinishedError(WorldError, RuntimeError):
    """Raised when a generation is requested after the configured run is complete."""
