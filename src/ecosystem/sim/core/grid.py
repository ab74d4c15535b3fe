from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .cell import EMPTY, Cell, ObjectType
from .errors import AllocationError, OutOfBoundsError


class GridState:
    """Double-buffered cell storage.

    Reads during a phase go to the source buffer, writes go to the scratch
    buffer. ``seed_scratch`` copies source into scratch before a phase and
    ``commit`` makes scratch the new source once the phase is complete.
    """

    def __init__(self, n_rows: int, n_cols: int) -> None:
        if n_rows < 0 or n_cols < 0:
            raise AllocationError(f"invalid grid shape {n_rows}x{n_cols}")
        self._n_rows = n_rows
        self._n_cols = n_cols
        size = n_rows * n_cols
        try:
            self._cells: List[Cell] = [EMPTY] * size
            self._scratch: List[Cell] = [EMPTY] * size
        except (MemoryError, OverflowError) as exc:
            raise AllocationError(f"cannot allocate a {n_rows}x{n_cols} grid") from exc

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_cols(self) -> int:
        return self._n_cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._n_rows, self._n_cols)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._n_rows and 0 <= y < self._n_cols

    def index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"({x}, {y}) outside {self._n_rows}x{self._n_cols} grid")
        return x * self._n_cols + y

    def get(self, x: int, y: int) -> Cell:
        return self._cells[self.index(x, y)]

    def set(self, x: int, y: int, cell: Cell) -> None:
        self._cells[self.index(x, y)] = cell

    def get_scratch(self, x: int, y: int) -> Cell:
        return self._scratch[self.index(x, y)]

    def set_scratch(self, x: int, y: int, cell: Cell) -> None:
        self._scratch[self.index(x, y)] = cell

    def seed_scratch(self) -> None:
        # Cells are immutable, a shallow copy is a full copy.
        self._scratch[:] = self._cells

    def commit(self) -> None:
        self._cells, self._scratch = self._scratch, self._cells

    def objects(self, obj_type: Optional[ObjectType] = None) -> Iterator[Tuple[int, int, Cell]]:
        """Yield ``(x, y, cell)`` for non-empty source cells in row-major order."""
        n_cols = self._n_cols
        for idx, cell in enumerate(self._cells):
            if cell.type is ObjectType.NONE:
                continue
            if obj_type is not None and cell.type is not obj_type:
                continue
            yield idx // n_cols, idx % n_cols, cell

    def count(self, obj_type: ObjectType) -> int:
        return sum(1 for cell in self._cells if cell.type is obj_type)

    def counts(self) -> Dict[ObjectType, int]:
        totals = {ObjectType.ROCK: 0, ObjectType.RABBIT: 0, ObjectType.FOX: 0}
        for cell in self._cells:
            if cell.type is not ObjectType.NONE:
                totals[cell.type] += 1
        return totals

    def copy(self) -> "GridState":
        clone = GridState(self._n_rows, self._n_cols)
        clone._cells[:] = self._cells
        return clone

    def same_layout(self, other: "GridState") -> bool:
        if self.shape != other.shape:
            return False
        return all(a.type is b.type for a, b in zip(self._cells, other._cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridState):
            return NotImplemented
        return self.shape == other.shape and self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]
