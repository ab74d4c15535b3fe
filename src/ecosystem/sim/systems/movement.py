from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..core.cell import Cell, ObjectType

if TYPE_CHECKING:
    from ..core.grid import GridState

NORTH, EAST, SOUTH, WEST = range(4)

# Clockwise from north, as (dx, dy) with x the row.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))

# Viability mask -> viable directions in ascending bit order.
_PATHS: Tuple[Tuple[int, ...], ...] = (
    (),
    (NORTH,),
    (EAST,),
    (NORTH, EAST),
    (SOUTH,),
    (NORTH, SOUTH),
    (EAST, SOUTH),
    (NORTH, EAST, SOUTH),
    (WEST,),
    (NORTH, WEST),
    (EAST, WEST),
    (NORTH, EAST, WEST),
    (SOUTH, WEST),
    (NORTH, SOUTH, WEST),
    (EAST, SOUTH, WEST),
    (NORTH, EAST, SOUTH, WEST),
)

CellPredicate = Callable[[Cell], bool]


def is_empty(cell: Cell) -> bool:
    return cell.is_empty


def holds_rabbit(cell: Cell) -> bool:
    return cell.type is ObjectType.RABBIT


def viable_mask(grid: GridState, x: int, y: int, predicate: CellPredicate) -> int:
    mask = 0
    for bit, (dx, dy) in enumerate(DIRECTIONS):
        tx = x + dx
        ty = y + dy
        if grid.in_bounds(tx, ty) and predicate(grid.get(tx, ty)):
            mask |= 1 << bit
    return mask


def choose_move(
    grid: GridState, generation: int, x: int, y: int, predicate: CellPredicate
) -> Optional[Tuple[int, int]]:
    """
    Pick the neighbour of ``(x, y)`` an agent moves to, or ``None`` if no neighbour qualifies.

    Neighbours are tested against the source buffer. With ``P`` viable
    directions the ``(generation + x + y) % P``-th one is taken, counting
    clockwise from north.
    """

    paths = _PATHS[viable_mask(grid, x, y, predicate)]
    if not paths:
        return None
    dx, dy = DIRECTIONS[paths[(generation + x + y) % len(paths)]]
    return (x + dx, y + dy)
