from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..core.cell import ObjectType

if TYPE_CHECKING:
    from ..core.grid import GridState

SYMBOLS = {
    ObjectType.NONE: " ",
    ObjectType.ROCK: "*",
    ObjectType.RABBIT: "R",
    ObjectType.FOX: "F",
}


def render_rows(grid: GridState) -> List[str]:
    rows = []
    for x in range(grid.n_rows):
        rows.append("".join(SYMBOLS[grid.get(x, y).type] for y in range(grid.n_cols)))
    return rows


def render_grid(grid: GridState) -> str:
    """Bordered view: dashes above and below, pipes either side of each row."""
    border = "-" * (grid.n_cols + 2)
    lines = [border]
    lines.extend(f"|{row}|" for row in render_rows(grid))
    lines.append(border)
    return "\n".join(lines)
