"""
A cell on the board + the hexagonal geometry of the grid

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class CellStatus(Enum):
    FREE = auto()
    BLOCKED = auto()
    OCCUPIED = auto()


@dataclass(frozen=True)
class Cell:
    column: int
    row: int

    def is_within_bounds(self, size: int) -> bool:
        return (0 <= self.column < size) and (0 <= self.row < size)


# Where the marker ends up once it left the board
OFF_BOARD = Cell(-1, -1)


def neighbours(cell: Cell) -> list[Cell]:
    """
    The six neighbours of a cell.
    ----

    Rows are drawn shifted by half a cell depending on their parity, so the
    neighbours in the rows above and below depend on whether the row is even.
    NOTE: May return cells outside of the board. Filter with `Cell.is_within_bounds` before looking them up.
    """
    x, y = cell.column, cell.row
    delta = 1 if y % 2 == 0 else 0
    return [
        Cell(x - delta, y - 1),
        Cell(x - delta + 1, y - 1),
        Cell(x - 1, y),
        Cell(x + 1, y),
        Cell(x - delta, y + 1),
        Cell(x - delta + 1, y + 1),
    ]


def is_on_border(cell: Cell, size: int) -> bool:
    """Outer ring of the board: reaching it means the marker escapes"""
    return cell.column in (0, size - 1) or cell.row in (0, size - 1)


def center(size: int) -> Cell:
    """Starting cell of the marker"""
    return Cell(size // 2, size // 2)
