"""The Game board keeps track of which cells are blocked and where the marker is"""

import random
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.circle.cell import OFF_BOARD, Cell, CellStatus, center, is_on_border
from src.circle.layout import (
    LAYOUT_TO_STATUS,
    MIN_BOARD_SIZE,
    STATUS_TO_LAYOUT,
    is_valid_layout,
)
from src.core.exceptions import InvalidBoardError, InvalidMoveError, OutOfRangeError

# Chance for every interior cell to start out blocked
INITIAL_BLOCKED_PROBABILITY = 0.1


@dataclass
class Board:
    size: int
    cells: dict[Cell, CellStatus]
    marker: Cell
    move_count: int = 0

    @classmethod
    def new(
        cls,
        size: int,
        initial_blocked_probability: float = INITIAL_BLOCKED_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """
        Starting configuration of a game.
        ----

        * the marker sits in the centre of the board
        * the border ring is always free, so the marker can never start out trapped by the initial pattern
        * any other cell gets blocked with the given probability
        """
        board = cls.empty(size)
        rng = rng or random.Random()
        for cell in board.cells:
            if cell == board.marker or is_on_border(cell, size):
                continue
            if rng.random() < initial_blocked_probability:
                board.cells[cell] = CellStatus.BLOCKED
        return board

    @classmethod
    def empty(cls, size: int) -> Self:
        """Every cell free, marker in the centre"""
        if size < MIN_BOARD_SIZE:
            raise InvalidBoardError(
                f"Board size must be at least {MIN_BOARD_SIZE}, got {size}."
            )
        cells = {
            Cell(column, row): CellStatus.FREE
            for row in range(size)
            for column in range(size)
        }
        marker = center(size)
        cells[marker] = CellStatus.OCCUPIED
        return cls(size, cells, marker)

    @classmethod
    def from_layout(cls, layout: str) -> Self:
        """Construct a board from its text encoding (see src/circle/layout.py)"""
        if not is_valid_layout(layout):
            raise InvalidBoardError(f"Cannot interpret supplied string as board: {layout}")

        grid, move_count = layout.split(" ")
        rows = grid.split("/")
        cells: dict[Cell, CellStatus] = {}
        marker = OFF_BOARD
        for row_idx, row in enumerate(rows):
            for column_idx, character in enumerate(row):
                cell = Cell(column_idx, row_idx)
                cells[cell] = LAYOUT_TO_STATUS[character]
                if cells[cell] == CellStatus.OCCUPIED:
                    marker = cell
        return cls(len(rows), cells, marker, int(move_count))

    def to_layout(self) -> str:
        """Rows are separated by slashes, the move count follows after a space."""
        grid = "/".join(self._row_to_layout(row) for row in range(self.size))
        return f"{grid} {self.move_count}"

    def _row_to_layout(self, row: int) -> str:
        return "".join(
            STATUS_TO_LAYOUT[self.cells[Cell(column, row)]]
            for column in range(self.size)
        )

    def status(self, cell: Cell) -> CellStatus:
        if not cell.is_within_bounds(self.size):
            raise OutOfRangeError(f"{cell} is not on a board of size {self.size}.")
        return self.cells[cell]

    def free_cells(self) -> list[Cell]:
        return self._locate(CellStatus.FREE)

    def blocked_cells(self) -> list[Cell]:
        return self._locate(CellStatus.BLOCKED)

    def _locate(self, status: CellStatus) -> list[Cell]:
        return [cell for cell, cell_status in self.cells.items() if cell_status == status]

    def is_marker_on_board(self) -> bool:
        return self.marker.is_within_bounds(self.size)

    def is_marker_on_border(self) -> bool:
        return self.is_marker_on_board() and is_on_border(self.marker, self.size)

    def set_blocked(self, cell: Cell) -> None:
        """The player's move: only a free cell can be blocked"""
        if not cell.is_within_bounds(self.size):
            raise InvalidMoveError(f"Cannot block {cell}: not on the board.")
        if self.cells[cell] != CellStatus.FREE:
            raise InvalidMoveError(
                f"Cannot block {cell}: cell is {self.cells[cell].name.lower()}."
            )
        self.cells[cell] = CellStatus.BLOCKED

    def move_marker_to(self, cell: Cell) -> None:
        """
        Update the marker's position.
        NOTE: No check on the direction. It comes from the escape router, which only ever proposes a neighbour.
        """
        if self.is_marker_on_board():
            self.cells[self.marker] = CellStatus.FREE

        if cell.is_within_bounds(self.size):
            self.cells[cell] = CellStatus.OCCUPIED
            self.marker = cell
        else:
            self.marker = OFF_BOARD

    def record_move(self) -> None:
        self.move_count += 1

    def reset(
        self,
        size: Optional[int] = None,
        initial_blocked_probability: float = INITIAL_BLOCKED_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Start over (in place), optionally on a board with a different size"""
        fresh = Board.new(size or self.size, initial_blocked_probability, rng)
        self.size = fresh.size
        self.cells = fresh.cells
        self.marker = fresh.marker
        self.move_count = 0

    def clone(self) -> Self:
        """Deep copy: nothing is shared between the copy and this board"""
        return deepcopy(self)
