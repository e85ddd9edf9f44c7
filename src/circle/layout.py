"""
Text encoding of a board. Used to persist games and to write readable tests.

<rows, top to bottom, separated by '/'><space><move count>

* '.' is a free cell
* 'x' is a blocked cell
* 'o' is the marker
ex) a 5x5 board with a single blocked cell, the marker in the centre and 3 moves played:
...../.x.../..o../...../..... 3
A layout without an 'o' describes a marker that left the board.
"""

from src.circle.cell import CellStatus

MIN_BOARD_SIZE = 5

LAYOUT_TO_STATUS: dict[str, CellStatus] = {
    ".": CellStatus.FREE,
    "x": CellStatus.BLOCKED,
    "o": CellStatus.OCCUPIED,
}

STATUS_TO_LAYOUT: dict[CellStatus, str] = {
    value: key for key, value in LAYOUT_TO_STATUS.items()
}


def is_valid_layout(layout: str) -> bool:
    """Check if given string can be turned into a board."""
    if not isinstance(layout, str):
        return False

    # there should be 2 parts to the string
    parts = layout.split(" ")
    if len(parts) != 2:
        return False

    grid, move_count = parts
    if not is_valid_grid(grid):
        return False

    return is_valid_move_count(move_count)


def is_valid_grid(grid: str) -> bool:
    """Only check the part of the layout encoding the cells."""
    rows = grid.split("/")
    size = len(rows)
    if size < MIN_BOARD_SIZE:
        return False

    # square board
    if any(len(row) != size for row in rows):
        return False

    # immediately invalidate if any character is anything else
    if any(character not in LAYOUT_TO_STATUS for row in rows for character in row):
        return False

    # there is only one marker
    return grid.count(STATUS_TO_LAYOUT[CellStatus.OCCUPIED]) <= 1


def is_valid_move_count(counter: str) -> bool:
    # str.isdigit also accepts characters like "²" that int() refuses
    return counter.isascii() and counter.isdigit()
