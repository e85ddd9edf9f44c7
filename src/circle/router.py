"""
Escape routing: where does the marker go next?

Key idea: breadth-first search from the marker to the border of the board.
Every branch of the search remembers the first step it took (its anchor), so once a branch reaches
the border we immediately know which neighbour of the marker to move to.
"""

import logging
import random
from collections import deque
from typing import Callable, Protocol

from src.circle.cell import OFF_BOARD, Cell, CellStatus, is_on_border, neighbours

logger = logging.getLogger(__name__)

# Permutes a list in place (random.shuffle or a deterministic stand-in in tests)
Shuffler = Callable[[list[Cell]], None]


class Board(Protocol):
    """Just the parts the router needs"""

    size: int
    marker: Cell
    cells: dict[Cell, CellStatus]


def obstruction_grid(board: Board) -> dict[Cell, bool]:
    """Any cell that is not free obstructs the search, including the marker's own cell"""
    return {cell: status != CellStatus.FREE for cell, status in board.cells.items()}


def possible_neighbours(
    cell: Cell, obstructed: dict[Cell, bool], size: int
) -> list[Cell]:
    """Neighbours of the cell that are on the board and not (yet) obstructed"""
    return [
        neighbour
        for neighbour in neighbours(cell)
        if neighbour.is_within_bounds(size) and not obstructed[neighbour]
    ]


def find_direction(board: Board, shuffle: Shuffler = random.shuffle) -> Cell:
    """
    Next step of one of the shortest paths from the marker to the border.
    ----

    ----
    1. Shuffle the free neighbours of the marker (adds some non determinism to the game)
    2. A neighbour on the border? Go there.
    3. Otherwise search breadth-first, each queued cell tagged with the first step (anchor) of its branch.
    4. The first branch that touches the border returns its anchor. BFS expands cells in order of distance,
       so this is the first step of a shortest path.
    5. Queue runs dry: the marker is encircled, return OFF_BOARD.

    NOTE: assumes the marker is not on the border itself. The caller treats that case as the end of the game.
    """
    obstructed = obstruction_grid(board)
    queue: deque[tuple[Cell, Cell]] = deque()

    # start with the neighbours of the marker
    first_steps = possible_neighbours(board.marker, obstructed, board.size)
    shuffle(first_steps)
    for step in first_steps:
        if is_on_border(step, board.size):
            return step
        queue.append((step, step))
        # the obstruction grid doubles as the set of visited cells
        obstructed[step] = True

    while queue:
        frontier, anchor = queue.popleft()
        candidates = possible_neighbours(frontier, obstructed, board.size)
        shuffle(candidates)
        for candidate in candidates:
            if is_on_border(candidate, board.size):
                return anchor
            queue.append((candidate, anchor))
            obstructed[candidate] = True

    logger.debug("Marker at %s has no way out.", board.marker)
    return OFF_BOARD
