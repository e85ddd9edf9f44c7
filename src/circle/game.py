"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating one full turn of the puzzle: block the selected cell,
let the marker run toward the border, and decide whether the game is over.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from src.circle.board import INITIAL_BLOCKED_PROBABILITY, Board
from src.circle.cell import OFF_BOARD, Cell
from src.circle.history import History, Snapshot
from src.circle.router import Shuffler, find_direction
from src.core.exceptions import GameStateError, InvalidBoardError
from src.core.models import GameModel, HistoryEntry

logger = logging.getLogger(__name__)


class Status(Enum):
    AWAITING_PLAYER_MOVE = auto()
    RESOLVING = auto()
    WON = auto()
    LOST = auto()


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    status: Status
    history: History = field(default_factory=History)
    shuffle: Shuffler = field(default=random.shuffle, repr=False, compare=False)

    @classmethod
    def new_game(
        cls,
        size: int,
        initial_blocked_probability: float = INITIAL_BLOCKED_PROBABILITY,
        rng: Optional[random.Random] = None,
        shuffle: Shuffler = random.shuffle,
    ) -> Self:
        board = Board.new(size, initial_blocked_probability, rng)
        return cls(board, Status.AWAITING_PLAYER_MOVE, History(), shuffle)

    @classmethod
    def from_model(cls, model: GameModel, shuffle: Shuffler = random.shuffle) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        board = Board.from_layout(model.layout)
        status = _parse_status(model.status)
        _assert_consistent(board, status)

        undo_stack = _parse_history(model.undo_history)
        redo_stack = _parse_history(model.redo_history)
        # undo entries are pre-move snapshots: the player was always about to move
        for snapshot in undo_stack:
            if snapshot.status != Status.AWAITING_PLAYER_MOVE:
                raise InvalidBoardError(
                    f"Undo entry with status {snapshot.status.name.lower()} cannot precede a move."
                )

        history = History(undo_stack=undo_stack, redo_stack=redo_stack)
        return cls(board, status, history, shuffle)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            layout=self.board.to_layout(),
            status=self.status.name.lower(),
            undo_history=[_snapshot_to_entry(s) for s in self.history.undo_stack],
            redo_history=[_snapshot_to_entry(s) for s in self.history.redo_stack],
        )

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def is_over(self) -> bool:
        return self.status in (Status.WON, Status.LOST)

    @property
    def score(self) -> Optional[int]:
        """Number of moves it took to win. None as long as the game is not won."""
        if self.status != Status.WON:
            return None
        return self.board.move_count

    def select(self, cell: Cell) -> None:
        """
        The player blocks a cell
        -----

        1. snapshot the current state (NOT yet committed to the history)
        2. block the cell (raises InvalidMoveError for a cell that is not free, before anything changed)
        3. ask the router for the marker's next step
        4. no way out? --> LOST. Next step on the border? --> WON. Otherwise wait for the next move.
        5. commit the snapshot to the history (this also drops the redo stack)

        Anything going wrong in between restores the snapshot, so the board is never left half-updated.
        """
        if self.status != Status.AWAITING_PLAYER_MOVE:
            raise GameStateError(
                f"Game is not awaiting a move. status: {self.status.name.lower()}"
            )

        snapshot = Snapshot.take(self.board, self.status)
        try:
            self._change_status(Status.RESOLVING)
            self.board.set_blocked(cell)
            self._resolve_turn()
        except Exception:
            self._restore(snapshot)
            raise

        self.history.record(snapshot)

    def undo(self) -> bool:
        """
        Go back to the state before the last move. Returns False if there is nothing to undo.
        NOTE: also allowed once the game is over. Always lands back in a state awaiting the player's move.
        """
        previous = self.history.undo(Snapshot.take(self.board, self.status))
        if previous is None:
            return False
        self._restore(previous)
        self._change_status(Status.AWAITING_PLAYER_MOVE)
        return True

    def redo(self) -> bool:
        """Re-apply the last undone move. Returns False if there is nothing to redo."""
        following = self.history.redo(Snapshot.take(self.board, self.status))
        if following is None:
            return False
        self._restore(following)
        return True

    def reset(
        self,
        size: Optional[int] = None,
        initial_blocked_probability: float = INITIAL_BLOCKED_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Start a fresh game: new board, empty history"""
        self.board.reset(size, initial_blocked_probability, rng)
        self.history.clear()
        self._change_status(Status.AWAITING_PLAYER_MOVE)

    # -- PRIVATE HELPERS ---
    def _resolve_turn(self) -> None:
        """The marker answers the player's move"""
        direction = find_direction(self.board, self.shuffle)
        self.board.record_move()

        if direction == OFF_BOARD:
            logger.info("Marker encircled after %d moves.", self.board.move_count)
            self._change_status(Status.LOST)
            return

        self.board.move_marker_to(direction)
        if self.board.is_marker_on_border():
            logger.info("Marker escaped after %d moves.", self.board.move_count)
            self._change_status(Status.WON)
        else:
            self._change_status(Status.AWAITING_PLAYER_MOVE)

    def _restore(self, snapshot: Snapshot) -> None:
        self.board = snapshot.restore()
        self._change_status(snapshot.status)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status


# -- CONVERSION HELPERS ---
def _parse_status(status: str) -> Status:
    if not isinstance(status, str):
        raise GameStateError(f"Invalid status code: {status!r}.")
    status_name = status.replace(" ", "_").upper()
    if status_name not in Status.__members__ or status_name == Status.RESOLVING.name:
        raise GameStateError(
            f"Invalid status code: {status!r}. \nPick one from {','.join([s.name.lower() for s in Status if s != Status.RESOLVING])}"
        )
    return Status[status_name]


def _assert_consistent(board: Board, status: Status) -> None:
    """A game awaiting a move must have its marker somewhere inside the border ring"""
    if status != Status.AWAITING_PLAYER_MOVE:
        return
    if not board.is_marker_on_board() or board.is_marker_on_border():
        raise InvalidBoardError(
            f"Marker at {board.marker} cannot be awaiting a move on this board."
        )


def _parse_history(entries: list[HistoryEntry]) -> list[Snapshot]:
    if not isinstance(entries, list):
        raise InvalidBoardError(f"History must be a list of entries, got {type(entries).__name__}.")
    return [_entry_to_snapshot(entry) for entry in entries]


def _entry_to_snapshot(entry: HistoryEntry) -> Snapshot:
    if not isinstance(entry, dict) or not {"layout", "status"} <= entry.keys():
        raise InvalidBoardError(f"Invalid history entry: {entry!r}")

    board = Board.from_layout(entry["layout"])
    status = _parse_status(entry["status"])
    _assert_consistent(board, status)
    return Snapshot(board, status)


def _snapshot_to_entry(snapshot: Snapshot) -> HistoryEntry:
    return {"layout": snapshot.board.to_layout(), "status": snapshot.status.name.lower()}
