"""Undo / redo bookkeeping"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Self

from src.circle.board import Board


@dataclass(frozen=True)
class Snapshot:
    """
    Frozen copy of the game at some point in time.
    NOTE: `status` is the game Status (defined in src/circle/game.py). Typed loosely to avoid a circular import.
    """

    board: Board
    status: Enum

    @classmethod
    def take(cls, board: Board, status: Enum) -> Self:
        return cls(board.clone(), status)

    def restore(self) -> Board:
        """Hand out a copy, so the stored snapshot can never be changed through the live board"""
        return self.board.clone()


@dataclass
class History:
    """
    Two stacks of snapshots.
    ----

    * Before every move the state gets pushed onto the undo stack.
    * Making a new move discards the redo stack: that branch of history can no longer be reached.
    * Undo/redo move the current state onto the opposite stack.
    """

    undo_stack: list[Snapshot] = field(default_factory=list)
    redo_stack: list[Snapshot] = field(default_factory=list)

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def record(self, snapshot: Snapshot) -> None:
        """Commit the state from right before a move"""
        self.redo_stack.clear()
        self.undo_stack.append(snapshot)

    def undo(self, current: Snapshot) -> Optional[Snapshot]:
        """Step back. Returns None (and changes nothing) if there is nothing to undo"""
        if not self.can_undo:
            return None
        self.redo_stack.append(current)
        return self.undo_stack.pop()

    def redo(self, current: Snapshot) -> Optional[Snapshot]:
        """Step forward again. Returns None (and changes nothing) if there is nothing to redo"""
        if not self.can_redo:
            return None
        self.undo_stack.append(current)
        return self.redo_stack.pop()

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()
