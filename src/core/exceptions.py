"""Custom exceptions shared by the domain, persistence and service layers."""


class GameError(Exception):
    """Base class for everything that can go wrong while playing."""


class OutOfRangeError(GameError):
    """A cell outside of the board was looked up. Indicates a programming error."""


class InvalidMoveError(GameError):
    """The player selected a cell that cannot be blocked."""


class GameStateError(GameError):
    """Requested action does not fit the current state of the game."""


class InvalidBoardError(GameError):
    """Board size or layout string cannot be turned into a board."""


class InvalidRequestError(GameError):
    """Incoming request failed validation."""
