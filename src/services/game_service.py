"""Orchestration of communication from the presentation layer to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Optional, Protocol
from uuid import UUID

from src.api.models import GameResponse, NewGameRequest, SelectCellRequest
from src.circle.board import Board
from src.circle.cell import Cell
from src.circle.game import Game, Status
from src.circle.router import Shuffler
from src.core.config import Settings, settings
from src.core.exceptions import GameError, GameStateError, InvalidMoveError
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class GameView(Protocol):
    """Whatever draws the board. The service only tells it what changed."""

    def on_update(self, board: Board) -> None: ...
    def on_undo_available(self, available: bool) -> None: ...
    def on_redo_available(self, available: bool) -> None: ...
    def on_won(self, move_count: int) -> None: ...
    def on_lost(self) -> None: ...


class GameService:
    """Orchestration of layers for a single player session."""

    def __init__(
        self,
        repository: GameRepository,
        view: Optional[GameView] = None,
        config: Settings = settings,
        shuffle: Shuffler = random.shuffle,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.view = view
        self.config = config
        self.shuffle = shuffle
        self.rng = rng
        self.game: Optional[Game] = None

    # -- Presentation commands ---
    def start(self, request: NewGameRequest) -> GameResponse:
        """Resume the saved game if there is one, otherwise start a new one."""
        game = self.load_saved_game()
        if game is None:
            game = Game.new_game(
                size=request.size or self.config.BOARD_SIZE,
                initial_blocked_probability=self.config.INITIAL_BLOCKED_PROBABILITY,
                rng=self.rng,
                shuffle=self.shuffle,
            )
            logger.info("Started a new game on a %dx%d board.", game.board.size, game.board.size)
        self.game = game
        return self._respond()

    def select_cell(self, request: SelectCellRequest) -> GameResponse:
        """
        The player clicked a cell.
        ----
        Clicking a cell that is not free (or clicking once the game is over) is not a move: it is ignored.
        """
        game = self._current_game()
        try:
            game.select(Cell(request.column, request.row))
        except (InvalidMoveError, GameStateError) as exc:
            logger.debug("Ignoring selection of (%d, %d): %s", request.column, request.row, exc)
            return self._respond()
        return self._respond(game_may_have_ended=True)

    def request_undo(self) -> GameResponse:
        if not self._current_game().undo():
            logger.debug("Nothing to undo.")
        return self._respond()

    def request_redo(self) -> GameResponse:
        """Redoing the final move of a game ends it again."""
        if not self._current_game().redo():
            logger.debug("Nothing to redo.")
            return self._respond()
        return self._respond(game_may_have_ended=True)

    def request_reset(self) -> GameResponse:
        self._current_game().reset(
            initial_blocked_probability=self.config.INITIAL_BLOCKED_PROBABILITY,
            rng=self.rng,
        )
        return self._respond()

    def request_quit(self) -> UUID:
        """Store the game so the next session can pick it up again."""
        return self.save_game()

    # -- Persistence ---
    def load_saved_game(self) -> Optional[Game]:
        """
        Pick up the most recently saved game.
        ----

        The record is consumed: once resumed, it is removed from the repository.
        A record that cannot be turned back into a game is dropped as well, and the caller starts a fresh game instead.
        """
        saved = self.repo.latest_game()
        if saved is None:
            return None

        model, game_id = saved
        self.repo.delete_game(game_id)
        try:
            game = Game.from_model(model, shuffle=self.shuffle)
        except GameError as exc:
            logger.warning("Saved game %s could not be restored, starting a new one: %s", game_id, exc)
            return None

        logger.info("Resumed saved game %s.", game_id)
        return game

    def save_game(self) -> UUID:
        _, game_id = self.repo.create_game(self._current_game().to_model())
        logger.info("Saved game %s.", game_id)
        return game_id

    # -- Internal helpers --
    def _current_game(self) -> Game:
        if self.game is None:
            raise GameStateError("No game in progress. Start a game first.")
        return self.game

    def _respond(self, game_may_have_ended: bool = False) -> GameResponse:
        """Notify the view (if any) and convert the game into a GameResponse"""
        game = self._current_game()
        if self.view is not None:
            self._notify(self.view, game, game_may_have_ended)
        return GameResponse(
            size=game.board.size,
            layout=game.board.to_layout(),
            status=game.status.name.lower(),
            move_count=game.board.move_count,
            marker=(game.board.marker.column, game.board.marker.row),
            can_undo=game.can_undo,
            can_redo=game.can_redo,
            score=game.score,
        )

    def _notify(self, view: GameView, game: Game, game_may_have_ended: bool) -> None:
        view.on_update(game.board)
        view.on_undo_available(game.can_undo)
        view.on_redo_available(game.can_redo)
        if not game_may_have_ended:
            return
        if game.status == Status.WON:
            view.on_won(game.board.move_count)
        elif game.status == Status.LOST:
            view.on_lost()
