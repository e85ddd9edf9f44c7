"""Unit tests for src/services/game_service.py"""

import random
from typing import Generator
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.circle.board import Board
from src.core.config import Settings
from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.db.sql_repository import SQLGameRepository
from src.services.game_service import (
    GameResponse,
    GameService,
    NewGameRequest,
    SelectCellRequest,
)

# --- MOCK DEPENDENCIES ----
EMPTY_LAYOUT = "...../...../..o../...../..... 0"
ALMOST_ENCIRCLED_LAYOUT = "...../.xx../.xox./.x.../..... 0"
TEST_SETTINGS = Settings(BOARD_SIZE=7, INITIAL_BLOCKED_PROBABILITY=0.0)


def keep_order(cells: list) -> None:
    """Deterministic stand-in for random.shuffle"""


def saved_model(layout: str = EMPTY_LAYOUT, status: str = "awaiting_player_move") -> GameModel:
    return GameModel(layout=layout, status=status, undo_history=[], redo_history=[])


class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def latest_game(self) -> tuple[GameModel, UUID] | None:
        if not self._games:
            return None
        game_id = list(self._games)[-1]
        return self._games[game_id], game_id

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def view() -> Mock:
    return Mock()


@pytest.fixture
def service(mock_repository: MockRepository, view: Mock) -> GameService:
    return GameService(mock_repository, view, TEST_SETTINGS, shuffle=keep_order)


def start_from(service: GameService, repository: MockRepository, layout: str) -> GameResponse:
    """Let the service resume a game in the given position"""
    repository.create_game(saved_model(layout))
    return service.start(NewGameRequest())


# --- START ---
def test_start_new_game(service: GameService, mock_repository: MockRepository) -> None:
    response = service.start(NewGameRequest())
    assert isinstance(response, GameResponse)
    assert response.size == TEST_SETTINGS.BOARD_SIZE
    assert response.layout == Board.empty(7).to_layout()
    assert response.status == "awaiting_player_move"
    assert response.move_count == 0
    assert response.marker == (3, 3)
    assert not response.can_undo
    assert not response.can_redo
    assert response.score is None


def test_start_with_requested_size(service: GameService) -> None:
    response = service.start(NewGameRequest(size=11))
    assert response.size == 11
    assert response.marker == (5, 5)


def test_start_notifies_view(service: GameService, view: Mock) -> None:
    service.start(NewGameRequest())
    view.on_update.assert_called_once()
    view.on_undo_available.assert_called_once_with(False)
    view.on_redo_available.assert_called_once_with(False)
    view.on_won.assert_not_called()
    view.on_lost.assert_not_called()


def test_start_resumes_saved_game(service: GameService, mock_repository: MockRepository) -> None:
    layout = "...../.x.../..o../...x./..... 2"
    response = start_from(service, mock_repository, layout)
    assert response.layout == layout
    assert response.move_count == 2
    # the save slot is consumed
    assert mock_repository.latest_game() is None


@pytest.mark.parametrize(
    "corrupt",
    [
        saved_model(layout="garbage"),
        saved_model(status="not a status"),
        saved_model(layout="...../...../..o../...../..... ²"),
        saved_model(status=None),  # type: ignore[arg-type]
        GameModel(
            layout=EMPTY_LAYOUT,
            status="awaiting_player_move",
            undo_history=[{"board": "missing layout key"}],
            redo_history=[],
        ),
        GameModel(
            layout=EMPTY_LAYOUT,
            status="awaiting_player_move",
            undo_history=["junk"],  # type: ignore[list-item]
            redo_history=[],
        ),
        GameModel(
            layout=EMPTY_LAYOUT,
            status="awaiting_player_move",
            undo_history=None,  # type: ignore[arg-type]
            redo_history=[],
        ),
        # an undo entry is always a position where the player was about to move
        GameModel(
            layout=EMPTY_LAYOUT,
            status="awaiting_player_move",
            undo_history=[{"layout": "..o../...../...../...../..... 0", "status": "won"}],
            redo_history=[],
        ),
        GameModel(
            layout=EMPTY_LAYOUT,
            status="awaiting_player_move",
            undo_history=[],
            redo_history=[{"layout": "o..../...../...../...../..... 1", "status": "awaiting_player_move"}],
        ),
    ],
)
def test_corrupt_save_falls_back_to_new_game(
    service: GameService, mock_repository: MockRepository, corrupt: GameModel
) -> None:
    mock_repository.create_game(corrupt)
    response = service.start(NewGameRequest())
    assert response.layout == Board.empty(7).to_layout()
    assert mock_repository.latest_game() is None


# --- SELECTING CELLS ---
def test_select_cell(service: GameService, mock_repository: MockRepository, view: Mock) -> None:
    start_from(service, mock_repository, EMPTY_LAYOUT)
    view.reset_mock()

    response = service.select_cell(SelectCellRequest(column=4, row=4))
    assert response.move_count == 1
    assert response.marker == (1, 1)
    assert response.can_undo
    assert response.status == "awaiting_player_move"
    view.on_undo_available.assert_called_once_with(True)
    view.on_won.assert_not_called()


def test_winning(service: GameService, mock_repository: MockRepository, view: Mock) -> None:
    start_from(service, mock_repository, EMPTY_LAYOUT)
    service.select_cell(SelectCellRequest(column=4, row=4))
    response = service.select_cell(SelectCellRequest(column=4, row=0))

    assert response.status == "won"
    assert response.score == 2
    view.on_won.assert_called_once_with(2)
    view.on_lost.assert_not_called()


def test_losing(service: GameService, mock_repository: MockRepository, view: Mock) -> None:
    start_from(service, mock_repository, ALMOST_ENCIRCLED_LAYOUT)
    response = service.select_cell(SelectCellRequest(column=2, row=3))

    assert response.status == "lost"
    assert response.score is None
    view.on_lost.assert_called_once_with()
    view.on_won.assert_not_called()


@pytest.mark.parametrize("column, row", [(1, 1), (2, 2), (9, 9)])
def test_selecting_a_cell_that_is_not_free_is_ignored(
    service: GameService, mock_repository: MockRepository, column: int, row: int
) -> None:
    before = start_from(service, mock_repository, ALMOST_ENCIRCLED_LAYOUT)
    after = service.select_cell(SelectCellRequest(column=column, row=row))
    assert after == before


def test_selecting_after_game_over_is_ignored(
    service: GameService, mock_repository: MockRepository, view: Mock
) -> None:
    start_from(service, mock_repository, ALMOST_ENCIRCLED_LAYOUT)
    lost = service.select_cell(SelectCellRequest(column=2, row=3))
    view.reset_mock()

    response = service.select_cell(SelectCellRequest(column=0, row=0))
    assert response == lost
    view.on_lost.assert_not_called()


def test_commands_need_a_started_game(service: GameService) -> None:
    with pytest.raises(GameStateError):
        service.select_cell(SelectCellRequest(column=0, row=0))
    with pytest.raises(GameStateError):
        service.request_undo()
    with pytest.raises(GameStateError):
        service.request_quit()


# --- UNDO / REDO / RESET ---
def test_undo_and_redo(service: GameService, mock_repository: MockRepository, view: Mock) -> None:
    before = start_from(service, mock_repository, EMPTY_LAYOUT)
    after = service.select_cell(SelectCellRequest(column=4, row=4))

    undone = service.request_undo()
    assert undone.layout == before.layout
    assert undone.can_redo
    assert not undone.can_undo
    view.on_redo_available.assert_called_with(True)

    redone = service.request_redo()
    assert redone == after


def test_redo_into_lost_game_notifies_view(
    service: GameService, mock_repository: MockRepository, view: Mock
) -> None:
    start_from(service, mock_repository, ALMOST_ENCIRCLED_LAYOUT)
    service.select_cell(SelectCellRequest(column=2, row=3))
    service.request_undo()
    view.reset_mock()

    response = service.request_redo()
    assert response.status == "lost"
    view.on_lost.assert_called_once_with()
    view.on_won.assert_not_called()


def test_redo_into_won_game_notifies_view(
    service: GameService, mock_repository: MockRepository, view: Mock
) -> None:
    start_from(service, mock_repository, EMPTY_LAYOUT)
    service.select_cell(SelectCellRequest(column=4, row=4))
    service.select_cell(SelectCellRequest(column=4, row=0))
    service.request_undo()
    view.reset_mock()

    response = service.request_redo()
    assert response.status == "won"
    view.on_won.assert_called_once_with(2)
    view.on_lost.assert_not_called()


def test_redo_mid_game_does_not_end_it(
    service: GameService, mock_repository: MockRepository, view: Mock
) -> None:
    start_from(service, mock_repository, EMPTY_LAYOUT)
    service.select_cell(SelectCellRequest(column=4, row=4))
    service.request_undo()
    view.reset_mock()

    service.request_redo()
    view.on_won.assert_not_called()
    view.on_lost.assert_not_called()


def test_undo_with_empty_history(service: GameService, view: Mock) -> None:
    started = service.start(NewGameRequest())
    assert service.request_undo() == started
    assert service.request_redo() == started
    view.on_undo_available.assert_called_with(False)


def test_reset_after_loss(service: GameService, mock_repository: MockRepository) -> None:
    start_from(service, mock_repository, ALMOST_ENCIRCLED_LAYOUT)
    service.select_cell(SelectCellRequest(column=2, row=3))

    response = service.request_reset()
    assert response.status == "awaiting_player_move"
    assert response.move_count == 0
    assert response.layout == Board.empty(5).to_layout()
    assert not response.can_undo
    assert not response.can_redo


# --- QUIT / SAVE ---
def test_quit_saves_the_game(service: GameService, mock_repository: MockRepository) -> None:
    start_from(service, mock_repository, EMPTY_LAYOUT)
    played = service.select_cell(SelectCellRequest(column=4, row=4))

    game_id = service.request_quit()
    saved = mock_repository.latest_game()
    assert saved is not None
    stored, stored_id = saved
    assert stored_id == game_id
    assert stored.layout == played.layout
    assert len(stored.undo_history) == 1


def test_save_and_resume_roundtrip(db_session_repo: Session) -> None:
    """Full cycle through the SQL repository: quit one session, resume it in the next"""
    repository = SQLGameRepository(db_session_repo)
    first_session = GameService(
        repository, config=TEST_SETTINGS, rng=random.Random(5), shuffle=keep_order
    )
    first_session.start(NewGameRequest(size=9))
    first_session.select_cell(SelectCellRequest(column=0, row=0))
    first_session.request_undo()
    expected = first_session.game
    assert expected is not None
    first_session.request_quit()

    second_session = GameService(repository, config=TEST_SETTINGS, shuffle=keep_order)
    second_session.start(NewGameRequest())
    assert second_session.game is not None
    assert second_session.game.board == expected.board
    assert second_session.game.status == expected.status
    assert second_session.game.history == expected.history
    assert repository.latest_game() is None
