"""Protocol repository (can implement later for SQL Alchemy / a plain file etc.)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def latest_game(self) -> tuple[GameModel, UUID] | None:
        """Most recently saved game + its ID, if any game was saved at all."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...
