"""
Wire the layers together for a front end.

The front end (whatever draws the board) calls `create_service` once at startup,
passing itself as the view, and then forwards the player's clicks to the returned service.
"""

from typing import Optional

from src.core.config import settings
from src.core.logger_config import configure_logging
from src.db.database import SessionLocal, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.game_service import GameService, GameView


def create_service(view: Optional[GameView] = None) -> GameService:
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    # Create database tables
    init_db()
    repository = SQLGameRepository(SessionLocal())
    return GameService(repository, view, settings)
