from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):  # load all key=value pairs from .env
    """Game and infrastructure settings"""

    BOARD_SIZE: int = Field(default=9, ge=5)
    INITIAL_BLOCKED_PROBABILITY: float = Field(default=0.1, ge=0.0, lt=1.0)
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'circle_the_dot.db'}"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "circle_errors.log"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
