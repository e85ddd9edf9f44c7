"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.circle.layout import MIN_BOARD_SIZE
from src.core.exceptions import InvalidRequestError


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    size: Optional[int] = None

    @field_validator("size")
    @classmethod
    def validate_size(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value

        if value < MIN_BOARD_SIZE:
            raise InvalidRequestError(
                f"Board size must be at least {MIN_BOARD_SIZE}, got {value}."
            )
        return value


class SelectCellRequest(BaseModel):
    column: int
    row: int

    @field_validator(*["column", "row"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a coordinate on the board."
            )
        return value


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    size: int
    layout: str
    status: str
    move_count: int
    marker: tuple[int, int]
    can_undo: bool
    can_redo: bool
    score: Optional[int]
