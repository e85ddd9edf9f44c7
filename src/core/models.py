"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the persistence layer and the domain layer send/receive a GameModel, so neither needs to know about the other's internals.
"""

from dataclasses import dataclass

# One undo/redo entry: {"layout": <board layout string>, "status": <game status>}
HistoryEntry = dict[str, str]


@dataclass
class GameModel:
    """Transport-safe representation of a game used between Service, DB, and Game layers."""

    layout: str
    status: str
    undo_history: list[HistoryEntry]
    redo_history: list[HistoryEntry]
