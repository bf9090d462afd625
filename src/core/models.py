"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Type aliases to make MatchModel easier to read
PieceColor = str
PieceCode = str
SquareNotation = str


@dataclass
class MoveModel:
    """One entry of the move log, in transport-safe form."""

    from_square: SquareNotation
    to_square: SquareNotation
    piece: PieceCode
    captured: Optional[PieceCode]
    color: PieceColor
    move_number: int
    timestamp: datetime
    eliminated_after: list[PieceColor] = field(default_factory=list)
    castling: bool = False
    promoted: bool = False


@dataclass
class MatchModel:
    """Transport-safe representation of a four-player match used between API, Service, DB, and Game layers."""

    position: dict[SquareNotation, PieceCode]
    current_player: PieceColor
    captured_pieces: dict[PieceColor, list[PieceCode]]
    players_in_check: list[PieceColor]
    eliminated_players: list[PieceColor]
    winner: Optional[PieceColor]
    moves: list[MoveModel]
    status: str


@dataclass
class ArchivedMatch:
    """A finished match as stored by the archive: who played which color, and how it went."""

    room_id: str
    room_name: str
    players: dict[PieceColor, str]
    match: MatchModel
