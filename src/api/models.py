"""Requests and Response models"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import MatchModel, MoveModel
from src.core.shared_types import Color, Status
from src.crosschess.square import Square

PieceCode = str
SquareNotation = str


class SquareModel(BaseModel):
    row: int
    col: int

    @model_validator(mode="after")
    def validate_on_board(self) -> "SquareModel":
        if not self.to_square().is_valid():
            raise InvalidRequestError(
                f"Square ({self.row}, {self.col}) is not part of the board."
            )
        return self

    @classmethod
    def from_square(cls, square: Square) -> "SquareModel":
        return cls(row=square.row, col=square.col)

    def to_square(self) -> Square:
        return Square(self.row, self.col)


# --- REQUEST MODELS ---
class CreateRoomRequest(BaseModel):
    room_name: str
    player_name: str

    @field_validator(*["room_name", "player_name"])
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Names cannot be empty.")
        return value


class JoinRoomRequest(BaseModel):
    room_id: str
    player_name: str

    @field_validator("player_name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Player name cannot be empty.")
        return value


class PlayerRequest(BaseModel):
    """Any request a seated player makes about their room (rejoin, leave, start, reset, view)."""

    room_id: str
    player_id: str


class MoveRequest(BaseModel):
    room_id: str
    player_id: str
    from_square: SquareModel
    to_square: SquareModel


class LegalMovesRequest(BaseModel):
    room_id: str
    square: SquareModel


class GetMatchRequest(BaseModel):
    room_id: str


# --- RESPONSE MODELS ---
class PlayerInfo(BaseModel):
    """Public player info. Everything except how they are connected."""

    player_id: str
    name: str
    color: Color
    is_connected: bool


class RoomResponse(BaseModel):
    room_id: str
    name: str
    status: Status
    players: list[PlayerInfo]
    created_at: datetime
    # the player the response is addressed to (set on create / join / rejoin)
    player: Optional[PlayerInfo] = None


class MoveRecordResponse(BaseModel):
    from_square: SquareNotation
    to_square: SquareNotation
    piece: PieceCode
    captured: Optional[PieceCode]
    color: Color
    move_number: int
    timestamp: datetime
    eliminated_after: list[Color]
    castling: bool
    promoted: bool

    @classmethod
    def from_model(cls, model: MoveModel) -> "MoveRecordResponse":
        return cls(
            from_square=model.from_square,
            to_square=model.to_square,
            piece=model.piece,
            captured=model.captured,
            color=Color(model.color),
            move_number=model.move_number,
            timestamp=model.timestamp,
            eliminated_after=[Color(c) for c in model.eliminated_after],
            castling=model.castling,
            promoted=model.promoted,
        )


class MatchStateResponse(BaseModel):
    room_id: str
    status: Status
    position: dict[SquareNotation, PieceCode]
    current_player: Color
    captured_pieces: dict[Color, list[PieceCode]]
    players_in_check: list[Color]
    eliminated_players: list[Color]
    winner: Optional[Color]
    move_history: list[MoveRecordResponse]

    @classmethod
    def from_model(
        cls, room_id: str, model: MatchModel, status: Optional[Status] = None
    ) -> "MatchStateResponse":
        """`status` overrides the match status (a room that has not started yet is still waiting for players)"""
        return cls(
            room_id=room_id,
            status=status or Status(model.status),
            position=model.position,
            current_player=Color(model.current_player),
            captured_pieces={
                Color(color): pieces for color, pieces in model.captured_pieces.items()
            },
            players_in_check=[Color(c) for c in model.players_in_check],
            eliminated_players=[Color(c) for c in model.eliminated_players],
            winner=Color(model.winner) if model.winner else None,
            move_history=[MoveRecordResponse.from_model(m) for m in model.moves],
        )


class MoveResponse(BaseModel):
    """Either accepted (with the move and the new state) or rejected with a reason. Nothing else leaks."""

    room_id: str
    accepted: bool
    reason: Optional[str] = None
    move: Optional[MoveRecordResponse] = None
    state: Optional[MatchStateResponse] = None


class LegalMovesResponse(BaseModel):
    room_id: str
    square: SquareModel
    legal_moves: list[SquareModel]


class BoardViewResponse(BaseModel):
    """The position as seen by one player: their home arm at the bottom."""

    room_id: str
    color: Color
    position: dict[SquareNotation, PieceCode]
