"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Color, PieceType

# Two-letter codes: <color><piece>, e.g. "yK" is the yellow king, "bN" a blue knight.
CODE_TO_COLOR: dict[str, Color] = {
    "r": Color.RED,
    "b": Color.BLUE,
    "y": Color.YELLOW,
    "g": Color.GREEN,
}
COLOR_TO_CODE: dict[Color, str] = {value: key for key, value in CODE_TO_COLOR.items()}

CODE_TO_PIECE: dict[str, PieceType] = {
    "P": PieceType.PAWN,
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}
PIECE_TO_CODE: dict[PieceType, str] = {
    value: key for key, value in CODE_TO_PIECE.items()
}

# Back rank, read from the low index to the high index of a player's home arm
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# No underpromotion in this variant
PROMOTION_PIECE = PieceType.QUEEN


@dataclass(frozen=True)
class Piece:
    """
    A piece never changes in place. Moving / promoting returns a new Piece,
    so snapshots kept in the move log stay as they were.
    """

    type: PieceType
    color: Color
    has_moved: bool = False

    @classmethod
    def from_code(cls, code: str) -> Self:
        """'yK' -> yellow king. Pieces created from codes have not moved yet."""
        return cls(CODE_TO_PIECE[code[1]], CODE_TO_COLOR[code[0]])

    def to_code(self) -> str:
        return f"{COLOR_TO_CODE[self.color]}{PIECE_TO_CODE[self.type]}"

    def moved(self) -> Self:
        return replace(self, has_moved=True)

    def promote_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type)
