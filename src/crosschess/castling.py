"""
Helpers for implementing Castling rules. Need to be imported by multiple sources.

On the cross board "king side" / "queen side" is not a fixed file as in classical chess.
Red and yellow have their back rank on a row, blue and green on a column,
so the castling direction is defined per color as a vector along the back rank.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from src.core.shared_types import Color, PieceType
from src.crosschess.pieces import Piece
from src.crosschess.square import Square

Vector = tuple[int, int]

# Look this far along the back rank for the castling rook.
ROOK_SEARCH_DISTANCE = 4
# The king moves two squares, so the rook must stand beyond the king's destination.
MIN_ROOK_DISTANCE = 3
KING_CASTLING_STEPS = 2


class CastlingSide(Enum):
    KING_SIDE = "king side"
    QUEEN_SIDE = "queen side"


# The queen stands next to the king on the low-index side for every color,
# so the king side always points towards the higher row/column index.
CASTLING_DIRECTIONS: dict[Color, dict[CastlingSide, Vector]] = {
    Color.RED: {CastlingSide.KING_SIDE: (0, 1), CastlingSide.QUEEN_SIDE: (0, -1)},
    Color.YELLOW: {CastlingSide.KING_SIDE: (0, 1), CastlingSide.QUEEN_SIDE: (0, -1)},
    Color.BLUE: {CastlingSide.KING_SIDE: (1, 0), CastlingSide.QUEEN_SIDE: (-1, 0)},
    Color.GREEN: {CastlingSide.KING_SIDE: (1, 0), CastlingSide.QUEEN_SIDE: (-1, 0)},
}


class Board(Protocol):
    """Just the parts the castling helpers need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    Unlike classical chess these are found on the board, not looked up in a table.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    def king_path(self) -> list[Square]:
        """Squares the king steps onto, in order (destination included)"""
        d_row = (self.king_to.row - self.king_from.row) // KING_CASTLING_STEPS
        d_col = (self.king_to.col - self.king_from.col) // KING_CASTLING_STEPS
        return [
            self.king_from.offset(d_row * step, d_col * step)
            for step in range(1, KING_CASTLING_STEPS + 1)
        ]


def castling_direction(color: Color, side: CastlingSide) -> Vector:
    return CASTLING_DIRECTIONS[color][side]


def find_castling_rook(
    board: Board, king_square: Square, color: Color, direction: Vector
) -> Optional[Square]:
    """
    Walk along the back rank away from the king.
    ---

    Returns the square of an unmoved rook of the same color when every square in between is empty
    and the rook stands far enough away for the king to jump two squares. Otherwise None.
    """
    d_row, d_col = direction
    for distance in range(1, ROOK_SEARCH_DISTANCE + 1):
        square = king_square.offset(d_row * distance, d_col * distance)
        if not square.is_valid():
            return None

        piece = board.piece(square)
        if piece is None:
            continue

        # first piece found: must be our own rook that never moved
        is_own_rook = piece.type == PieceType.ROOK and piece.color == color
        if is_own_rook and not piece.has_moved and distance >= MIN_ROOK_DISTANCE:
            return square
        return None
    return None


def castling_squares(
    board: Board, king_square: Square, color: Color, side: CastlingSide
) -> Optional[CastlingSquares]:
    """Find out where king and rook go. None if there is no rook to castle with."""
    direction = castling_direction(color, side)
    rook_square = find_castling_rook(board, king_square, color, direction)
    if rook_square is None:
        return None

    d_row, d_col = direction
    king_to = king_square.offset(
        d_row * KING_CASTLING_STEPS, d_col * KING_CASTLING_STEPS
    )
    # the rook lands on the square the king jumped over
    rook_to = king_to.offset(-d_row, -d_col)
    return CastlingSquares(
        king_from=king_square, king_to=king_to, rook_from=rook_square, rook_to=rook_to
    )
