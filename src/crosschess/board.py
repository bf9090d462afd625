"""The Game board implements all rules that effect the `position` (the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.shared_types import TURN_ORDER, Color, PieceType
from src.crosschess.castling import CastlingSquares, castling_squares
from src.crosschess.moves import Move
from src.crosschess.pieces import BACK_RANK, Piece
from src.crosschess.square import BOARD_DIMENSIONS, Square

# Where each color sets up: (back rank squares, pawn squares), both in BACK_RANK order
HOME_ARMS: dict[Color, tuple[list[Square], list[Square]]] = {
    Color.YELLOW: (
        [Square(0, 3 + i) for i in range(8)],
        [Square(1, 3 + i) for i in range(8)],
    ),
    Color.BLUE: (
        [Square(3 + i, 0) for i in range(8)],
        [Square(3 + i, 1) for i in range(8)],
    ),
    Color.RED: (
        [Square(13, 3 + i) for i in range(8)],
        [Square(12, 3 + i) for i in range(8)],
    ),
    Color.GREEN: (
        [Square(3 + i, 13) for i in range(8)],
        [Square(3 + i, 12) for i in range(8)],
    ),
}


@dataclass
class Board:
    """Only occupied squares are stored. A square missing from `position` is empty."""

    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def starting_position(cls) -> Self:
        """Every color gets the classical set of 16 pieces on its own arm of the cross."""
        board = cls()
        for color in TURN_ORDER:
            back_rank, pawn_rank = HOME_ARMS[color]
            for piece_type, square in zip(BACK_RANK, back_rank):
                board.place_piece(Piece(piece_type, color), square)
            for square in pawn_rank:
                board.place_piece(Piece(PieceType.PAWN, color), square)
        return board

    @classmethod
    def from_codes(cls, layout: dict[tuple[int, int], str]) -> Self:
        """
        Convenience constructor: {(row, col): code}.

        ex. {(0, 7): "yK", (13, 7): "rK"} creates a board with only the yellow and the red king
        """
        board = cls()
        for (row, col), code in layout.items():
            board.place_piece(Piece.from_code(code), Square(row, col))
        return board

    def to_text(self) -> str:
        """
        Text diagram, one line per row. Two characters per square:
        piece code, '..' for an empty square, blanks for the cut-off corners.
        """
        lines: list[str] = []
        for row in range(BOARD_DIMENSIONS[0]):
            cells: list[str] = []
            for col in range(BOARD_DIMENSIONS[1]):
                square = Square(row, col)
                if not square.is_valid():
                    cells.append("  ")
                    continue
                piece = self.piece(square)
                cells.append(piece.to_code() if piece else "..")
            lines.append(" ".join(cells).rstrip())
        return "\n".join(lines)

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def pieces(self) -> list[tuple[Square, Piece]]:
        return list(self.position.items())

    def copy(self) -> Self:
        """Pieces are immutable, so sharing them between copies is safe."""
        return type(self)(dict(self.position))

    def place_piece(self, piece: Piece, square: Square) -> None:
        if not square.is_valid():
            raise ValueError(f"Cannot place a piece outside of the board: {square}")
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def move_piece(self, move: Move) -> Optional[Piece]:
        """Update the position on the board. Returns whatever stood on the target square."""
        piece_that_moved = self.position.pop(move.from_square)
        captured = self.position.get(move.to_square)
        self.position[move.to_square] = piece_that_moved
        return captured

    def castling_squares(self, move: Move) -> Optional[CastlingSquares]:
        """Look up the rook belonging to a castling move. None if it is not (or no longer) there."""
        king = self.piece(move.from_square)
        if move.castling is None or king is None:
            return None
        squares = castling_squares(self, move.from_square, king.color, move.castling)
        if squares is None or squares.king_to != move.to_square:
            return None
        return squares

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.position.items() if piece.color == color]

    def find_king(self, color: Color) -> Optional[Square]:
        return next(
            (
                square
                for square, piece in self.position.items()
                if piece.color == color and piece.type == PieceType.KING
            ),
            None,
        )

    def remove_color(self, color: Color) -> list[Piece]:
        """Sweep every piece of an eliminated color off the board."""
        squares = self.locate_color(color)
        return [self.position.pop(square) for square in squares]
