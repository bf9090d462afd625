"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define pseudo-legal move sets for each piece type.
The same move generators answer "is this square attacked?", so attack logic cannot drift from movement logic.

Legality (not leaving your own king in check) is checked later, see legal.py
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol, Self

from src.core.shared_types import Color, PieceType
from src.crosschess.castling import CastlingSide, castling_squares
from src.crosschess.pieces import Piece
from src.crosschess.square import Square

Vector = tuple[int, int]


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def pieces(self) -> list[tuple[Square, Piece]]: ...
    def copy(self) -> Self: ...
    def move_piece(self, move: Move) -> None: ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    castling: Optional[CastlingSide] = None

    def to_notation(self) -> str:
        """ex. '12,3-10,3'. Only used for display / logging"""
        return f"{self.from_square.to_notation()}-{self.to_square.to_notation()}"


@dataclass(frozen=True)
class AcceptedMove:
    """Entry of the move log. Snapshot of the pieces involved, taken before the board was updated."""

    move: Move
    moving_piece: Piece
    captured_piece: Optional[Piece]
    color: Color
    move_number: int
    timestamp: datetime
    eliminated_after: tuple[Color, ...]
    promoted: bool = False


# --- PAWN RULES ---
@dataclass(frozen=True)
class PawnRule:
    """
    Every color pushes its pawns towards the opposite arm of the cross.

    start_line / promotion_line are a row for pawns moving vertically and a column for pawns moving horizontally.
    """

    forward: Vector
    start_line: int
    promotion_line: int

    @property
    def moves_vertically(self) -> bool:
        return self.forward[0] != 0

    def line(self, square: Square) -> int:
        return square.row if self.moves_vertically else square.col

    def capture_deltas(self) -> list[Vector]:
        """Diagonals are 'forward + one step sideways', sideways being perpendicular to the movement axis"""
        d_row, d_col = self.forward
        if self.moves_vertically:
            return [(d_row, -1), (d_row, 1)]
        return [(-1, d_col), (1, d_col)]


PAWN_RULES: dict[Color, PawnRule] = {
    Color.YELLOW: PawnRule(forward=(1, 0), start_line=1, promotion_line=7),
    Color.RED: PawnRule(forward=(-1, 0), start_line=12, promotion_line=6),
    Color.BLUE: PawnRule(forward=(0, 1), start_line=1, promotion_line=7),
    Color.GREEN: PawnRule(forward=(0, -1), start_line=12, promotion_line=6),
}


def is_promotion_square(piece: Piece, square: Square) -> bool:
    """A pawn reaching its color's promotion line (the 8th rank counted from its own arm)"""
    if piece.type != PieceType.PAWN:
        return False
    rule = PAWN_RULES[piece.color]
    return rule.line(square) == rule.promotion_line


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the cross.
    """
    player_color = board.piece(square).color

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_valid():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                # only need to add the first occupied square found if it is an opponent's: then it can be captured.
                if piece_found.color != player_color:
                    moves.append(Move(from_square=square, to_square=target_square))
                break

            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump/step once"""
    player_color = board.piece(square).color

    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_valid():
            continue

        piece_found = board.piece(target_square)
        if piece_found is None or piece_found.color != player_color:
            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (forward depends on the color).
    - It can move by two from its starting line, if both squares are empty
    - takes diagonally
    """
    player_color = board.piece(square).color
    rule = PAWN_RULES[player_color]
    d_row, d_col = rule.forward

    moves: list[Move] = []
    one_step = square.offset(d_row, d_col)
    if one_step.is_valid() and board.piece(one_step) is None:
        moves.append(Move(from_square=square, to_square=one_step))

        two_steps = one_step.offset(d_row, d_col)
        on_start_line = rule.line(square) == rule.start_line
        if on_start_line and two_steps.is_valid() and board.piece(two_steps) is None:
            moves.append(Move(from_square=square, to_square=two_steps))

    for d_row, d_col in rule.capture_deltas():
        target_square = square.offset(d_row, d_col)
        if not target_square.is_valid():
            continue
        piece_found = board.piece(target_square)
        if piece_found is not None and piece_found.color != player_color:
            moves.append(Move(from_square=square, to_square=target_square))
    return moves


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) + candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see candidate_castling_moves).
    """
    return single_step_move(square, board, STRAIGHTS + DIAGONALS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def pseudo_legal_moves(
    board: Board, square: Square, include_castling: bool = False
) -> list[Move]:
    """Moves following the movement pattern of the piece on `square`, ignoring the safety of its own king."""
    piece = board.piece(square)
    if piece is None:
        return []

    moves = MOVEMENT_RULES[piece.type](square, board)
    if include_castling and piece.type == PieceType.KING and not piece.has_moved:
        moves.extend(candidate_castling_moves(square, board))
    return moves


# --- ATTACK ORACLE ---
def is_under_attack(board: Board, square: Square, color: Color) -> bool:
    """
    Is `square` reachable by any piece of the three other colors?
    ---

    Castling is never an attack. Leaving it out also keeps castling -> attack -> castling from recursing.
    """
    for from_square, piece in board.pieces():
        if piece.color == color:
            continue
        attacked = MOVEMENT_RULES[piece.type](from_square, board)
        if any(move.to_square == square for move in attacked):
            return True
    return False


# -- CASTLING MOVES ---
def candidate_castling_moves(square: Square, board: Board) -> list[Move]:
    """
    you are allowed to castle if
    ---

    * Neither the king nor the rook has moved before.
    * You are not currently in check (you cannot castle out of check).
    * All squares between king and rook are empty.
    * The king does not pass through / land on an attacked square.
    """
    king = board.piece(square)
    if king is None or king.type != PieceType.KING or king.has_moved:
        return []

    if is_under_attack(board, square, king.color):
        return []

    moves: list[Move] = []
    for side in CastlingSide:
        squares = castling_squares(board, square, king.color, side)
        if squares is None:
            continue

        # walk the king along its path on a scratch board, one square at the time
        scratch = board.copy()
        current_square = square
        path_attacked = False
        for next_square in squares.king_path():
            scratch.move_piece(Move(current_square, next_square))
            if is_under_attack(scratch, next_square, king.color):
                path_attacked = True
                break
            current_square = next_square

        if not path_attacked:
            moves.append(Move(square, squares.king_to, castling=side))
    return moves
