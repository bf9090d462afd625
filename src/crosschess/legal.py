"""
Legal move filter
----

A pseudo-legal move is legal when it does not put (or leave) the mover's own king in check.
This module is the single authority on legality: used to validate submitted moves,
to highlight moves in a UI and to enumerate the options of the automated player.
"""

from typing import Optional

from src.core.shared_types import Color
from src.crosschess.board import Board
from src.crosschess.moves import Move, is_under_attack, pseudo_legal_moves
from src.crosschess.square import Square


def simulate_move(board: Board, move: Move) -> Optional[Board]:
    """
    Play the move on a scratch copy of the board.

    Castling also relocates the rook, exactly like the real move does. Returns None
    if the rook cannot be found (the castling move cannot be played).
    """
    scratch = board.copy()
    if move.castling is not None:
        squares = scratch.castling_squares(move)
        if squares is None:
            return None
        scratch.move_piece(Move(squares.rook_from, squares.rook_to))
    scratch.move_piece(move)
    return scratch


def is_putting_yourself_in_check(board: Board, move: Move) -> bool:
    """Return True if the move leaves the mover's king attacked (or the move cannot be simulated at all)."""
    mover = board.piece(move.from_square)
    if mover is None:
        return True

    after_move = simulate_move(board, move)
    if after_move is None:
        return True

    king_square = after_move.find_king(mover.color)
    if king_square is None:
        # should not happen with correct bookkeeping. Never allow a move that loses track of the king.
        return True
    return is_under_attack(after_move, king_square, mover.color)


def legal_moves(board: Board, square: Square) -> list[Move]:
    """Legal moves of the piece standing on `square` (castling included)."""
    candidates = pseudo_legal_moves(board, square, include_castling=True)
    return [move for move in candidates if not is_putting_yourself_in_check(board, move)]


def legal_moves_for_color(board: Board, color: Color) -> list[Move]:
    """Union of the legal moves of every piece of one color"""
    moves: list[Move] = []
    for square in board.locate_color(color):
        moves.extend(legal_moves(board, square))
    return moves


def has_legal_move(board: Board, color: Color) -> bool:
    """Stops at the first legal move found (checkmate detection only needs a yes/no)"""
    return any(legal_moves(board, square) for square in board.locate_color(color))
