"""Unit tests for /src/crosschess/legal.py"""

import random

import pytest

from src.core.shared_types import TURN_ORDER, Color
from src.crosschess.board import Board
from src.crosschess.legal import (
    has_legal_move,
    is_putting_yourself_in_check,
    legal_moves,
    legal_moves_for_color,
    simulate_move,
)
from src.crosschess.moves import Move, is_under_attack, pseudo_legal_moves
from src.crosschess.square import Square


def targets(moves: list[Move]) -> set[tuple[int, int]]:
    return {(m.to_square.row, m.to_square.col) for m in moves}


@pytest.mark.parametrize("color", TURN_ORDER)
def test_number_of_opening_moves(color: Color) -> None:
    """8 pawns with a single and a double step + 2 knights with 2 jumps each"""
    assert len(legal_moves_for_color(Board.starting_position(), color)) == 20


def test_pinned_piece_can_only_move_along_the_pin() -> None:
    board = Board.from_codes({(10, 7): "rK", (8, 7): "rR", (3, 7): "yR"})
    moves = targets(legal_moves(board, Square(8, 7)))
    assert moves == {(9, 7), (7, 7), (6, 7), (5, 7), (4, 7), (3, 7)}


def test_king_cannot_step_into_attacked_square() -> None:
    board = Board.from_codes({(10, 7): "rK", (3, 6): "yR"})
    moves = targets(legal_moves(board, Square(10, 7)))
    assert moves == {(9, 7), (11, 7), (9, 8), (10, 8), (11, 8)}


def test_moving_into_check_is_detected() -> None:
    board = Board.from_codes({(10, 7): "rK", (3, 6): "yR"})
    assert is_putting_yourself_in_check(board, Move(Square(10, 7), Square(10, 6)))
    assert not is_putting_yourself_in_check(board, Move(Square(10, 7), Square(10, 8)))


def test_back_rank_mate_has_no_legal_move() -> None:
    board = Board.from_codes(
        {(0, 7): "yK", (1, 6): "yP", (1, 7): "yP", (1, 8): "yP", (0, 3): "rR"}
    )
    assert is_under_attack(board, Square(0, 7), Color.YELLOW)
    assert not has_legal_move(board, Color.YELLOW)
    assert legal_moves_for_color(board, Color.YELLOW) == []


def test_check_that_can_be_answered_is_not_mate() -> None:
    """The knight can block on (0, 5) or take the rook on (0, 3)"""
    board = Board.from_codes(
        {
            (0, 7): "yK",
            (1, 6): "yP",
            (1, 7): "yP",
            (1, 8): "yP",
            (0, 3): "rR",
            (2, 4): "yN",
        }
    )
    assert has_legal_move(board, Color.YELLOW)
    assert set(legal_moves_for_color(board, Color.YELLOW)) == {
        Move(Square(2, 4), Square(0, 5)),
        Move(Square(2, 4), Square(0, 3)),
    }


def test_legal_moves_never_leave_own_king_attacked() -> None:
    """Play random legal moves and check the filter after every one of them"""
    rng = random.Random(7)
    board = Board.starting_position()
    for turn in range(24):
        color = TURN_ORDER[turn % len(TURN_ORDER)]
        if board.find_king(color) is None:
            continue
        moves = legal_moves_for_color(board, color)
        if not moves:
            continue
        for move in moves:
            assert move in pseudo_legal_moves(board, move.from_square, include_castling=True)
            assert not is_putting_yourself_in_check(board, move)
        move = rng.choice(moves)
        board = simulate_move(board, move)
        assert not is_under_attack(board, board.find_king(color), color)
