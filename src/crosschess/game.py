"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of four-player chess:
validating and applying moves, and the turn / check / elimination state machine that runs after every move.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Self

from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    PlayerEliminatedError,
)
from src.core.models import MatchModel, MoveModel
from src.core.shared_types import TURN_ORDER, Color, Status
from src.crosschess.board import Board
from src.crosschess.legal import has_legal_move, legal_moves, legal_moves_for_color
from src.crosschess.moves import AcceptedMove, Move, is_promotion_square, is_under_attack
from src.crosschess.pieces import PROMOTION_PIECE, Piece
from src.crosschess.square import Square

logger = logging.getLogger(__name__)

# Rejections do not tell the player why a move is illegal
INVALID_MOVE = "Invalid move"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_color(color: Color, eliminated: list[Color]) -> Color:
    """
    Next color in turn order, skipping eliminated colors.

    The scan is bounded: if every other color is eliminated, the same color is returned.
    """
    index = TURN_ORDER.index(color)
    for step in range(1, len(TURN_ORDER) + 1):
        candidate = TURN_ORDER[(index + step) % len(TURN_ORDER)]
        if candidate not in eliminated:
            return candidate
    return color


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    current_player: Color = Color.RED
    captured_pieces: dict[Color, list[Piece]] = field(
        default_factory=lambda: {color: [] for color in TURN_ORDER}
    )
    players_in_check: set[Color] = field(default_factory=set)
    # kept in the order the colors got eliminated. Only ever grows.
    eliminated_players: list[Color] = field(default_factory=list)
    winner: Optional[Color] = None
    moves: list[AcceptedMove] = field(default_factory=list)

    @classmethod
    def new_game(cls) -> Self:
        """Fresh board, red to move, empty logs."""
        return cls(board=Board.starting_position())

    @property
    def status(self) -> Status:
        return Status.FINISHED if self.winner is not None else Status.IN_PROGRESS

    @property
    def active_players(self) -> list[Color]:
        return [color for color in TURN_ORDER if color not in self.eliminated_players]

    def to_model(self) -> MatchModel:
        """Encode into a format the Service layer uses"""
        return MatchModel(
            position={
                square.to_notation(): piece.to_code()
                for square, piece in sorted(self.board.pieces())
            },
            current_player=self.current_player.value,
            captured_pieces={
                color.value: [piece.to_code() for piece in pieces]
                for color, pieces in self.captured_pieces.items()
            },
            players_in_check=[c.value for c in TURN_ORDER if c in self.players_in_check],
            eliminated_players=[color.value for color in self.eliminated_players],
            winner=self.winner.value if self.winner else None,
            moves=[move_to_model(move) for move in self.moves],
            status=self.status.value,
        )

    def legal_moves(self, square: Square) -> list[Move]:
        """
        Legal moves of whichever piece stands on `square`.
        ----

        Not restricted to the player to move: a UI can highlight moves of any piece.
        Empty squares and finished games have no moves.
        """
        if self.status != Status.IN_PROGRESS:
            return []
        return legal_moves(self.board, square)

    def legal_moves_for(self, color: Color) -> list[Move]:
        """Every legal move of one color (what the automated player picks from)"""
        if self.status != Status.IN_PROGRESS or color in self.eliminated_players:
            return []
        return legal_moves_for_color(self.board, color)

    def make_move(self, from_square: Square, to_square: Square, color: Color) -> AcceptedMove:
        """
        Attempt to make a move
        -----

        1. the game must still be in progress, the color must still be playing, and it must be its turn
        2. the origin must hold a piece of that color and the target must be one of its legal moves
        3. update the board (capture bookkeeping, castling rook, promotion)
        4. run the check / elimination state machine and pass the turn
        5. append the move to the log

        Any rejection raises before anything is changed.
        """
        self._assert_can_move(color)

        move = self._find_legal_move(from_square, to_square, color)
        moving_piece = self.board.piece(from_square)
        assert moving_piece is not None

        captured_piece, promoted = self._update_board(move, moving_piece)
        if captured_piece is not None:
            self.captured_pieces[color].append(captured_piece)

        self._update_game_status(mover=color)

        accepted_move = AcceptedMove(
            move=move,
            moving_piece=moving_piece,
            captured_piece=captured_piece,
            color=color,
            move_number=len(self.moves) + 1,
            timestamp=utc_now(),
            eliminated_after=tuple(self.eliminated_players),
            promoted=promoted,
        )
        self.moves.append(accepted_move)
        logger.debug(
            f"Move {accepted_move.move_number}: {color} {move.to_notation()}"
        )
        return accepted_move

    # -- PRIVATE HELPERS ---
    def _assert_can_move(self, color: Color) -> None:
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        if color in self.eliminated_players:
            raise PlayerEliminatedError(f"Player {color} has been eliminated.")

        if color != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player} to make a move first."
            )

    def _find_legal_move(self, from_square: Square, to_square: Square, color: Color) -> Move:
        piece = self.board.piece(from_square)
        if piece is None or piece.color != color:
            logger.info(f"Rejected {color}: no own piece on {from_square.to_notation()}")
            raise IllegalMoveError(INVALID_MOVE)

        for move in legal_moves(self.board, from_square):
            if move.to_square == to_square:
                return move

        logger.info(
            f"Rejected {color}: {from_square.to_notation()}-{to_square.to_notation()} is not legal"
        )
        raise IllegalMoveError(INVALID_MOVE)

    def _update_board(self, move: Move, moving_piece: Piece) -> tuple[Optional[Piece], bool]:
        """
        Call for the proper updates of the Board's position
        ---

        Returns the captured piece (if any) and whether the pawn got promoted.
        """
        captured_piece = self.board.piece(move.to_square)
        new_piece = moving_piece.moved()

        # castling move must displace two pieces on the board, but just adds one entry to the move log
        if move.castling is not None:
            squares = self.board.castling_squares(move)
            # legal_moves() already found this rook
            assert squares is not None
            rook = self.board.remove_piece(squares.rook_from)
            assert rook is not None
            self.board.place_piece(rook.moved(), squares.rook_to)

        promoted = is_promotion_square(new_piece, move.to_square)
        if promoted:
            new_piece = new_piece.promote_to(PROMOTION_PIECE)

        self.board.remove_piece(move.from_square)
        self.board.place_piece(new_piece, move.to_square)
        return captured_piece, promoted

    def _update_game_status(self, mover: Color) -> None:
        """
        Check / elimination state machine, run once after every accepted move.
        ---

        For every color still playing, in turn order:
        1. no king on the board (it got captured) -> eliminated
        2. king attacked -> in check
        3. in check without a single legal move -> checkmate -> eliminated

        Eliminated colors have all of their pieces removed from the board.
        Then the winner is decided (one color left) or the turn passes on.
        """
        players_in_check: set[Color] = set()
        for color in TURN_ORDER:
            if color in self.eliminated_players:
                continue

            king_square = self.board.find_king(color)
            if king_square is None:
                self._eliminate(color, reason="king lost")
                continue

            if not is_under_attack(self.board, king_square, color):
                continue

            players_in_check.add(color)
            if not has_legal_move(self.board, color):
                players_in_check.discard(color)
                self._eliminate(color, reason="checkmate")

        self.players_in_check = players_in_check

        remaining = self.active_players
        if len(remaining) == 1:
            self.winner = remaining[0]
            self.current_player = self.winner
            logger.info(f"{self.winner} wins the game")
            return

        self.current_player = next_color(mover, self.eliminated_players)

    def _eliminate(self, color: Color, reason: str) -> None:
        removed = self.board.remove_color(color)
        self.eliminated_players.append(color)
        logger.info(f"{color} eliminated ({reason}), {len(removed)} pieces removed")


def move_to_model(accepted_move: AcceptedMove) -> MoveModel:
    move = accepted_move.move
    return MoveModel(
        from_square=move.from_square.to_notation(),
        to_square=move.to_square.to_notation(),
        piece=accepted_move.moving_piece.to_code(),
        captured=(
            accepted_move.captured_piece.to_code()
            if accepted_move.captured_piece
            else None
        ),
        color=accepted_move.color.value,
        move_number=accepted_move.move_number,
        timestamp=accepted_move.timestamp,
        eliminated_after=[color.value for color in accepted_move.eliminated_after],
        castling=move.castling is not None,
        promoted=accepted_move.promoted,
    )
