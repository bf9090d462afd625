"""
Board orientation per player
----

Every player sees their own arm of the cross at the bottom of the screen.
Red sits at the bottom of the actual board, so red's view is the board as is.
The other colors look at a rotated board:

* blue: a quarter turn counter-clockwise
* yellow: a half turn
* green: a quarter turn clockwise

`to_view` maps actual board coordinates to what the player sees, `to_actual` is its exact inverse.
"""

from src.core.shared_types import Color
from src.crosschess.pieces import Piece
from src.crosschess.square import BOARD_DIMENSIONS, Square

# number of counter-clockwise quarter turns
QUARTER_TURNS: dict[Color, int] = {
    Color.RED: 0,
    Color.BLUE: 1,
    Color.YELLOW: 2,
    Color.GREEN: 3,
}

_LAST_INDEX = BOARD_DIMENSIONS[0] - 1


def _rotate_counter_clockwise(square: Square) -> Square:
    return Square(_LAST_INDEX - square.col, square.row)


def _rotate_clockwise(square: Square) -> Square:
    return Square(square.col, _LAST_INDEX - square.row)


def to_view(square: Square, color: Color) -> Square:
    """Actual board coordinates -> coordinates as displayed to the player with `color`"""
    for _ in range(QUARTER_TURNS[color]):
        square = _rotate_counter_clockwise(square)
    return square


def to_actual(square: Square, color: Color) -> Square:
    """Displayed coordinates of the player with `color` -> actual board coordinates"""
    for _ in range(QUARTER_TURNS[color]):
        square = _rotate_clockwise(square)
    return square


def view_position(position: dict[Square, Piece], color: Color) -> dict[Square, Piece]:
    """Rotate a whole board position so the player's home arm is at the bottom."""
    return {to_view(square, color): piece for square, piece in position.items()}
