"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

BOARD_DIMENSIONS = (14, 14)

# The board is a cross: a full-width middle band plus two arms (top/bottom).
# Each entry is (rows, cols). The 3x3 corners are not part of the board.
PLAYABLE_REGION: tuple[tuple[range, range], ...] = (
    (range(0, 3), range(3, 11)),
    (range(3, 11), range(0, 14)),
    (range(11, 14), range(3, 11)),
)


@dataclass(frozen=True, order=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_notation(cls, sq: str) -> Square:
        """'row,col' e.g. '13,7' gets converted to Square(13, 7)"""
        row, col = sq.split(",")
        return cls(int(row), int(col))

    def to_notation(self) -> str:
        return f"{self.row},{self.col}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_valid(self) -> bool:
        """On the 14x14 grid AND inside the cross. The only squares pieces may ever stand on."""
        if not self.is_within_bounds():
            return False
        return any(
            self.row in rows and self.col in cols for rows, cols in PLAYABLE_REGION
        )

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)


def playable_squares() -> list[Square]:
    """All squares of the cross, row by row."""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
        if Square(row, col).is_valid()
    ]
