"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase, digits

from chessrules.core.config import BOARD_DIMENSIONS
from chessrules.core.exceptions import InvalidSquareError

FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = digits[1 : BOARD_DIMENSIONS[1] + 1]


@dataclass(frozen=True)
class Square:
    """
    Zero-based coordinates: file 0-7 is a-h, rank 0-7 is 1-8.

    NOTE: Squares off the board can be created on purpose (stepping off the edge while raycasting).
    They are never an error, board queries simply treat them as invalid.
    """

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if not is_valid_algebraic(sq):
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        file = FILE_NAMES.index(sq[0])
        rank = RANK_NAMES.index(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        if not self.is_within_bounds():
            raise InvalidSquareError(f"{self} does not lie on the board.")
        return f"{FILE_NAMES[self.file]}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)

    def is_light(self) -> bool:
        """a1 is a dark square"""
        return (self.file + self.rank) % 2 == 1


def is_valid_algebraic(sq: str) -> bool:
    """Valid square should be exactly a letter for the file + a digit for the rank ("e4", not "e04")"""
    return len(sq) == 2 and sq[0] in FILE_NAMES and sq[1] in RANK_NAMES


def all_squares() -> list[Square]:
    """Every square on the board, a1, b1, ..., h8"""
    return [
        Square(file, rank)
        for rank in range(BOARD_DIMENSIONS[1])
        for file in range(BOARD_DIMENSIONS[0])
    ]
