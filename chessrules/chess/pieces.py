"""Defines the types of chess pieces"""

from dataclasses import dataclass
from typing import Self

from chessrules.core.shared_types import Color, PieceType

SYMBOL_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_SYMBOL: dict[PieceType, str] = {
    value: key for key, value in SYMBOL_TO_PIECE.items()
}

MINOR_PIECES = frozenset({PieceType.KNIGHT, PieceType.BISHOP})

# The king has no material value
PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_symbol(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = SYMBOL_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def symbol(self) -> str:
        return (
            PIECE_TO_SYMBOL[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_SYMBOL[self.type]
        )

    def promoted(self, new_type: PieceType) -> Self:
        """Pieces are values: promotion hands back a new piece of the same color."""
        return type(self)(new_type, self.color)
