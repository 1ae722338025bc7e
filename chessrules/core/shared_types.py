"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GameResult(StrEnum):
    """Outcome surfaced to collaborators (UI, persistence, notation layer)."""

    ONGOING = "ongoing"
    WHITE_WINS = "white wins"
    BLACK_WINS = "black wins"
    DRAW = "draw"


class Termination(StrEnum):
    """Why a game ended. Finer grained than GameResult (several ways to draw)."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient material"
    FIFTY_MOVE_RULE = "draw by 50 moves"
    THREEFOLD_REPETITION = "draw by repetition"


class CastlingSide(StrEnum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"
