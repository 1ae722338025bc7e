"""
Exceptions raised at the edges of the rules engine.

NOTE: Breaking the rules of chess is NOT exceptional. `Game.make_move` reports an illegal move by returning None.
These are for input that cannot even be interpreted (bad square names, corrupted saved games, ...).
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from chessrules.chess.legality import MoveRejection


class ChessRulesError(Exception):
    """Base class, so callers can catch everything coming out of this package at once."""


class InvalidSquareError(ChessRulesError, ValueError):
    """Text could not be interpreted as a square (or move) in algebraic notation."""


class InvalidStateError(ChessRulesError, ValueError):
    """A serialized game state is structurally malformed."""


class IllegalMoveError(ChessRulesError):
    """Raised by the convenience API (`Game.play`) when the rules reject a move."""

    def __init__(self, message: str, reason: Optional["MoveRejection"] = None) -> None:
        super().__init__(message)
        self.reason = reason
