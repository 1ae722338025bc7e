"""Castling: rights tracking, and whether castling is allowed right now."""

from dataclasses import dataclass, replace
from typing import Optional, Self

from chessrules.chess.attacks import is_king_in_check, is_square_attacked_by
from chessrules.chess.board import Board
from chessrules.chess.pieces import Piece
from chessrules.chess.square import Square
from chessrules.core.shared_types import CastlingSide, Color, PieceType


@dataclass(frozen=True)
class CastlingRights:
    """
    The four independent castling rights.

    Rights can only ever be lost during a game, there is no method to grant one back.
    """

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    @classmethod
    def none(cls) -> Self:
        return cls(False, False, False, False)

    def has(self, color: Color, side: CastlingSide) -> bool:
        return getattr(self, _field_name(color, side))

    def has_any(self, color: Color) -> bool:
        return any(self.has(color, side) for side in CastlingSide)

    def revoke(self, color: Color, side: Optional[CastlingSide] = None) -> Self:
        """Revoke one right, or both rights of a color if no side is given."""
        sides = [side] if side is not None else list(CastlingSide)
        return replace(self, **{_field_name(color, s): False for s in sides})

    def to_signature(self) -> str:
        """KQkq notation (as in FEN). A '-' once all rights have been revoked."""
        characters = "".join(
            char
            for char, held in [
                ("K", self.white_kingside),
                ("Q", self.white_queenside),
                ("k", self.black_kingside),
                ("q", self.black_queenside),
            ]
            if held
        )
        return characters or "-"


def _field_name(color: Color, side: CastlingSide) -> str:
    return f"{color.value}_{side.value}"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        return cls(
            Square.from_algebraic(k_from),
            Square.from_algebraic(k_to),
            Square.from_algebraic(r_from),
            Square.from_algebraic(r_to),
        )

    def between_king_and_rook(self) -> list[Square]:
        """Squares that must be empty: strictly between king and rook."""
        return _squares_on_rank(self.king_from, self.rook_from, inclusive=False)

    def king_path(self) -> list[Square]:
        """Squares the king stands on / passes through / lands on. None of them may be attacked."""
        return _squares_on_rank(self.king_from, self.king_to, inclusive=True)


def _squares_on_rank(from_square: Square, to_square: Square, inclusive: bool) -> list[Square]:
    step = 1 if to_square.file > from_square.file else -1
    files = range(from_square.file, to_square.file + step, step)
    squares = [Square(file, from_square.rank) for file in files]
    return squares if inclusive else squares[1:-1]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def home_rank(color: Color) -> int:
    return CASTLING_RULES[(color, CastlingSide.KINGSIDE)].king_from.rank


def is_castling_candidate(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    A king moving two files sideways on its home rank.

    Structural recognition only: whether it is allowed is up to `can_castle`.
    """
    piece = board.piece_at(from_square)
    if piece is None or piece.type != PieceType.KING:
        return False
    return (
        from_square.rank == home_rank(piece.color)
        and to_square.rank == from_square.rank
        and abs(to_square.file - from_square.file) == 2
    )


def castling_side(color: Color, from_square: Square, to_square: Square) -> Optional[CastlingSide]:
    """Which castling move (if any) moves the king from `from_square` to `to_square`"""
    for side in CastlingSide:
        squares = CASTLING_RULES[(color, side)]
        if (squares.king_from, squares.king_to) == (from_square, to_square):
            return side
    return None


def can_castle(
    board: Board, color: Color, side: CastlingSide, rights: CastlingRights
) -> bool:
    """
    **you are allowed to castle if**

    * Castling rights in that direction are not yet revoked.
    * King and rook still stand on their starting squares.
    * All squares in between king and rook are empty.
    * You are not currently in check (you cannot castle out of check).
    * The king does not pass through, or land on, a square under attack.
    """
    if not rights.has(color, side):
        return False

    squares = CASTLING_RULES[(color, side)]
    if board.piece_at(squares.king_from) != Piece(PieceType.KING, color):
        return False
    if board.piece_at(squares.rook_from) != Piece(PieceType.ROOK, color):
        return False

    if not all(board.is_empty(square) for square in squares.between_king_and_rook()):
        return False

    if is_king_in_check(board, color):
        return False

    return not any(
        is_square_attacked_by(board, square, color.opponent)
        for square in squares.king_path()
    )


def legal_castling_sides(
    board: Board, color: Color, rights: CastlingRights
) -> list[CastlingSide]:
    if not rights.has_any(color):
        return []
    return [side for side in CastlingSide if can_castle(board, color, side, rights)]


def apply_castling(board: Board, color: Color, side: CastlingSide) -> Board:
    """Move both the King and the Rook, in a single board transition"""
    squares = CASTLING_RULES[(color, side)]
    king = board.piece_at(squares.king_from)
    rook = board.piece_at(squares.rook_from)
    return board.with_pieces(
        {
            squares.king_from: None,
            squares.rook_from: None,
            squares.king_to: king,
            squares.rook_to: rook,
        }
    )


def update_castling_rights(
    rights: CastlingRights,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    captured: Optional[Piece] = None,
) -> CastlingRights:
    """
    Checks which rights should get revoked after ANY move (not only castling moves)
    ----

    1. If you are moving your king (castling included) --> revoke both
    2. If you are moving a rook away from its starting square --> revoke the right on that side
    3. If you are taking your opponent's rook on its starting square --> revoke your opponent's right on that side
    """
    if piece.type == PieceType.KING:
        rights = rights.revoke(piece.color)

    if piece.type == PieceType.ROOK:
        for side in CastlingSide:
            if from_square == CASTLING_RULES[(piece.color, side)].rook_from:
                rights = rights.revoke(piece.color, side)

    if captured is not None and captured.type == PieceType.ROOK:
        for side in CastlingSide:
            if to_square == CASTLING_RULES[(captured.color, side)].rook_from:
                rights = rights.revoke(captured.color, side)

    return rights
