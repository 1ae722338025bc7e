"""
Attack detection

`is_square_attacked_by` and `is_king_in_check` are what the rules are built on.
The rest (checking pieces, double check, pins, blocking squares, check resolution) are tactical queries for
UI / analysis collaborators. Move legality does NOT depend on them: legality.py simulates the move instead.
"""

from typing import Optional

from chessrules.chess.board import Board
from chessrules.chess.moves import piece_attacks_square, simulate_move
from chessrules.chess.square import Square
from chessrules.core.shared_types import Color, PieceType


def is_square_attacked_by(board: Board, square: Square, color: Color) -> bool:
    """True if any piece of `color` attacks `square`"""
    return any(
        piece_attacks_square(board, attacker, square)
        for attacker in board.squares_of(color)
    )


def is_king_in_check(board: Board, color: Color) -> bool:
    """
    Find the king of the given color and test whether the opponent attacks it.

    NOTE: a board without that king reports "not in check".
    """
    king_square = board.find_king(color)
    if king_square is None:
        return False
    return is_square_attacked_by(board, king_square, color.opponent)


def attackers_of(board: Board, square: Square, color: Color) -> list[Square]:
    """All squares holding a piece of `color` that attacks `square`"""
    return [
        attacker
        for attacker in board.squares_of(color)
        if piece_attacks_square(board, attacker, square)
    ]


def checking_pieces(board: Board, color: Color) -> list[Square]:
    """The opponent's pieces giving check to the king of `color`"""
    king_square = board.find_king(color)
    if king_square is None:
        return []
    return attackers_of(board, king_square, color.opponent)


def is_double_check(board: Board, color: Color) -> bool:
    return len(checking_pieces(board, color)) >= 2


def is_pinned(board: Board, square: Square, color: Color) -> bool:
    """
    A piece is pinned if taking it off the board exposes its own king to a new attacker.

    The king itself is never pinned.
    """
    piece = board.piece_at(square)
    if piece is None or piece.color != color or piece.type == PieceType.KING:
        return False

    king_square = board.find_king(color)
    if king_square is None:
        return False

    attackers_before = set(attackers_of(board, king_square, color.opponent))
    without_piece = board.with_piece_at(square, None)
    attackers_after = set(attackers_of(without_piece, king_square, color.opponent))
    return bool(attackers_after - attackers_before)


def is_square_between(start: Square, end: Square, middle: Square) -> bool:
    """Is `middle` strictly in between `start` and `end`, on the same straight or diagonal line?"""
    df, dr = end.file - start.file, end.rank - start.rank
    is_line = (df == 0) or (dr == 0) or (abs(df) == abs(dr))
    if not is_line or (df, dr) == (0, 0):
        return False

    step_f = (df > 0) - (df < 0)
    step_r = (dr > 0) - (dr < 0)
    square = start.offset(step_f, step_r)
    while square != end:
        if square == middle:
            return True
        square = square.offset(step_f, step_r)
    return False


def can_block_check(board: Board, color: Color, blocking_square: Square) -> bool:
    """
    Would putting a piece on `blocking_square` break the check on the king of `color`?

    Only a single check by a sliding piece can be blocked. A double check, or a check
    by a knight, pawn or king, has to be answered by capturing or by moving the king.
    """
    king_square = board.find_king(color)
    if king_square is None:
        return False

    checkers = checking_pieces(board, color)
    if len(checkers) != 1:
        return False

    checker = board.piece_at(checkers[0])
    if checker.type not in {PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN}:
        return False
    return is_square_between(checkers[0], king_square, blocking_square)


def would_move_resolve_check(
    board: Board,
    color: Color,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """
    Would the king of `color` be safe after moving its piece from `from_square` to `to_square`?

    Answers "does this get me out of check" by playing the move on a copy of the board.
    NOTE: the geometry of the move is not checked, and castling is never a way out of check.
    Use legality.py to find out whether the move is allowed at all.
    """
    piece = board.piece_at(from_square)
    if piece is None or piece.color != color:
        return False
    if piece.type == PieceType.KING and abs(to_square.file - from_square.file) == 2:
        return False
    hypothetical_board = simulate_move(board, from_square, to_square, en_passant_target)
    return not is_king_in_check(hypothetical_board, color)
