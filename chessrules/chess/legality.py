"""
Legality Filter: the single source of truth for "is this move legal right now".

plan:
1. Is there a piece of the player to move on the starting square?
2. Castling (king moving two files on its home rank) is handed over to castling.py entirely.
   Anything else must be a pseudo-legal destination for that piece (en passant target included for pawns).
3. Simulate the move on a copy of the board.
4. Reject if the mover's own king is in check on that board.

Simulating and looking at the king settles pins, discovered checks and "you must get out of check"
in one go, without any separate pin logic.
"""

from enum import Enum, auto
from typing import Optional

from chessrules.chess.attacks import is_king_in_check
from chessrules.chess.castling import (
    CASTLING_RULES,
    can_castle,
    castling_side,
    is_castling_candidate,
    legal_castling_sides,
)
from chessrules.chess.moves import (
    Move,
    en_passant_capture_square,
    is_en_passant_capture,
    is_promotion_move,
    pseudo_legal_destinations,
    simulate_move,
)
from chessrules.chess.square import Square
from chessrules.chess.state import GameState
from chessrules.core.config import DEFAULT_PROMOTION, PROMOTION_OPTIONS
from chessrules.core.shared_types import PieceType


class MoveRejection(Enum):
    """Why a move got rejected. Diagnostics for user-facing messages, the verdict itself is just legal / illegal."""

    INVALID_SQUARE = auto()
    NO_PIECE = auto()
    WRONG_COLOR = auto()
    ILLEGAL_DESTINATION = auto()
    ILLEGAL_CASTLING = auto()
    INVALID_PROMOTION = auto()
    KING_EXPOSED = auto()


def rejection_reason(
    state: GameState,
    from_square: Square,
    to_square: Square,
    promote_to: Optional[PieceType] = None,
) -> Optional[MoveRejection]:
    """Run the legality checks in order. None means the move is legal."""
    board = state.board
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return MoveRejection.INVALID_SQUARE

    piece = board.piece_at(from_square)
    if piece is None:
        return MoveRejection.NO_PIECE
    if piece.color != state.current_player:
        return MoveRejection.WRONG_COLOR

    if is_castling_candidate(board, from_square, to_square):
        side = castling_side(piece.color, from_square, to_square)
        if side is None or not can_castle(board, piece.color, side, state.castling_rights):
            return MoveRejection.ILLEGAL_CASTLING
        return None

    destinations = pseudo_legal_destinations(board, from_square, state.en_passant_target)
    if to_square not in destinations:
        return MoveRejection.ILLEGAL_DESTINATION

    if (
        is_promotion_move(board, from_square, to_square)
        and promote_to is not None
        and promote_to not in PROMOTION_OPTIONS
    ):
        return MoveRejection.INVALID_PROMOTION

    hypothetical_board = simulate_move(
        board, from_square, to_square, state.en_passant_target, promote_to
    )
    if is_king_in_check(hypothetical_board, piece.color):
        return MoveRejection.KING_EXPOSED
    return None


def is_legal_move(
    state: GameState,
    from_square: Square,
    to_square: Square,
    promote_to: Optional[PieceType] = None,
) -> bool:
    return rejection_reason(state, from_square, to_square, promote_to) is None


def describe_move(
    state: GameState,
    from_square: Square,
    to_square: Square,
    promote_to: Optional[PieceType] = None,
) -> Move:
    """
    Snapshot of the move (which piece moved, what got captured, ...) taken BEFORE the board gets updated.

    NOTE: assumes the move has already passed `rejection_reason`.
    """
    board = state.board
    piece = board.piece_at(from_square)

    if is_castling_candidate(board, from_square, to_square):
        return Move(
            from_square,
            to_square,
            piece,
            castling=castling_side(piece.color, from_square, to_square),
        )

    if is_en_passant_capture(board, from_square, to_square, state.en_passant_target):
        captured_square = en_passant_capture_square(to_square, piece.color)
        return Move(
            from_square,
            to_square,
            piece,
            captured=board.piece_at(captured_square),
            is_en_passant=True,
        )

    promotion = None
    if is_promotion_move(board, from_square, to_square):
        promotion = promote_to or DEFAULT_PROMOTION
    return Move(
        from_square,
        to_square,
        piece,
        captured=board.piece_at(to_square),
        promote_to=promotion,
    )


def legal_moves(state: GameState) -> list[Move]:
    """
    List of legal moves for the player to move
    ----

    1. generate pseudo-legal destinations for every piece of the player to move
    2. keep those that do not put (or leave) your king in check
    3. Pawn move to the last rank? --> one move for every choice of piece type to promote into.
    4. add the castling moves that are currently allowed
    """
    board = state.board
    color = state.current_player
    moves: list[Move] = []
    for from_square in board.squares_of(color):
        for to_square in pseudo_legal_destinations(board, from_square, state.en_passant_target):
            if not is_legal_move(state, from_square, to_square):
                continue
            if is_promotion_move(board, from_square, to_square):
                moves.extend(
                    describe_move(state, from_square, to_square, promotion)
                    for promotion in PROMOTION_OPTIONS
                )
            else:
                moves.append(describe_move(state, from_square, to_square))

    for side in legal_castling_sides(board, color, state.castling_rights):
        squares = CASTLING_RULES[(color, side)]
        moves.append(describe_move(state, squares.king_from, squares.king_to))
    return moves
