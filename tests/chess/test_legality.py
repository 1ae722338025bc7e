"""Unit tests for chessrules/chess/legality.py"""

import pytest

from chessrules.chess.board import Board
from chessrules.chess.castling import CastlingRights
from chessrules.chess.legality import (
    MoveRejection,
    describe_move,
    is_legal_move,
    legal_moves,
    rejection_reason,
)
from chessrules.chess.moves import is_en_passant_capture, is_promotion_move, simulate_move
from chessrules.chess.pieces import Piece
from chessrules.chess.square import Square
from chessrules.chess.state import GameState
from chessrules.core.shared_types import CastlingSide, Color, PieceType

sq = Square.from_algebraic


def uci_set(state: GameState) -> set[str]:
    return {move.to_uci() for move in legal_moves(state)}


# --- SIMULATION ---
def test_simulate_plain_move() -> None:
    board = Board.starting_position()
    new_board = simulate_move(board, sq("g1"), sq("f3"))
    assert new_board.piece_at(sq("f3")) == Piece(PieceType.KNIGHT, Color.WHITE)
    assert new_board.is_empty(sq("g1"))
    # simulating never touches the original
    assert board.piece_at(sq("g1")) == Piece(PieceType.KNIGHT, Color.WHITE)


def test_simulate_capture_replaces_piece() -> None:
    board = Board.from_placement("4k3/8/8/3p4/4P3/8/8/4K3")
    new_board = simulate_move(board, sq("e4"), sq("d5"))
    assert new_board.piece_at(sq("d5")) == Piece(PieceType.PAWN, Color.WHITE)
    assert new_board.count(Color.BLACK)[PieceType.PAWN] == 0
    assert new_board == board.with_piece_moved(sq("e4"), sq("d5"))


def test_simulate_en_passant_removes_passed_pawn() -> None:
    board = Board.from_placement("4k3/8/8/3pP3/8/8/8/4K3")
    new_board = simulate_move(board, sq("e5"), sq("d6"), en_passant_target=sq("d6"))
    assert new_board.piece_at(sq("d6")) == Piece(PieceType.PAWN, Color.WHITE)
    assert new_board.is_empty(sq("d5"))
    assert new_board.is_empty(sq("e5"))


def test_simulate_promotion_defaults_to_queen() -> None:
    board = Board.from_placement("4k3/P7/8/8/8/8/8/4K3")
    assert simulate_move(board, sq("a7"), sq("a8")).piece_at(sq("a8")) == Piece(
        PieceType.QUEEN, Color.WHITE
    )
    underpromoted = simulate_move(board, sq("a7"), sq("a8"), promote_to=PieceType.KNIGHT)
    assert underpromoted.piece_at(sq("a8")) == Piece(PieceType.KNIGHT, Color.WHITE)


def test_simulate_from_empty_square() -> None:
    board = Board.starting_position()
    assert simulate_move(board, sq("e4"), sq("e5")) == board


def test_move_classification() -> None:
    board = Board.from_placement("4k3/P7/8/3pP3/8/8/8/4K3")
    assert is_promotion_move(board, sq("a7"), sq("a8"))
    assert not is_promotion_move(board, sq("e5"), sq("e6"))
    assert not is_promotion_move(board, sq("e1"), sq("e2"))
    assert is_en_passant_capture(board, sq("e5"), sq("d6"), sq("d6"))
    assert not is_en_passant_capture(board, sq("e5"), sq("e6"), sq("d6"))
    assert not is_en_passant_capture(board, sq("e5"), sq("d6"), None)


# --- REJECTIONS ---
@pytest.mark.parametrize(
    "from_square, to_square, reason",
    [
        (Square(4, 1), Square(4, 8), MoveRejection.INVALID_SQUARE),
        (Square(-1, 0), Square(0, 0), MoveRejection.INVALID_SQUARE),
        (sq("e4"), sq("e5"), MoveRejection.NO_PIECE),
        (sq("e7"), sq("e5"), MoveRejection.WRONG_COLOR),
        (sq("e2"), sq("e5"), MoveRejection.ILLEGAL_DESTINATION),
        (sq("a1"), sq("a3"), MoveRejection.ILLEGAL_DESTINATION),  # through own pawn
        (sq("e1"), sq("g1"), MoveRejection.ILLEGAL_CASTLING),  # bishop and knight in between
        (sq("e2"), sq("e4"), None),
        (sq("g1"), sq("f3"), None),
    ],
)
def test_rejection_reasons_from_start(
    from_square: Square, to_square: Square, reason: MoveRejection | None
) -> None:
    state = GameState.initial()
    assert rejection_reason(state, from_square, to_square) == reason
    assert is_legal_move(state, from_square, to_square) is (reason is None)


def test_pinned_piece_cannot_move(state_from_placement) -> None:
    """The knight on e4 shields the white king from the rook on e8"""
    state = state_from_placement("4r1k1/8/8/8/4N3/8/8/4K3")
    assert rejection_reason(state, sq("e4"), sq("f6")) == MoveRejection.KING_EXPOSED


def test_pinned_piece_may_move_along_the_pin(state_from_placement) -> None:
    state = state_from_placement("4r1k1/8/8/8/4R3/8/8/4K3")
    assert is_legal_move(state, sq("e4"), sq("e6"))
    assert is_legal_move(state, sq("e4"), sq("e8"))
    assert rejection_reason(state, sq("e4"), sq("d4")) == MoveRejection.KING_EXPOSED


def test_king_cannot_step_into_check(state_from_placement) -> None:
    state = state_from_placement("3r2k1/8/8/8/8/8/8/4K3")
    assert rejection_reason(state, sq("e1"), sq("d1")) == MoveRejection.KING_EXPOSED
    assert is_legal_move(state, sq("e1"), sq("f1"))


def test_must_get_out_of_check(state_from_placement) -> None:
    """In check by the rook: only moves that resolve the check remain"""
    state = state_from_placement("4r1k1/8/8/8/8/8/P7/4K3")
    assert rejection_reason(state, sq("a2"), sq("a3")) == MoveRejection.KING_EXPOSED
    assert uci_set(state) == {"e1d1", "e1f1", "e1d2", "e1f2"}


def test_king_cannot_capture_defended_piece(state_from_placement) -> None:
    state = state_from_placement("6k1/8/8/8/8/8/3q4/3rK3")
    assert rejection_reason(state, sq("e1"), sq("d2")) == MoveRejection.KING_EXPOSED
    assert uci_set(state) == set()


def test_en_passant_exposing_king_on_rank(state_from_placement) -> None:
    """Both pawns leave the 5th rank at once: the rook on a5 would then see the king on h5"""
    state = state_from_placement("6k1/8/8/r2pP2K/8/8/8/8", en_passant="d6")
    assert rejection_reason(state, sq("e5"), sq("d6")) == MoveRejection.KING_EXPOSED
    assert is_legal_move(state, sq("e5"), sq("e6"))


def test_invalid_promotion_piece(state_from_placement) -> None:
    state = state_from_placement("4k3/P7/8/8/8/8/8/4K3")
    assert rejection_reason(state, sq("a7"), sq("a8"), PieceType.KING) == MoveRejection.INVALID_PROMOTION
    assert rejection_reason(state, sq("a7"), sq("a8"), PieceType.PAWN) == MoveRejection.INVALID_PROMOTION
    assert rejection_reason(state, sq("a7"), sq("a8"), PieceType.ROOK) is None
    assert rejection_reason(state, sq("a7"), sq("a8")) is None


def test_promotion_choice_ignored_on_other_moves(state_from_placement) -> None:
    state = state_from_placement("4k3/8/8/8/8/8/4P3/4K3")
    assert rejection_reason(state, sq("e2"), sq("e4"), PieceType.KING) is None


# --- DESCRIBING MOVES ---
def test_describe_capture(state_from_placement) -> None:
    state = state_from_placement("4k3/8/8/3p4/4P3/8/8/4K3")
    move = describe_move(state, sq("e4"), sq("d5"))
    assert move.piece == Piece(PieceType.PAWN, Color.WHITE)
    assert move.captured == Piece(PieceType.PAWN, Color.BLACK)
    assert move.is_capture
    assert not move.is_en_passant


def test_describe_en_passant(state_from_placement) -> None:
    state = state_from_placement("4k3/8/8/3pP3/8/8/8/4K3", en_passant="d6")
    move = describe_move(state, sq("e5"), sq("d6"))
    assert move.is_en_passant
    assert move.captured == Piece(PieceType.PAWN, Color.BLACK)


def test_describe_castling(state_from_placement) -> None:
    state = state_from_placement("r3k2r/8/8/8/8/8/8/R3K2R", castling_rights=CastlingRights())
    move = describe_move(state, sq("e1"), sq("c1"))
    assert move.castling == CastlingSide.QUEENSIDE
    assert not move.is_capture


def test_describe_promotion(state_from_placement) -> None:
    state = state_from_placement("4k3/P7/8/8/8/8/8/4K3")
    assert describe_move(state, sq("a7"), sq("a8")).promote_to == PieceType.QUEEN
    assert describe_move(state, sq("a7"), sq("a8"), PieceType.BISHOP).promote_to == PieceType.BISHOP


# --- GENERATION ---
def test_twenty_legal_moves_from_start() -> None:
    moves = legal_moves(GameState.initial())
    assert len(moves) == 20
    assert {move.piece.type for move in moves} == {PieceType.PAWN, PieceType.KNIGHT}


def test_promotions_are_expanded(state_from_placement) -> None:
    state = state_from_placement("4k3/P7/8/8/8/8/8/4K3")
    promotions = {move.to_uci() for move in legal_moves(state) if move.promote_to}
    assert promotions == {"a7a8q", "a7a8r", "a7a8b", "a7a8n"}


def test_castling_moves_generated(state_from_placement) -> None:
    state = state_from_placement("r3k2r/8/8/8/8/8/8/R3K2R", castling_rights=CastlingRights())
    moves = legal_moves(state)
    castles = {move.to_uci() for move in moves if move.castling is not None}
    assert castles == {"e1g1", "e1c1"}
    # the 5 ordinary king steps, 2 castles, and the rook moves: 10 for a1, 9 for h1
    assert len(moves) == 5 + 2 + 10 + 9


def test_en_passant_generated(state_from_placement) -> None:
    state = state_from_placement("4k3/8/8/3pP3/8/8/8/4K3", en_passant="d6")
    assert "e5d6" in uci_set(state)
    without_target = state_from_placement("4k3/8/8/3pP3/8/8/8/4K3")
    assert "e5d6" not in uci_set(without_target)


def test_every_generated_move_is_legal() -> None:
    state = GameState.initial()
    for move in legal_moves(state):
        assert is_legal_move(state, move.from_square, move.to_square, move.promote_to)
