"""
Terminal state evaluation: checkmate, stalemate and the draw rules.

Order of evaluation (the first condition that holds decides):
1. no legal moves --> checkmate (in check) or stalemate (not in check)
2. insufficient material
3. fifty-move rule
4. threefold repetition
"""

from collections import Counter
from typing import Optional

from chessrules.chess.board import Board
from chessrules.chess.pieces import MINOR_PIECES, PIECE_POINTS
from chessrules.chess.state import GameState
from chessrules.core.config import FIFTY_MOVE_HALFMOVE_LIMIT, REPETITION_THRESHOLD
from chessrules.core.shared_types import Color, GameResult, PieceType, Termination


def _is_lone_king(material: Counter[PieceType]) -> bool:
    return material[PieceType.KING] == 1 and sum(material.values()) == 1


def _is_king_and_minor_piece(material: Counter[PieceType]) -> bool:
    minor_count = sum(material[piece_type] for piece_type in MINOR_PIECES)
    return material[PieceType.KING] == 1 and minor_count == 1 and sum(material.values()) == 2


def _is_king_and_bishop(material: Counter[PieceType]) -> bool:
    return _is_king_and_minor_piece(material) and material[PieceType.BISHOP] == 1


def is_insufficient_material(board: Board) -> bool:
    """
    Neither side can possibly deliver mate:
    * king vs king
    * king + one minor piece (bishop or knight) vs king
    * king + bishop vs king + bishop, both bishops on squares of the same color

    NOTE: Not the full FIDE rule. e.g. king + two knights vs king is NOT treated as a draw here.
    """
    white = board.count(Color.WHITE)
    black = board.count(Color.BLACK)

    if _is_lone_king(white) and _is_lone_king(black):
        return True

    if (_is_lone_king(white) and _is_king_and_minor_piece(black)) or (
        _is_lone_king(black) and _is_king_and_minor_piece(white)
    ):
        return True

    if _is_king_and_bishop(white) and _is_king_and_bishop(black):
        bishop_squares = [
            square for square, piece in board.pieces() if piece.type == PieceType.BISHOP
        ]
        return len({square.is_light() for square in bishop_squares}) == 1

    return False


def has_mating_material(board: Board, color: Color) -> bool:
    """Could this side, on its own, ever force checkmate? (queen, rook, pawn, two bishops, bishop + knight, three knights)"""
    material = board.count(color)
    if material[PieceType.QUEEN] or material[PieceType.ROOK] or material[PieceType.PAWN]:
        return True
    if material[PieceType.BISHOP] >= 2:
        return True
    if material[PieceType.BISHOP] >= 1 and material[PieceType.KNIGHT] >= 1:
        return True
    return material[PieceType.KNIGHT] >= 3


def total_material_value(board: Board, color: Color) -> int:
    """Classical point count (pawn 1, knight / bishop 3, rook 5, queen 9) of the pieces of `color`"""
    return sum(
        PIECE_POINTS.get(piece_type, 0) * count
        for piece_type, count in board.count(color).items()
    )


def is_fifty_move_rule(halfmove_clock: int) -> bool:
    return halfmove_clock >= FIFTY_MOVE_HALFMOVE_LIMIT


def is_threefold_repetition(position_history: tuple[str, ...]) -> bool:
    """Any position signature that occurred (at least) three times over the course of the game"""
    if not position_history:
        return False
    _, most_common_count = Counter(position_history).most_common(1)[0]
    return most_common_count >= REPETITION_THRESHOLD


def classify(state: GameState, legal_move_count: int, in_check: bool) -> Optional[Termination]:
    """Why the game is over, or None if it is still going."""
    if legal_move_count == 0:
        return Termination.CHECKMATE if in_check else Termination.STALEMATE

    if is_insufficient_material(state.board):
        return Termination.INSUFFICIENT_MATERIAL

    if is_fifty_move_rule(state.halfmove_clock):
        return Termination.FIFTY_MOVE_RULE

    if is_threefold_repetition(state.position_history):
        return Termination.THREEFOLD_REPETITION

    return None


def result_for(termination: Optional[Termination], side_to_move: Color) -> GameResult:
    """
    Given we know it is checkmate, the player who is to move just got mated and the opponent must be the winner.
    Every other way of ending the game is a draw.
    """
    if termination is None:
        return GameResult.ONGOING
    if termination == Termination.CHECKMATE:
        return GameResult.WHITE_WINS if side_to_move == Color.BLACK else GameResult.BLACK_WINS
    return GameResult.DRAW
