"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal destinations for each piece type,
and a matching "does this piece attack that square" predicate.

Legality (not leaving your own king in check, castling, en passant) is decided later, in legality.py.
This module only knows how to play a move on a copy of the board (`simulate_move`), without judging it.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from chessrules.chess.board import Board
from chessrules.chess.pieces import PIECE_TO_SYMBOL, SYMBOL_TO_PIECE, Piece
from chessrules.chess.square import Square
from chessrules.core.config import BOARD_DIMENSIONS, DEFAULT_PROMOTION
from chessrules.core.exceptions import InvalidSquareError
from chessrules.core.shared_types import CastlingSide, Color, PieceType

Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass(frozen=True)
class Move:
    """
    A move that has been (or can be) played. A value, not tied to any particular Board instance.

    `captured` is the piece taken (for en passant: the pawn behind the target square),
    `promote_to` is only set for pawns reaching the last rank.
    """

    from_square: Square
    to_square: Square
    piece: Piece
    captured: Optional[Piece] = None
    promote_to: Optional[PieceType] = None
    castling: Optional[CastlingSide] = None
    is_en_passant: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_SYMBOL[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """
    Universal Chess Interface:
    ---
    ---
    One of the standard chess notations for moves

    examples:
    * "e2e4": move the piece that was on e2 to e4
    * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
    * "e1g1": the king castles king side

    NOTE: Only the squares (and promotion choice) are encoded. What kind of move it is gets decided by the rules.
    """
    if len(uci) not in (4, 5):
        raise InvalidSquareError(f"Cannot interpret {uci!r} as a UCI move.")
    from_sq = Square.from_algebraic(uci[:2])
    to_sq = Square.from_algebraic(uci[2:4])
    promote_to = None
    if len(uci) == 5:
        if uci[4] not in SYMBOL_TO_PIECE:
            raise InvalidSquareError(f"Unknown promotion piece in {uci!r}.")
        promote_to = SYMBOL_TO_PIECE[uci[4]]
    return from_sq, to_sq, promote_to


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 2


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


# --- MOVEMENT RULES ---
def raycasting_squares(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = board.piece_at(square).color
    squares: list[Square] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if board.is_occupied_by(target_square, player_color.opponent):
                    squares.append(target_square)
                break

            squares.append(target_square)
    return squares


def single_step_squares(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just take a single step along a direction"""
    player_color = board.piece_at(square).color
    squares: list[Square] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue
        if not board.is_occupied_by(target_square, player_color):
            squares.append(target_square)
    return squares


def candidate_pawn_squares(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward (only onto an empty square).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant and promotion are taken care of in legality.py
    """
    color = board.piece_at(square).color
    direction = pawn_direction(color)
    squares: list[Square] = []

    one_forward = square.offset(0, direction)
    if one_forward.is_within_bounds() and board.is_empty(one_forward):
        squares.append(one_forward)

        two_forward = square.offset(0, 2 * direction)
        if square.rank == pawn_starting_rank(color) and board.is_empty(two_forward):
            squares.append(two_forward)

    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if board.is_occupied_by(target_square, color.opponent):
            squares.append(target_square)
    return squares


def en_passant_squares(
    square: Square, board: Board, en_passant_target: Optional[Square]
) -> list[Square]:
    """
    The en passant target is empty, so the normal pawn capture rule never reaches it.

    A pawn may still move there if it is diagonally in front of the pawn and the opponent's pawn
    that just passed over it sits right behind it.
    """
    if en_passant_target is None:
        return []
    pawn = board.piece_at(square)
    if pawn is None or pawn.type != PieceType.PAWN:
        return []

    direction = pawn_direction(pawn.color)
    is_diagonal_step = (
        abs(en_passant_target.file - square.file) == 1
        and en_passant_target.rank == square.rank + direction
    )
    captured_square = en_passant_capture_square(en_passant_target, pawn.color)
    opponent_pawn = Piece(PieceType.PAWN, pawn.color.opponent)
    if (
        is_diagonal_step
        and board.is_empty(en_passant_target)
        and board.piece_at(captured_square) == opponent_pawn
    ):
        return [en_passant_target]
    return []


def en_passant_capture_square(en_passant_target: Square, color: Color) -> Square:
    """The pawn taken en passant stands one rank behind the target square (seen from the capturing side)"""
    return en_passant_target.offset(0, -pawn_direction(color))


def candidate_knight_squares(square: Square, board: Board) -> list[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_squares(square, board, KNIGHT_DELTAS)


def candidate_bishop_squares(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_squares(square, board, DIAGONALS)


def candidate_rook_squares(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_squares(square, board, STRAIGHTS)


def candidate_queen_squares(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_rook_squares(square, board) + candidate_bishop_squares(square, board)


def candidate_king_squares(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled in castling.py).
    """
    return single_step_squares(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateSquaresFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateSquaresFn] = {
    PieceType.PAWN: candidate_pawn_squares,
    PieceType.KNIGHT: candidate_knight_squares,
    PieceType.BISHOP: candidate_bishop_squares,
    PieceType.ROOK: candidate_rook_squares,
    PieceType.QUEEN: candidate_queen_squares,
    PieceType.KING: candidate_king_squares,
}


def pseudo_legal_destinations(
    board: Board, square: Square, en_passant_target: Optional[Square] = None
) -> list[Square]:
    """Destinations allowed by the piece's geometry, ignoring the safety of its own king."""
    piece = board.piece_at(square)
    if piece is None:
        return []
    destinations = MOVEMENT_RULES[piece.type](square, board)
    if piece.type == PieceType.PAWN:
        destinations.extend(en_passant_squares(square, board, en_passant_target))
    return destinations


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square, target: Square, board: Board, directions: list[Vector]
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Similar to raycasting moves, but the question is:
    _"Is the target square in the line-of-sight of the piece standing on the specified square?"_

    NOTE: it does not matter what stands on the target square (own piece, opponent's piece or nothing).
    The square is attacked either way.
    """
    for df, dr in directions:
        try_square = square
        while True:
            try_square = try_square.offset(df, dr)
            if not try_square.is_within_bounds():
                break
            if try_square == target:
                return True
            if not board.is_empty(try_square):
                # blocked before reaching the target
                break
    return False


def single_step_attack(square: Square, target: Square, deltas: list[Vector]) -> bool:
    return any(square.offset(df, dr) == target for df, dr in deltas)


def pawn_attacks(square: Square, target: Square, board: Board) -> bool:
    """
    Pawns take diagonally forward. Attacks that square whether or not something stands there.
    """
    direction = pawn_direction(board.piece_at(square).color)
    return single_step_attack(square, target, [(1, direction), (-1, direction)])


def knight_attacks(square: Square, target: Square, board: Board) -> bool:
    return single_step_attack(square, target, KNIGHT_DELTAS)


def bishop_attacks(square: Square, target: Square, board: Board) -> bool:
    return raycasting_attack(square, target, board, DIAGONALS)


def rook_attacks(square: Square, target: Square, board: Board) -> bool:
    return raycasting_attack(square, target, board, STRAIGHTS)


def queen_attacks(square: Square, target: Square, board: Board) -> bool:
    return raycasting_attack(square, target, board, STRAIGHTS + DIAGONALS)


def king_attacks(square: Square, target: Square, board: Board) -> bool:
    return single_step_attack(square, target, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttacksFn = Callable[[Square, Square, Board], bool]
ATTACK_RULES: dict[PieceType, AttacksFn] = {
    PieceType.PAWN: pawn_attacks,
    PieceType.KNIGHT: knight_attacks,
    PieceType.BISHOP: bishop_attacks,
    PieceType.ROOK: rook_attacks,
    PieceType.QUEEN: queen_attacks,
    PieceType.KING: king_attacks,
}


def piece_attacks_square(board: Board, square: Square, target: Square) -> bool:
    """Does the piece standing on `square` attack `target`? (False for an empty square)"""
    piece = board.piece_at(square)
    if piece is None or not target.is_within_bounds():
        return False
    return ATTACK_RULES[piece.type](square, target, board)


# --- SIMULATION ---
def is_promotion_move(board: Board, from_square: Square, to_square: Square) -> bool:
    """check if the move is a pawn move that reaches the final rank (seen from the pawn's side)"""
    piece = board.piece_at(from_square)
    if piece is None or piece.type != PieceType.PAWN:
        return False
    return to_square.rank == promotion_rank(piece.color)


def is_en_passant_capture(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square],
) -> bool:
    """A pawn moving diagonally onto the (empty) en passant target square"""
    piece = board.piece_at(from_square)
    return (
        piece is not None
        and piece.type == PieceType.PAWN
        and en_passant_target is not None
        and to_square == en_passant_target
        and to_square.file != from_square.file
        and board.is_empty(to_square)
    )


def simulate_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square] = None,
    promote_to: Optional[PieceType] = None,
) -> Board:
    """
    Hypothetical board after a (non-castling) move.
    ---

    1. Move the piece (whatever stood on the target square is captured)
    2. En passant: also remove the pawn that gets taken (it stands behind the target square, NOT on it)
    3. Promotion: the piece that lands on the last rank is the promotion piece (queen by default)
    """
    piece = board.piece_at(from_square)
    if piece is None:
        return board

    new_board = board.with_piece_moved(from_square, to_square)

    if is_en_passant_capture(board, from_square, to_square, en_passant_target):
        captured_square = en_passant_capture_square(to_square, piece.color)
        new_board = new_board.with_piece_at(captured_square, None)

    if is_promotion_move(board, from_square, to_square):
        new_board = new_board.with_piece_at(
            to_square, piece.promoted(promote_to or DEFAULT_PROMOTION)
        )
    return new_board
