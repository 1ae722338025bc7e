"""Rule parameters. Classical chess only, so these are constants rather than settings."""

from chessrules.core.shared_types import PieceType

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

# 50 moves for each side = 100 half-moves without a capture or pawn move
FIFTY_MOVE_HALFMOVE_LIMIT = 100

# number of occurrences of the same position that ends the game
REPETITION_THRESHOLD = 3

DEFAULT_PROMOTION = PieceType.QUEEN
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
