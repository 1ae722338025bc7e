"""
Boundary layer data model(s).

The serialized shape of a game, exchanged with storage / UI / network collaborators.
These objects know nothing about the rules: they only guarantee the data is structurally sound
(8x8 board, known colors and piece types, squares on the board, sensible counters).
Conversion to/from the domain objects lives in `chessrules.chess.state`.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chessrules.core.config import BOARD_DIMENSIONS
from chessrules.core.shared_types import CastlingSide, Color, PieceType


class PieceModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: PieceType
    color: Color


class SquareModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: int = Field(ge=0, lt=BOARD_DIMENSIONS[0])
    rank: int = Field(ge=0, lt=BOARD_DIMENSIONS[1])


class MoveModel(BaseModel):
    """A single entry of the move history"""

    from_square: SquareModel
    to_square: SquareModel
    piece: PieceModel
    captured: Optional[PieceModel] = None
    promote_to: Optional[PieceType] = None
    castling: Optional[CastlingSide] = None
    is_en_passant: bool = False


class CastlingRightsModel(BaseModel):
    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True


BoardRows = list[list[Optional[PieceModel]]]


class GameStateModel(BaseModel):
    """
    Transport-safe representation of a chess position + its history.

    NOTE: `board[rank][file]`, so the first row is the 1st rank (white's side of the board).
    """

    board: BoardRows
    current_player: Color
    move_history: list[MoveModel] = Field(default_factory=list)
    castling_rights: CastlingRightsModel = Field(default_factory=CastlingRightsModel)
    en_passant_target: Optional[SquareModel] = None
    halfmove_clock: int = Field(default=0, ge=0)
    fullmove_number: int = Field(default=1, ge=1)
    position_history: list[str] = Field(default_factory=list)

    @field_validator("board")
    @classmethod
    def validate_board_dimensions(cls, value: BoardRows) -> BoardRows:
        num_files, num_ranks = BOARD_DIMENSIONS
        if len(value) != num_ranks:
            raise ValueError(f"board must have {num_ranks} ranks, got {len(value)}")
        for rank_idx, rank in enumerate(value):
            if len(rank) != num_files:
                raise ValueError(
                    f"rank {rank_idx + 1} must have {num_files} squares, got {len(rank)}"
                )
        return value
