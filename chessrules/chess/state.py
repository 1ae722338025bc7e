"""
Representation of a complete game state: the position plus everything the rules need to remember
(castling rights, en passant target, move clocks, history).

A GameState is a value. Playing a move produces a new GameState (see game.py), the old one stays valid.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from chessrules.chess.board import Board
from chessrules.chess.castling import CastlingRights
from chessrules.chess.moves import Move
from chessrules.chess.pieces import Piece
from chessrules.chess.square import Square
from chessrules.core.models import (
    CastlingRightsModel,
    GameStateModel,
    MoveModel,
    PieceModel,
    SquareModel,
)
from chessrules.core.shared_types import Color, PieceType


@dataclass(frozen=True)
class GameState:
    """
    Everything needed to continue a game from a given point.
    ----

    * board: the position
    * current_player: the color to move
    * move_history: every move played so far, in order
    * castling_rights: which castling options are still available
    * en_passant_target: the square a pawn just skipped over with a double step (None otherwise)
    * halfmove_clock: plies since the last pawn move or capture (fifty-move rule)
    * fullmove_number: starts at 1 and increments after every move black makes
    * position_history: signature of every position reached (repetition rule), initial position included
    """

    board: Board
    current_player: Color
    move_history: tuple[Move, ...]
    castling_rights: CastlingRights
    en_passant_target: Optional[Square]
    halfmove_clock: int
    fullmove_number: int
    position_history: tuple[str, ...]

    @classmethod
    def initial(cls) -> Self:
        """The standard starting position, with its own signature already in the position history"""
        state = cls(
            board=Board.starting_position(),
            current_player=Color.WHITE,
            move_history=(),
            castling_rights=CastlingRights(),
            en_passant_target=None,
            halfmove_clock=0,
            fullmove_number=1,
            position_history=(),
        )
        return state.with_signature_recorded()

    def signature(self) -> str:
        return position_signature(self)

    def with_signature_recorded(self) -> Self:
        """Append the signature of this very position to the position history"""
        return replace(self, position_history=self.position_history + (self.signature(),))

    # --- SERIALIZATION ---
    @classmethod
    def from_model(cls, model: GameStateModel) -> Self:
        """Build the domain objects from the (already validated) transport model"""
        board = Board.from_rows(
            [[_piece_from_model(piece) for piece in rank] for rank in model.board]
        )
        rights = model.castling_rights
        return cls(
            board=board,
            current_player=model.current_player,
            move_history=tuple(_move_from_model(move) for move in model.move_history),
            castling_rights=CastlingRights(
                white_kingside=rights.white_kingside,
                white_queenside=rights.white_queenside,
                black_kingside=rights.black_kingside,
                black_queenside=rights.black_queenside,
            ),
            en_passant_target=_square_from_model(model.en_passant_target),
            halfmove_clock=model.halfmove_clock,
            fullmove_number=model.fullmove_number,
            position_history=tuple(model.position_history),
        )

    def to_model(self) -> GameStateModel:
        """Encode back into the format collaborators exchange"""
        rights = self.castling_rights
        return GameStateModel(
            board=[
                [_piece_to_model(piece) for piece in rank] for rank in self.board.grid
            ],
            current_player=self.current_player,
            move_history=[_move_to_model(move) for move in self.move_history],
            castling_rights=CastlingRightsModel(
                white_kingside=rights.white_kingside,
                white_queenside=rights.white_queenside,
                black_kingside=rights.black_kingside,
                black_queenside=rights.black_queenside,
            ),
            en_passant_target=_square_to_model(self.en_passant_target),
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            position_history=list(self.position_history),
        )

    def king_anomalies(self) -> list[str]:
        """Problems with the kings on the board. Empty for every position reached by legal play."""
        problems: list[str] = []
        for color in Color:
            num_kings = self.board.count(color)[PieceType.KING]
            if num_kings != 1:
                problems.append(f"{color} has {num_kings} kings on the board")
        return problems


def position_signature(state: GameState) -> str:
    """
    Deterministic encoding of everything that makes two positions 'the same' for the repetition rule:
    <board placement> <side to move> <castling rights> <en passant square>

    (the first four fields of a FEN string, so the move clocks do NOT count)
    """
    active_color = "w" if state.current_player == Color.WHITE else "b"
    en_passant = (
        state.en_passant_target.to_algebraic()
        if state.en_passant_target is not None
        else "-"
    )
    return f"{state.board.to_placement()} {active_color} {state.castling_rights.to_signature()} {en_passant}"


# --- MODEL CONVERSION HELPERS ---
def _piece_from_model(model: Optional[PieceModel]) -> Optional[Piece]:
    return Piece(model.type, model.color) if model is not None else None


def _piece_to_model(piece: Optional[Piece]) -> Optional[PieceModel]:
    return PieceModel(type=piece.type, color=piece.color) if piece is not None else None


def _square_from_model(model: Optional[SquareModel]) -> Optional[Square]:
    return Square(model.file, model.rank) if model is not None else None


def _square_to_model(square: Optional[Square]) -> Optional[SquareModel]:
    return SquareModel(file=square.file, rank=square.rank) if square is not None else None


def _move_from_model(model: MoveModel) -> Move:
    return Move(
        from_square=Square(model.from_square.file, model.from_square.rank),
        to_square=Square(model.to_square.file, model.to_square.rank),
        piece=Piece(model.piece.type, model.piece.color),
        captured=_piece_from_model(model.captured),
        promote_to=model.promote_to,
        castling=model.castling,
        is_en_passant=model.is_en_passant,
    )


def _move_to_model(move: Move) -> MoveModel:
    return MoveModel(
        from_square=_square_to_model(move.from_square),
        to_square=_square_to_model(move.to_square),
        piece=_piece_to_model(move.piece),
        captured=_piece_to_model(move.captured),
        promote_to=move.promote_to,
        castling=move.castling,
        is_en_passant=move.is_en_passant,
    )
