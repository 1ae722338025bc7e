"""
The Game class is the entrypoint into the rules engine for collaborators (UI, persistence, notation layer).

It is responsible for orchestrating all the rules required to play a turn:
validate the move (legality.py), apply it, update the bookkeeping (castling rights, en passant target,
move clocks, histories, turn), and classify the resulting position (draws.py).

Games are values: `make_move` hands back a NEW Game (or None for an illegal move) and never changes the one it was called on.
"""

import logging
from collections.abc import Mapping, Sequence
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Optional, Self

from pydantic import ValidationError

from chessrules.chess.attacks import is_king_in_check
from chessrules.chess.board import Board
from chessrules.chess.castling import apply_castling, update_castling_rights
from chessrules.chess.draws import classify, result_for
from chessrules.chess.legality import (
    MoveRejection,
    describe_move,
    legal_moves,
    rejection_reason,
)
from chessrules.chess.moves import (
    Move,
    is_promotion_move,
    parse_uci,
    pawn_direction,
    simulate_move,
)
from chessrules.chess.square import Square
from chessrules.chess.state import GameState
from chessrules.core.exceptions import IllegalMoveError, InvalidSquareError, InvalidStateError
from chessrules.core.models import GameStateModel
from chessrules.core.shared_types import Color, GameResult, PieceType, Termination

logger = logging.getLogger(__name__)

StateLike = GameState | GameStateModel | Mapping[str, Any]


@dataclass(frozen=True)
class Game:
    state: GameState

    # --- CREATION ---
    @classmethod
    def new_game(cls) -> Self:
        """Canonical starting position, white to move."""
        return cls(GameState.initial())

    @classmethod
    def from_state(cls, state: StateLike, strict: bool = False) -> Self:
        """
        Resume from a state supplied by the caller (saved game, test fixture, analysis branch, ...)
        ----

        Accepts a GameState, a GameStateModel, or plain (JSON-like) data in the GameStateModel shape.
        The data is copied: later changes to the caller's object do not leak into the game.

        NOTE: A board with a missing (or extra) king cannot come out of legal play. Check detection
        would quietly report "not in check" for such a board. Logged as a warning, or refused when `strict`.
        """
        if isinstance(state, GameState):
            game_state = deepcopy(state)
        else:
            try:
                model = (
                    state
                    if isinstance(state, GameStateModel)
                    else GameStateModel.model_validate(state)
                )
            except ValidationError as exc:
                raise InvalidStateError(f"Cannot interpret supplied game state: {exc}") from exc
            game_state = GameState.from_model(model)

        for problem in game_state.king_anomalies():
            if strict:
                raise InvalidStateError(f"Game state is not playable: {problem}")
            logger.warning("Loaded game state is suspicious: %s", problem)
        return cls(game_state)

    def to_model(self) -> GameStateModel:
        return self.state.to_model()

    # --- READ ACCESS ---
    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def current_player(self) -> Color:
        return self.state.current_player

    @property
    def move_history(self) -> list[Move]:
        return list(self.state.move_history)

    # --- MAKING MOVES ---
    def make_move(
        self,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
    ) -> Optional[Self]:
        """
        Attempt to make a move
        -----

        1. check the move is legal (otherwise: None, nothing else happens)
        2. snapshot the move (moving piece, captured piece, castling, ...)
        3. update the board (NOTE: if castling, move the king and the rook)
        4. update castling rights, en passant target, move counters, turn
        5. update the move history and the position history
        """
        reason = rejection_reason(self.state, from_square, to_square, promote_to)
        if reason is not None:
            logger.debug(
                "Rejected move %s -> %s for %s: %s",
                from_square,
                to_square,
                self.current_player,
                reason.name,
            )
            return None

        move = describe_move(self.state, from_square, to_square, promote_to)
        next_game = type(self)(_apply_move(self.state, move))
        logger.debug("Accepted move %s", move.to_uci())

        # Logging only, game state does not depend on it.
        # Classifying costs a full move generation: skipped unless INFO is on.
        if logger.isEnabledFor(logging.INFO):
            termination = next_game.termination()
            if termination is not None:
                logger.info(
                    "Game over after %s: %s (%s)",
                    move.to_uci(),
                    next_game.result(),
                    termination,
                )
        return next_game

    def play(self, uci: str) -> Self:
        """
        Convenience for scripted sequences: UCI input ("e2e4", "e7e8n"), and an exception instead of None.
        """
        from_square, to_square, promote_to = parse_uci(uci)
        next_game = self.make_move(from_square, to_square, promote_to)
        if next_game is None:
            reason = self.rejection_reason(from_square, to_square, promote_to)
            raise IllegalMoveError(f"Move not allowed: {uci} ({reason.name})", reason)
        return next_game

    def validate_move_sequence(self, moves: Sequence[str]) -> Optional[tuple[int, MoveRejection]]:
        """
        Check a scripted sequence of UCI moves, played one after the other from this position.

        Returns the index of the first move that cannot be played together with the reason (None if all of them can).
        Text that is not a move at all is reported as INVALID_SQUARE.
        """
        state = self.state
        for index, uci in enumerate(moves):
            try:
                from_square, to_square, promote_to = parse_uci(uci)
            except InvalidSquareError:
                return index, MoveRejection.INVALID_SQUARE

            reason = rejection_reason(state, from_square, to_square, promote_to)
            if reason is not None:
                return index, reason
            state = _apply_move(state, describe_move(state, from_square, to_square, promote_to))
        return None

    def rejection_reason(
        self,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
    ) -> Optional[MoveRejection]:
        """Which rule a move breaks (None if it is legal). For user-facing messages."""
        return rejection_reason(self.state, from_square, to_square, promote_to)

    def requires_promotion(self, from_square: Square, to_square: Square) -> bool:
        """Lets a UI ask for the promotion piece before submitting the move."""
        return is_promotion_move(self.board, from_square, to_square)

    # --- QUERIES (recomputed on every call) ---
    def valid_moves(self) -> list[Move]:
        return legal_moves(self.state)

    def is_in_check(self) -> bool:
        return is_king_in_check(self.board, self.current_player)

    def termination(self) -> Optional[Termination]:
        return classify(self.state, len(self.valid_moves()), self.is_in_check())

    def result(self) -> GameResult:
        return result_for(self.termination(), self.current_player)

    def is_game_over(self) -> bool:
        return self.result() != GameResult.ONGOING

    @property
    def winner(self) -> Optional[Color]:
        """Only checkmate produces a winner"""
        result = self.result()
        if result == GameResult.WHITE_WINS:
            return Color.WHITE
        if result == GameResult.BLACK_WINS:
            return Color.BLACK
        return None


# -- STATE TRANSITION HELPERS ---
def _apply_move(state: GameState, move: Move) -> GameState:
    """Brand-new state after the (already validated) move. `state` itself is left untouched."""
    mover = move.piece.color
    if move.castling is not None:
        board = apply_castling(state.board, mover, move.castling)
    else:
        board = simulate_move(
            state.board,
            move.from_square,
            move.to_square,
            state.en_passant_target,
            move.promote_to,
        )

    castling_rights = update_castling_rights(
        state.castling_rights,
        move.piece,
        move.from_square,
        move.to_square,
        move.captured,
    )

    is_pawn_move = move.piece.type == PieceType.PAWN
    halfmove_clock = 0 if (is_pawn_move or move.is_capture) else state.halfmove_clock + 1
    fullmove_number = state.fullmove_number + 1 if mover == Color.BLACK else state.fullmove_number

    next_state = GameState(
        board=board,
        current_player=mover.opponent,
        move_history=state.move_history + (move,),
        castling_rights=castling_rights,
        en_passant_target=_en_passant_target_after(move),
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
        position_history=state.position_history,
    )
    return next_state.with_signature_recorded()


def _en_passant_target_after(move: Move) -> Optional[Square]:
    """A pawn advancing two squares leaves the square it skipped as the en passant target for the next ply."""
    ranks_moved = abs(move.to_square.rank - move.from_square.rank)
    if move.piece.type != PieceType.PAWN or ranks_moved != 2:
        return None
    return move.from_square.offset(0, pawn_direction(move.piece.color))
