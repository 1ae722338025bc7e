"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple modules.
"""

from typing import Callable, Optional

import pytest

from chessrules.chess.board import Board
from chessrules.chess.castling import CastlingRights
from chessrules.chess.game import Game
from chessrules.chess.square import Square
from chessrules.chess.state import GameState
from chessrules.core.shared_types import Color

StateFactory = Callable[..., GameState]
GameFactory = Callable[..., Game]


def _build_state(
    placement: str,
    to_move: Color = Color.WHITE,
    castling_rights: Optional[CastlingRights] = None,
    en_passant: Optional[str] = None,
    halfmove_clock: int = 0,
    fullmove_number: int = 1,
) -> GameState:
    """A state for an arbitrary position, with that position recorded once in the history"""
    state = GameState(
        board=Board.from_placement(placement),
        current_player=to_move,
        move_history=(),
        castling_rights=castling_rights if castling_rights is not None else CastlingRights.none(),
        en_passant_target=Square.from_algebraic(en_passant) if en_passant else None,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
        position_history=(),
    )
    return state.with_signature_recorded()


@pytest.fixture
def state_from_placement() -> StateFactory:
    """Call the inner function with the piece placement (FEN board part) and optionally the other state fields.
    Castling rights default to NONE, so only tests about castling have to think about them."""
    return _build_state


@pytest.fixture
def game_from_placement() -> GameFactory:
    """Same as `state_from_placement`, wrapped in a Game"""

    def _create_game(placement: str, **kwargs) -> Game:
        return Game.from_state(_build_state(placement, **kwargs))

    return _create_game


@pytest.fixture
def castling_board() -> Board:
    """A board with only the Kings and the Rooks. Ready to perform any castling move (if allowed)."""
    return Board.from_placement("r3k2r/8/8/8/8/8/8/R3K2R")
