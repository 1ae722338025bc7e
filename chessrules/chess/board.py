"""
The Board: a fixed grid of optional pieces.

Boards are values. Every "write" hands back a new Board and leaves the original untouched,
so earlier positions stay valid for undo / replay / analysis.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from chessrules.chess.pieces import Piece
from chessrules.chess.square import Square, all_squares
from chessrules.core.config import BOARD_DIMENSIONS
from chessrules.core.shared_types import Color, PieceType

Grid = tuple[tuple[Optional[Piece], ...], ...]

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass(frozen=True)
class Board:
    grid: Grid  # grid[rank][file]

    @classmethod
    def empty(cls) -> Self:
        num_files, num_ranks = BOARD_DIMENSIONS
        return cls(tuple((None,) * num_files for _ in range(num_ranks)))

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_placement(STARTING_PLACEMENT)

    @classmethod
    def from_rows(cls, rows: list[list[Optional[Piece]]]) -> Self:
        """rows[0] is the 1st rank"""
        return cls(tuple(tuple(rank) for rank in rows))

    @classmethod
    def from_placement(cls, placement: str) -> Self:
        """Construct a board from the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        rows: list[list[Optional[Piece]]] = [[None] * num_files for _ in range(num_ranks)]
        for rank_idx, placement_one_rank in enumerate(placement.split("/")):
            # read from top rank (8th) to bottom rank (1st)
            rank = num_ranks - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in placement_one_rank:
                if character.isalpha():
                    rows[rank][file] = Piece.from_symbol(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return cls.from_rows(rows)

    def to_placement(self) -> str:
        """Ranks are separated by slashes, top rank first."""
        return "/".join(
            self._rank_to_placement(rank)
            for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_placement(self, rank: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for piece in self.grid[rank]:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.symbol())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def to_rows(self) -> list[list[Optional[Piece]]]:
        return [list(rank) for rank in self.grid]

    # --- READ PRIMITIVES ---
    @staticmethod
    def is_valid_square(square: Square) -> bool:
        return square.is_within_bounds()

    def piece_at(self, square: Square) -> Optional[Piece]:
        """Never fails: off-board squares are simply empty."""
        if not square.is_within_bounds():
            return None
        return self.grid[square.rank][square.file]

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def is_occupied_by(self, square: Square, color: Color) -> bool:
        piece = self.piece_at(square)
        return piece is not None and piece.color == color

    def pieces(self) -> Iterator[tuple[Square, Piece]]:
        for square in all_squares():
            piece = self.piece_at(square)
            if piece is not None:
                yield square, piece

    def squares_of(self, color: Color) -> list[Square]:
        return [square for square, piece in self.pieces() if piece.color == color]

    def locate(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.pieces() if found == piece]

    def find_king(self, color: Color) -> Optional[Square]:
        kings = self.locate(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    def count(self, color: Color) -> Counter[PieceType]:
        """Tally the number of pieces of every type a player has on the board"""
        return Counter(piece.type for _, piece in self.pieces() if piece.color == color)

    # --- WRITE PRIMITIVES (return new boards) ---
    def with_piece_at(self, square: Square, piece: Optional[Piece]) -> Self:
        """NOTE: writing to a square off the board is a no-op, the same board is returned."""
        if not square.is_within_bounds():
            return self
        rank = list(self.grid[square.rank])
        rank[square.file] = piece
        grid = self.grid[: square.rank] + (tuple(rank),) + self.grid[square.rank + 1 :]
        return type(self)(grid)

    def with_pieces(self, placements: dict[Square, Optional[Piece]]) -> Self:
        """convenience method to apply multiple updates in one go (fixtures, castling)"""
        board = self
        for square, piece in placements.items():
            board = board.with_piece_at(square, piece)
        return board

    def with_piece_moved(self, from_square: Square, to_square: Square) -> Self:
        """Plain relocation: whatever stood on `to_square` is gone (captured)."""
        piece = self.piece_at(from_square)
        return self.with_piece_at(from_square, None).with_piece_at(to_square, piece)
