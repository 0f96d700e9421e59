"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from chess3d.chess.pieces import Color, Piece, PieceKind
from chess3d.chess.square import BOARD_DIMENSIONS, Square


class CastlingSide(Enum):
    """Values are the direction (along the rank) in which the king travels."""

    KING_SIDE = 1
    QUEEN_SIDE = -1


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: The rook always lands on the square the king passed over.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @property
    def king_transit(self) -> Square:
        return self.rook_to


def is_castling_move(piece: Piece, target: Square) -> bool:
    """A king move of exactly two files along its own rank can only be a castling move"""
    return (
        piece.kind == PieceKind.KING
        and target.rank == piece.position.rank
        and abs(target.file - piece.position.file) == 2
    )


def castling_side(king_from: Square, king_to: Square) -> CastlingSide:
    return (
        CastlingSide.KING_SIDE
        if king_to.file > king_from.file
        else CastlingSide.QUEEN_SIDE
    )


def castling_squares(king_from: Square, king_to: Square) -> CastlingSquares:
    """
    Squares involved in castling towards `king_to`.
    The rook starts in the corner on that side of the king's rank.
    """
    side = castling_side(king_from, king_to)
    corner_file = BOARD_DIMENSIONS[0] - 1 if side == CastlingSide.KING_SIDE else 0
    return CastlingSquares(
        king_from=king_from,
        king_to=king_to,
        rook_from=Square(corner_file, king_from.rank),
        rook_to=king_from.offset(side.value, 0),
    )


def castling_rook(
    color: Color, rook_square: Square, pieces: Iterable[Piece]
) -> Optional[Piece]:
    """The unmoved rook of the given color on the given square, if there is one"""
    return next(
        (
            piece
            for piece in pieces
            if piece.position == rook_square
            and piece.kind == PieceKind.ROOK
            and piece.color == color
            and not piece.has_moved
        ),
        None,
    )
