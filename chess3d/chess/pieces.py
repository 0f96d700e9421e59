"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto

from chess3d.chess.square import Square


class PieceKind(Enum):
    KING = auto()
    QUEEN = auto()
    BISHOP = auto()
    KNIGHT = auto()
    ROOK = auto()
    PAWN = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


LETTER_TO_KIND: dict[str, PieceKind] = {
    "k": PieceKind.KING,
    "q": PieceKind.QUEEN,
    "b": PieceKind.BISHOP,
    "n": PieceKind.KNIGHT,
    "r": PieceKind.ROOK,
    "p": PieceKind.PAWN,
}

KIND_TO_LETTER: dict[PieceKind, str] = {
    value: key for key, value in LETTER_TO_KIND.items()
}


@dataclass(frozen=True)
class Piece:
    """
    A piece standing on the board.

    Value type: moving a piece creates a new Piece. `has_moved` is needed for castling and the pawn's double step and
    is never reset once set.
    """

    color: Color
    kind: PieceKind
    has_moved: bool
    position: Square

    @classmethod
    def from_letter(cls, character: str, position: Square, has_moved: bool = False) -> Piece:
        # upper case: White pieces, lower case: Black pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        kind = LETTER_TO_KIND[character.lower()]
        return cls(color, kind, has_moved, position)

    def to_letter(self) -> str:
        letter = KIND_TO_LETTER[self.kind]
        return letter.upper() if self.color == Color.WHITE else letter

    def moved_to(self, square: Square) -> Piece:
        """The same piece after it relocated to the given square"""
        return replace(self, position=square, has_moved=True)
