"""
The board implements all rules that depend on the complete `position` (in chess: the configuration of pieces on the board):
applying a move, and finding out if a side is in check or checkmated.

All functions are pure. They take a snapshot of the pieces and return a new value, never editing the given position.
"""

import logging
from typing import Iterator, Optional, Sequence

from chess3d.chess.castling import castling_rook, castling_squares, is_castling_move
from chess3d.chess.moves import Position, is_move_valid
from chess3d.chess.pieces import Color, Piece, PieceKind
from chess3d.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square
from chess3d.core.exceptions import PositionError

logger = logging.getLogger(__name__)

STARTING_DIAGRAM = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


# --- CREATING POSITIONS ---
def position_from_diagram(diagram: str) -> Position:
    """Construct a position using the board part of a FEN string.

    ex. standard starting position:
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
    means:
    * black pieces are on the 8th rank, read from the a-file to the h-file
    * pawns cover 7th rank entirely
    * ranks 6 through 3 have 8 consecutive empty squares
    * rank 2 are the white pawns (capital letters)
    * 1st rank are the white pieces.

    NOTE: A diagram does not know which pieces moved. Pawns that are not on their starting rank are marked as moved,
    every other piece is considered unmoved.
    """
    pieces: list[Piece] = []
    for rank_idx, diagram_one_rank in enumerate(diagram.split("/")):
        # diagram is read from top rank (8th) to bottom rank (1st)
        rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
        file = 0
        for character in diagram_one_rank:
            if character.isalpha():
                square = Square(file, rank)
                piece = Piece.from_letter(character, square)
                if piece.kind == PieceKind.PAWN:
                    start_rank = 1 if piece.color == Color.WHITE else 6
                    piece = Piece.from_letter(
                        character, square, has_moved=rank != start_rank
                    )
                pieces.append(piece)
                file += 1
            else:
                # A number denotes the amount of empty squares after each other
                file += int(character)
    return tuple(pieces)


def position_to_diagram(pieces: Sequence[Piece]) -> str:
    """Reverse operation. Ranks are separated by slashes."""
    by_square = {piece.position: piece for piece in pieces}
    ranks: list[str] = []
    for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
        characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = by_square.get(Square(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.to_letter())
        if empty_count > 0:
            characters.append(str(empty_count))
        ranks.append("".join(characters))
    return "/".join(ranks)


def starting_position() -> Position:
    """The standard 32 piece layout. White on the first two ranks."""
    return position_from_diagram(STARTING_DIAGRAM)


# --- QUERIES ---
def piece_at(square: Square, pieces: Sequence[Piece]) -> Optional[Piece]:
    return next((piece for piece in pieces if piece.position == square), None)


def pieces_of(color: Color, pieces: Sequence[Piece]) -> list[Piece]:
    return [piece for piece in pieces if piece.color == color]


def find_king(pieces: Sequence[Piece], color: Color) -> Piece:
    """The engine relies on exactly one king per color. Anything else is a programming error."""
    kings = [
        piece for piece in pieces if piece.kind == PieceKind.KING and piece.color == color
    ]
    if len(kings) != 1:
        raise PositionError(
            f"Expected exactly one {color.name.lower()} king, found {len(kings)}."
        )
    return kings[0]


# --- APPLYING MOVES ---
def captured_piece(
    piece: Piece, target: Square, pieces: Sequence[Piece]
) -> Optional[Piece]:
    """The opponent's piece that gets taken by moving to `target`, if any"""
    occupant = piece_at(target, pieces)
    if occupant is not None and occupant.color != piece.color:
        return occupant
    return None


def apply_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> Position:
    """
    The position after relocating a single piece: an opponent's piece on `target` is removed, the piece is moved
    and marked as moved.

    Used for the hypothetical "what if" positions of the check searches, as well as for committing a real move.
    """
    moved_piece = piece.moved_to(target)
    return tuple(
        moved_piece if other.position == piece.position else other
        for other in pieces
        if not (other.position == target and other.color != piece.color)
    )


def commit_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> Position:
    """
    Like `apply_move`, but a castling move also relocates the rook next to the king.
    Both pieces move in the same transition, so no half-castled position ever exists.
    """
    position = apply_move(piece, target, pieces)
    if not is_castling_move(piece, target):
        return position

    squares = castling_squares(piece.position, target)
    rook = castling_rook(piece.color, squares.rook_from, position)
    if rook is None:
        raise PositionError(
            f"Cannot castle {piece.position.to_algebraic()}{target.to_algebraic()}: no rook on {squares.rook_from.to_algebraic()}."
        )
    logger.debug(
        "Castling: rook %s -> %s",
        squares.rook_from.to_algebraic(),
        squares.rook_to.to_algebraic(),
    )
    return apply_move(rook, squares.rook_to, position)


# --- CHECK / CHECKMATE ---
def is_in_check(pieces: Sequence[Piece], color: Color) -> bool:
    """Can any of the opponent's pieces move onto the square of your king?"""
    king = find_king(pieces, color)
    return any(
        is_move_valid(piece, king.position, pieces)
        for piece in pieces
        if piece.color != color
    )


def is_castling_path_safe(king: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """
    You cannot castle out of check, nor pass through an attacked square.
    The transit square is tested by placing the king on it. Landing on an attacked square is the regular self-check test.
    """
    if is_in_check(pieces, king.color):
        return False
    transit = castling_squares(king.position, target).king_transit
    return not is_in_check(apply_move(king, transit, pieces), king.color)


def leaves_king_in_check(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """Return True if making the move would put (or leave) your own king in check"""
    return is_in_check(apply_move(piece, target, pieces), piece.color)


def is_move_legal(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """
    Full legality of a move
    ----

    1. The piece can move there (movement rules + blocking pieces)
    2. When castling: the king is not in check and does not pass an attacked square
    3. Your own king is not in check afterwards
    """
    if not is_move_valid(piece, target, pieces):
        return False
    if is_castling_move(piece, target) and not is_castling_path_safe(
        piece, target, pieces
    ):
        return False
    return not leaves_king_in_check(piece, target, pieces)


def legal_moves(pieces: Sequence[Piece], color: Color) -> Iterator[tuple[Piece, Square]]:
    """
    Generate-and-test every move of the given color: all own pieces against all 64 squares.
    Lazy, so callers that only need the first legal move stop the search there.
    """
    for piece in pieces_of(color, pieces):
        for square in ALL_SQUARES:
            if is_move_legal(piece, square, pieces):
                yield piece, square


def has_legal_move(pieces: Sequence[Piece], color: Color) -> bool:
    return next(legal_moves(pieces, color), None) is not None


def is_checkmate(pieces: Sequence[Piece], color: Color) -> bool:
    """
    None of your moves is legal: every candidate is geometrically invalid or leaves your king in check.
    NOTE: being in check is not required, a stalemated side counts as mated as well.
    """
    return not has_legal_move(pieces, color)
