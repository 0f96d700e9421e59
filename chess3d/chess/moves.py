"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement rule for each piece kind.

These rules answer "may this piece travel from its square to the target square?". Whether doing so leaves your own king
in check is checked later (see board.py / game.py).
"""

from dataclasses import dataclass
from typing import Callable, Optional, Self, Sequence

from chess3d.chess.castling import castling_rook, castling_squares, is_castling_move
from chess3d.chess.pieces import Color, Piece, PieceKind
from chess3d.chess.square import Square

# The pieces on the board. Order carries no meaning, at most one piece per square.
Position = tuple[Piece, ...]

Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e1g1": the king castles king side (if it is the king standing on e1)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        return cls(from_sq, to_sq)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


# --- BOARD QUERIES ---
def color_at(square: Square, pieces: Sequence[Piece]) -> Optional[Color]:
    """Returns None if the square is empty, the color of the piece standing there otherwise"""
    for piece in pieces:
        if piece.position == square:
            return piece.color
    return None


def displacement(origin: Square, end: Square) -> Vector:
    return end.file - origin.file, end.rank - origin.rank


def squares_between(origin: Square, end: Square) -> list[Square]:
    """
    The squares strictly in between two squares on the same file, rank or diagonal.

    NOTE: The caller has to make sure the squares are on one line. Otherwise this walks along the closest
    straight/diagonal direction, which has no meaning for the rules.
    """
    df, dr = displacement(origin, end)
    step_file = (df > 0) - (df < 0)
    step_rank = (dr > 0) - (dr < 0)
    distance = max(abs(df), abs(dr))
    return [origin.offset(step_file * i, step_rank * i) for i in range(1, distance)]


def is_path_empty(origin: Square, end: Square, pieces: Sequence[Piece]) -> bool:
    """True if no piece stands on the squares strictly in between. Neighbouring squares trivially have an empty path."""
    occupied = {piece.position for piece in pieces}
    return not any(square in occupied for square in squares_between(origin, end))


def is_straight(df: int, dr: int) -> bool:
    """Purely horizontal or vertical (and an actual displacement)"""
    return (df == 0) != (dr == 0)


def is_diagonal(df: int, dr: int) -> bool:
    return df != 0 and abs(df) == abs(dr)


# --- MOVEMENT RULES ---
def is_valid_king_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """
    The king moves a single square in any direction.

    Castling is modelled as a special king move: two files along its own rank, towards an unmoved rook of the same color,
    with every square in between king and rook empty (which includes the square the king passes and the one it lands on).
    NOTE: Castling out of / through check is checked later, as it needs the position to be evaluated for check.
    """
    df, dr = displacement(piece.position, target)
    if max(abs(df), abs(dr)) == 1:
        return True

    if piece.has_moved or not is_castling_move(piece, target):
        return False

    squares = castling_squares(piece.position, target)
    rook = castling_rook(piece.color, squares.rook_from, pieces)
    return rook is not None and is_path_empty(piece.position, squares.rook_from, pieces)


def is_valid_queen_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)"""
    df, dr = displacement(piece.position, target)
    return (is_straight(df, dr) or is_diagonal(df, dr)) and is_path_empty(
        piece.position, target, pieces
    )


def is_valid_bishop_move(
    piece: Piece, target: Square, pieces: Sequence[Piece]
) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    df, dr = displacement(piece.position, target)
    return is_diagonal(df, dr) and is_path_empty(piece.position, target, pieces)


def is_valid_knight_move(
    piece: Piece, target: Square, pieces: Sequence[Piece]
) -> bool:
    """Knights jump, so there is no path to check: {|delta_rank|, |delta_file|} = {1, 2}"""
    df, dr = displacement(piece.position, target)
    return {abs(df), abs(dr)} == {1, 2}


def is_valid_rook_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """Rooks move either horizontally or vertically"""
    df, dr = displacement(piece.position, target)
    return is_straight(df, dr) and is_path_empty(piece.position, target, pieces)


def is_valid_pawn_move(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two in their first move, when both squares are empty
    - takes diagonally (one square forward), only onto an opponent's piece

    White moves up the board, Black moves down the board.
    NOTE: No en passant, no promotion.
    """
    forward = 1 if piece.color == Color.WHITE else -1
    df, dr = displacement(piece.position, target)
    target_color = color_at(target, pieces)

    if df == 0 and dr == forward:
        return target_color is None

    if df == 0 and dr == 2 * forward:
        return (
            not piece.has_moved
            and target_color is None
            and is_path_empty(piece.position, target, pieces)
        )

    if abs(df) == 1 and dr == forward:
        return target_color == piece.color.opposite

    return False


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveRuleFn = Callable[[Piece, Square, Sequence[Piece]], bool]
MOVEMENT_RULES: dict[PieceKind, MoveRuleFn] = {
    PieceKind.KING: is_valid_king_move,
    PieceKind.QUEEN: is_valid_queen_move,
    PieceKind.BISHOP: is_valid_bishop_move,
    PieceKind.KNIGHT: is_valid_knight_move,
    PieceKind.ROOK: is_valid_rook_move,
    PieceKind.PAWN: is_valid_pawn_move,
}


def is_move_valid(piece: Piece, target: Square, pieces: Sequence[Piece]) -> bool:
    """
    Geometric legality of moving `piece` to `target`, ignoring whether your own king ends up in check.

    `pieces` is the full position, including the moving piece on its current square.
    You can never land on a square occupied by a piece of your own color, whatever the piece kind.
    """
    if not target.is_within_bounds():
        return False

    if color_at(target, pieces) == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.kind]
    return movement_rule(piece, target, pieces)
