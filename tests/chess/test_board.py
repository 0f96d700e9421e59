"""Unit tests for /chess3d/chess/board.py"""

from collections import Counter

import pytest

from chess3d.chess.board import (
    STARTING_DIAGRAM,
    apply_move,
    captured_piece,
    commit_move,
    find_king,
    has_legal_move,
    is_castling_path_safe,
    is_checkmate,
    is_in_check,
    is_move_legal,
    legal_moves,
    leaves_king_in_check,
    piece_at,
    pieces_of,
    position_from_diagram,
    position_to_diagram,
    starting_position,
)
from chess3d.chess.pieces import Color, Piece, PieceKind
from chess3d.chess.square import Square
from chess3d.core.exceptions import PositionError

BACK_RANK_MATE = "7k/8/8/8/8/1q6/8/K6r"
CASTLING_DIAGRAM = "r3k2r/8/8/8/8/8/8/R3K2R"


def sq(algebraic: str) -> Square:
    return Square.from_algebraic(algebraic)


def piece_on(pieces: tuple[Piece, ...], algebraic: str) -> Piece:
    piece = piece_at(sq(algebraic), pieces)
    assert piece is not None, f"no piece on {algebraic}"
    return piece


# -- CREATION LOGIC --
def test_starting_position_layout() -> None:
    pieces = starting_position()
    assert len(pieces) == 32
    assert len({piece.position for piece in pieces}) == 32
    assert not any(piece.has_moved for piece in pieces)

    kinds = Counter(piece.kind for piece in pieces_of(Color.WHITE, pieces))
    assert kinds == {
        PieceKind.PAWN: 8,
        PieceKind.ROOK: 2,
        PieceKind.KNIGHT: 2,
        PieceKind.BISHOP: 2,
        PieceKind.QUEEN: 1,
        PieceKind.KING: 1,
    }
    assert piece_on(pieces, "d1").kind == PieceKind.QUEEN
    assert piece_on(pieces, "e8") == Piece(Color.BLACK, PieceKind.KING, False, sq("e8"))
    assert all(piece_on(pieces, f"{f}2").kind == PieceKind.PAWN for f in "abcdefgh")
    assert all(piece_on(pieces, f"{f}7").color == Color.BLACK for f in "abcdefgh")


@pytest.mark.parametrize(
    "diagram",
    [STARTING_DIAGRAM, BACK_RANK_MATE, CASTLING_DIAGRAM, "/".join(["8"] * 8)],
)
def test_diagram_roundtrip(diagram: str) -> None:
    assert position_to_diagram(position_from_diagram(diagram)) == diagram


def test_diagram_marks_advanced_pawns_as_moved() -> None:
    pieces = position_from_diagram("8/4p3/8/3p4/3P4/8/4P3/8")
    assert not piece_on(pieces, "e2").has_moved
    assert not piece_on(pieces, "e7").has_moved
    assert piece_on(pieces, "d4").has_moved
    assert piece_on(pieces, "d5").has_moved


# -- APPLYING MOVES --
def test_apply_move_relocates_and_marks_moved() -> None:
    pieces = starting_position()
    pawn = piece_on(pieces, "e2")
    after = apply_move(pawn, sq("e4"), pieces)

    assert len(after) == 32
    assert piece_at(sq("e2"), after) is None
    assert piece_on(after, "e4") == Piece(Color.WHITE, PieceKind.PAWN, True, sq("e4"))


def test_apply_move_is_pure() -> None:
    pieces = starting_position()
    pawn = piece_on(pieces, "e2")
    _ = apply_move(pawn, sq("e4"), pieces)
    assert pieces == starting_position()


def test_apply_move_removes_captured_piece() -> None:
    pieces = position_from_diagram("4k3/8/8/3p4/4P3/8/8/4K3")
    pawn = piece_on(pieces, "e4")
    assert captured_piece(pawn, sq("d5"), pieces) == piece_on(pieces, "d5")

    after = apply_move(pawn, sq("d5"), pieces)
    assert len(after) == 3
    assert piece_on(after, "d5").color == Color.WHITE
    assert len({piece.position for piece in after}) == len(after)


def test_no_capture_on_empty_square() -> None:
    pieces = starting_position()
    knight = piece_on(pieces, "g1")
    assert captured_piece(knight, sq("f3"), pieces) is None


def test_apply_move_does_not_move_the_rook() -> None:
    """Single piece relocation: the hypothetical position used for the self-check test"""
    pieces = position_from_diagram(CASTLING_DIAGRAM)
    king = piece_on(pieces, "e1")
    after = apply_move(king, sq("g1"), pieces)
    assert piece_on(after, "h1").kind == PieceKind.ROOK
    assert piece_at(sq("f1"), after) is None


@pytest.mark.parametrize(
    "king_from, king_to, rook_from, rook_to",
    [
        ("e1", "g1", "h1", "f1"),
        ("e1", "c1", "a1", "d1"),
        ("e8", "g8", "h8", "f8"),
        ("e8", "c8", "a8", "d8"),
    ],
)
def test_commit_castling_moves_both_pieces(
    king_from: str, king_to: str, rook_from: str, rook_to: str
) -> None:
    pieces = position_from_diagram(CASTLING_DIAGRAM)
    king = piece_on(pieces, king_from)
    after = commit_move(king, sq(king_to), pieces)

    new_king = piece_on(after, king_to)
    new_rook = piece_on(after, rook_to)
    assert new_king.kind == PieceKind.KING and new_king.has_moved
    assert new_rook.kind == PieceKind.ROOK and new_rook.has_moved
    assert piece_at(sq(king_from), after) is None
    assert piece_at(sq(rook_from), after) is None
    assert len(after) == len(pieces)


def test_commit_regular_move_equals_apply_move() -> None:
    pieces = starting_position()
    knight = piece_on(pieces, "b1")
    assert commit_move(knight, sq("c3"), pieces) == apply_move(knight, sq("c3"), pieces)


# -- FINDING THE KING --
def test_find_king() -> None:
    pieces = starting_position()
    assert find_king(pieces, Color.WHITE).position == sq("e1")
    assert find_king(pieces, Color.BLACK).position == sq("e8")


@pytest.mark.parametrize("diagram", ["8/8/8/8/8/8/8/4K3", "4k3/8/8/8/8/8/8/3KK3"])
def test_missing_or_duplicate_black_king_is_a_programming_error(diagram: str) -> None:
    pieces = position_from_diagram(diagram.replace("KK", "kk"))
    with pytest.raises(PositionError):
        is_in_check(pieces, Color.BLACK)


# -- CHECK --
def test_no_check_in_starting_position() -> None:
    pieces = starting_position()
    assert not is_in_check(pieces, Color.WHITE)
    assert not is_in_check(pieces, Color.BLACK)


@pytest.mark.parametrize(
    "diagram, color",
    [
        ("k3r3/8/8/8/8/8/8/4K3", Color.WHITE),  # rook on the file
        ("k7/8/8/b7/8/8/8/4K3", Color.WHITE),  # bishop on the diagonal
        ("k7/8/8/8/8/3n4/8/4K3", Color.WHITE),  # knight
        ("k7/8/8/8/8/8/3p4/4K3", Color.WHITE),  # pawn d2 takes towards e1
        ("4k3/3P4/8/8/8/8/8/4K3", Color.BLACK),  # white pawn d7 attacks e8
    ],
)
def test_in_check(diagram: str, color: Color) -> None:
    assert is_in_check(position_from_diagram(diagram), color)


@pytest.mark.parametrize(
    "diagram",
    [
        "k3r3/8/8/8/8/8/4P3/4K3",  # rook blocked by own pawn
        "k7/8/8/8/8/8/4p3/4K3",  # pawns do not attack straight ahead
        "k7/8/8/8/8/8/8/r2BK3",  # bishop shields the king
    ],
)
def test_not_in_check(diagram: str) -> None:
    assert not is_in_check(position_from_diagram(diagram), Color.WHITE)


# -- LEGALITY INCLUDING SELF-CHECK --
def test_pinned_piece_cannot_move() -> None:
    pieces = position_from_diagram("k3q3/8/8/8/8/8/4B3/4K3")
    bishop = piece_on(pieces, "e2")
    assert leaves_king_in_check(bishop, sq("d3"), pieces)
    assert not is_move_legal(bishop, sq("d3"), pieces)


def test_king_cannot_step_into_check() -> None:
    pieces = position_from_diagram("k4r2/8/8/8/8/8/8/4K3")
    king = piece_on(pieces, "e1")
    assert not is_move_legal(king, sq("f1"), pieces)
    assert is_move_legal(king, sq("d1"), pieces)


def test_twenty_legal_moves_from_the_start() -> None:
    pieces = starting_position()
    assert len(list(legal_moves(pieces, Color.WHITE))) == 20
    assert len(list(legal_moves(pieces, Color.BLACK))) == 20


def test_castling_path_safety() -> None:
    safe = position_from_diagram("1r2k3/8/8/8/8/8/8/R3K2R")  # b1 attacked: fine for castling queenside
    king = piece_on(safe, "e1")
    assert is_castling_path_safe(king, sq("c1"), safe)
    assert is_move_legal(king, sq("c1"), safe)

    through_check = position_from_diagram("4kr2/8/8/8/8/8/8/R3K2R")
    king = piece_on(through_check, "e1")
    assert not is_castling_path_safe(king, sq("g1"), through_check)
    assert not is_move_legal(king, sq("g1"), through_check)
    assert is_move_legal(king, sq("c1"), through_check)

    out_of_check = position_from_diagram("k3r3/8/8/8/8/8/8/R3K2R")
    king = piece_on(out_of_check, "e1")
    assert not is_castling_path_safe(king, sq("g1"), out_of_check)
    assert not is_move_legal(king, sq("c1"), out_of_check)

    into_check = position_from_diagram("k5r1/8/8/8/8/8/8/R3K2R")
    king = piece_on(into_check, "e1")
    assert is_castling_path_safe(king, sq("g1"), into_check)
    assert not is_move_legal(king, sq("g1"), into_check)


# -- CHECKMATE --
def test_back_rank_mate() -> None:
    """King in the corner, rook gives check along the first rank, queen covers the escape squares"""
    pieces = position_from_diagram(BACK_RANK_MATE)
    assert is_in_check(pieces, Color.WHITE)
    assert not has_legal_move(pieces, Color.WHITE)
    assert is_checkmate(pieces, Color.WHITE)
    assert not is_checkmate(pieces, Color.BLACK)


def test_check_without_mate() -> None:
    """The king can step aside"""
    pieces = position_from_diagram("k3r3/8/8/8/8/8/8/4K3")
    assert is_in_check(pieces, Color.WHITE)
    assert not is_checkmate(pieces, Color.WHITE)
    escapes = {square.to_algebraic() for _, square in legal_moves(pieces, Color.WHITE)}
    assert escapes == {"d1", "d2", "f1", "f2"}


def test_interposing_escapes_mate() -> None:
    """Same back rank mate, but a white rook can block on d1"""
    pieces = position_from_diagram("3R3k/8/8/8/8/1q6/8/K6r")
    assert is_in_check(pieces, Color.WHITE)
    assert not is_checkmate(pieces, Color.WHITE)
    moves = [(piece.position, square) for piece, square in legal_moves(pieces, Color.WHITE)]
    assert moves == [(sq("d8"), sq("d1"))]


def test_capturing_the_checker_escapes_mate() -> None:
    pieces = position_from_diagram("7k/8/8/8/8/1q6/8/K3R2r")
    assert is_in_check(pieces, Color.WHITE) is False
    pieces = position_from_diagram("7k/8/8/8/8/1q6/7R/K6r")
    assert is_in_check(pieces, Color.WHITE)
    assert not is_checkmate(pieces, Color.WHITE)


def test_no_legal_move_without_check_is_mate() -> None:
    """The black king is not attacked, but every square it could go to is"""
    pieces = position_from_diagram("k7/8/1Q6/8/8/8/8/7K")
    assert not is_in_check(pieces, Color.BLACK)
    assert not has_legal_move(pieces, Color.BLACK)
    assert is_checkmate(pieces, Color.BLACK)
    assert not is_checkmate(pieces, Color.WHITE)


def test_check_queries_are_idempotent() -> None:
    pieces = position_from_diagram(BACK_RANK_MATE)
    assert {is_checkmate(pieces, Color.WHITE) for _ in range(3)} == {True}
    assert {is_in_check(pieces, Color.WHITE) for _ in range(3)} == {True}
    assert pieces == position_from_diagram(BACK_RANK_MATE)
