"""
Turning clicks on squares into move attempts.

The picking layer reports the square under the cursor when the player clicks (or None when clicking next to the board).
The first click selects one of your own pieces, the second click tries to move it there.
"""

from dataclasses import dataclass
from typing import Optional

from chess3d.chess.board import piece_at
from chess3d.chess.game import GameState, MoveResult, attempt_move
from chess3d.chess.pieces import Piece
from chess3d.chess.square import Square


@dataclass(frozen=True)
class Selection:
    piece: Optional[Piece] = None


@dataclass(frozen=True)
class SelectionResult:
    selection: Selection
    # Only set when the click was forwarded to the turn coordinator
    move: Optional[MoveResult] = None


def select_square(
    state: GameState, selection: Selection, square: Optional[Square]
) -> SelectionResult:
    """Process a single click"""
    if square is None:
        return SelectionResult(Selection())

    if selection.piece is None:
        return SelectionResult(Selection(_selectable_piece(state, square)))

    # A piece is selected: try to move it, then start over regardless of the result
    result = attempt_move(state, selection.piece, square)
    return SelectionResult(Selection(), move=result)


def _selectable_piece(state: GameState, square: Square) -> Optional[Piece]:
    """Only pieces of the side to move can be picked up"""
    if state.is_finished:
        return None
    piece = piece_at(square, state.position)
    if piece is None or piece.color != state.side_to_move:
        return None
    return piece
