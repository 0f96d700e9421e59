"""
The turn coordinator is the entrypoint into the domain layer for the service layer (and any input layer).
It owns "whose turn is it", asks the rules engine if a move is allowed, and applies or rejects it.

The state is explicit: `attempt_move()` takes a GameState and returns a MoveResult carrying the (new) GameState.
Nothing is stored between calls, so a game can be replayed deterministically from its list of moves.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Iterable, Optional, Self

from chess3d.chess.board import (
    captured_piece,
    commit_move,
    is_castling_path_safe,
    is_checkmate,
    leaves_king_in_check,
    piece_at,
    starting_position,
)
from chess3d.chess.castling import castling_squares, is_castling_move
from chess3d.chess.moves import Move, Position, is_move_valid
from chess3d.chess.pieces import Color, Piece
from chess3d.chess.square import Square
from chess3d.core.exceptions import GameStateError, IllegalMoveError
from chess3d.core.models import GameModel

logger = logging.getLogger(__name__)


class Status(Enum):
    IN_PROGRESS = auto()
    CHECKMATE = auto()


class Rejection(Enum):
    """Why a move attempt did not change the game"""

    GAME_FINISHED = auto()
    NOT_YOUR_TURN = auto()
    PIECE_NOT_FOUND = auto()
    ILLEGAL_MOVE = auto()
    SELF_CHECK = auto()


@dataclass(frozen=True)
class Outcome:
    """How the game ended: the side that delivered mate."""

    winner: Color


@dataclass(frozen=True)
class GameState:
    position: Position
    side_to_move: Color
    outcome: Optional[Outcome] = None
    history: tuple[Move, ...] = ()

    @classmethod
    def new(cls) -> Self:
        """Standard starting position, White to move"""
        return cls(position=starting_position(), side_to_move=Color.WHITE)

    @property
    def is_finished(self) -> bool:
        return self.outcome is not None

    @property
    def winner(self) -> Optional[Color]:
        return self.outcome.winner if self.outcome else None

    @property
    def status(self) -> Status:
        return Status.IN_PROGRESS if self.outcome is None else Status.CHECKMATE

    def status_text(self) -> str:
        """The line of text the UI shows: who is to move, or how the game ended"""
        if self.outcome is None:
            return f"Next move: {self.side_to_move.name.capitalize()}"
        return f"{self.outcome.winner.name.capitalize()} Wins!"


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a move attempt.

    On a rejection `state` is the unchanged state that was passed in.
    `captured` and `rook_move` let the rendering layer remove / animate the pieces involved.
    """

    state: GameState
    rejection: Optional[Rejection] = None
    captured: Optional[Piece] = None
    rook_move: Optional[Move] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def attempt_move(state: GameState, piece: Piece, target: Square) -> MoveResult:
    """
    Attempt to make a move
    -----

    1. The game must still be running, and it must be your turn
    2. The piece must be able to move there (for castling: not out of / through check)
    3. The move cannot leave your own king in check
    4. Commit the move (moving the rook as well when castling)
    5. An opponent without any legal move is mated and the game ends, otherwise it is the opponent's turn
    """
    rejection = _pre_move_rejection(state, piece)
    if rejection:
        return _reject(state, rejection, piece, target)

    # use the live piece: its `has_moved` is authoritative
    live_piece = piece_at(piece.position, state.position)
    assert live_piece is not None
    position = state.position

    if not is_move_valid(live_piece, target, position):
        return _reject(state, Rejection.ILLEGAL_MOVE, live_piece, target)

    castling = is_castling_move(live_piece, target)
    if castling and not is_castling_path_safe(live_piece, target, position):
        return _reject(state, Rejection.ILLEGAL_MOVE, live_piece, target)

    # NOTE: only the king's new square matters for exposing the king, so the single-piece relocation suffices.
    if leaves_king_in_check(live_piece, target, position):
        return _reject(state, Rejection.SELF_CHECK, live_piece, target)

    captured = captured_piece(live_piece, target, position)
    new_position = commit_move(live_piece, target, position)
    rook_move = None
    if castling:
        squares = castling_squares(live_piece.position, target)
        rook_move = Move(squares.rook_from, squares.rook_to)

    mover = live_piece.color
    opponent = mover.opposite
    outcome = None
    if is_checkmate(new_position, opponent):
        outcome = Outcome(winner=mover)
        logger.info("Checkmate. %s wins.", mover.name.capitalize())

    new_state = replace(
        state,
        position=new_position,
        side_to_move=mover if outcome else opponent,
        outcome=outcome,
        history=state.history + (Move(live_piece.position, target),),
    )
    return MoveResult(new_state, captured=captured, rook_move=rook_move)


def attempt_uci(state: GameState, uci: str) -> MoveResult:
    """Convenience: attempt the move written in UCI notation (ex. 'e2e4')"""
    move = Move.from_uci(uci)
    piece = piece_at(move.from_square, state.position)
    if piece is None:
        return _reject(state, Rejection.PIECE_NOT_FOUND, None, move.to_square)
    return attempt_move(state, piece, move.to_square)


def replay(moves_uci: Iterable[str]) -> GameState:
    """Rebuild a game from its recorded moves. Every recorded move has to be accepted."""
    state = GameState.new()
    for uci in moves_uci:
        result = attempt_uci(state, uci)
        if not result.accepted:
            assert result.rejection is not None
            raise IllegalMoveError(
                f"Cannot replay move {uci!r}: {result.rejection.name.lower()}"
            )
        state = result.state
    return state


# --- CONVERSION FROM/TO THE SERVICE LAYER MODEL ---
def to_model(state: GameState) -> GameModel:
    """Encode into a format the Service layer uses"""
    return GameModel(
        moves_uci=[move.to_uci() for move in state.history],
        side_to_move=state.side_to_move.name.lower(),
        status=state.status.name.lower(),
        winner=state.winner.name.lower() if state.winner else None,
    )


def from_model(model: GameModel) -> GameState:
    """
    Rebuild the game by replaying its moves.
    The stored status / side to move / winner must agree with the replayed game, otherwise the record is corrupt.
    """
    status_name = model.status.replace(" ", "_").upper()
    if status_name not in Status.__members__:
        raise GameStateError(
            f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.name.lower() for status in Status])}"
        )

    state = replay(model.moves_uci)
    stored_winner = model.winner.lower() if model.winner else None
    if (
        state.status != Status[status_name]
        or state.side_to_move.name.lower() != model.side_to_move.lower()
        or (state.winner.name.lower() if state.winner else None) != stored_winner
    ):
        raise GameStateError(
            f"Stored game does not match its moves: status {model.status!r}, {model.side_to_move} to move, winner {model.winner!r}."
        )
    return state


# -- PRIVATE HELPERS ---
def _pre_move_rejection(state: GameState, piece: Piece) -> Optional[Rejection]:
    """Checks that do not depend on the move itself"""
    if state.is_finished:
        return Rejection.GAME_FINISHED
    if piece.color != state.side_to_move:
        return Rejection.NOT_YOUR_TURN
    live_piece = piece_at(piece.position, state.position)
    if (
        live_piece is None
        or live_piece.color != piece.color
        or live_piece.kind != piece.kind
    ):
        return Rejection.PIECE_NOT_FOUND
    return None


def _reject(
    state: GameState, rejection: Rejection, piece: Optional[Piece], target: Square
) -> MoveResult:
    logger.debug(
        "Move rejected (%s): %s to %s",
        rejection.name.lower(),
        piece.position if piece else "-",
        target,
    )
    return MoveResult(state, rejection=rejection)
