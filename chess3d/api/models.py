"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from chess3d.chess.game import GameState, MoveResult
from chess3d.chess.moves import Move
from chess3d.chess.pieces import Piece
from chess3d.core.exceptions import InvalidRequestError
from chess3d.core.shared_types import Color, PieceType, Status


# --- REQUEST MODELS ---
def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character = value[0].lower()
    rank_character = value[1]
    return file_character in "abcdefgh" and rank_character in "12345678"


class CreateGameRequest(BaseModel):
    """Games always start from the standard position. Optionally continue from a list of moves (UCI notation)."""

    moves_uci: list[str] = []

    @field_validator("moves_uci")
    @classmethod
    def validate_moves(cls, value: list[str]) -> list[str]:
        for uci in value:
            if len(uci) != 4 or not (
                _is_algebraic_notation(uci[:2]) and _is_algebraic_notation(uci[2:])
            ):
                raise InvalidRequestError(f"Cannot interpret {uci!r} as a UCI move.")
        return [uci.lower() for uci in value]


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value.lower()

    def to_uci(self) -> str:
        return f"{self.from_square}{self.to_square}"


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    """What the rendering layer needs to draw (or remove) a piece"""

    kind: PieceType
    color: Color
    square: str

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(
            kind=PieceType[piece.kind.name],
            color=Color[piece.color.name],
            square=piece.position.to_algebraic(),
        )


class GameResponse(BaseModel):
    game_id: UUID
    side_to_move: Color
    status: Status
    winner: Optional[Color]
    status_text: str
    pieces: list[PieceView]
    move_history: list[str]

    @classmethod
    def from_state(cls, game_id: UUID, state: GameState) -> Self:
        return cls(**_state_fields(game_id, state))


class MoveResponse(GameResponse):
    """Game after an accepted move + the pieces the rendering layer has to remove / slide along"""

    captured: Optional[PieceView]
    rook_move: Optional[str]

    @classmethod
    def from_result(cls, game_id: UUID, result: MoveResult) -> Self:
        return cls(
            **_state_fields(game_id, result.state),
            captured=PieceView.from_piece(result.captured) if result.captured else None,
            rook_move=_uci_or_none(result.rook_move),
        )


def _state_fields(game_id: UUID, state: GameState) -> dict:
    return {
        "game_id": game_id,
        "side_to_move": Color[state.side_to_move.name],
        "status": Status[state.status.name],
        "winner": Color[state.winner.name] if state.winner else None,
        "status_text": state.status_text(),
        "pieces": [PieceView.from_piece(piece) for piece in state.position],
        "move_history": [move.to_uci() for move in state.history],
    }


def _uci_or_none(move: Optional[Move]) -> Optional[str]:
    return move.to_uci() if move else None
