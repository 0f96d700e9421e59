"""Orchestration of communication from the request models to the turn coordinator and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from chess3d.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    MoveResponse,
)
from chess3d.chess.game import (
    GameState,
    MoveResult,
    Rejection,
    attempt_uci,
    from_model,
    replay,
    to_model,
)
from chess3d.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from chess3d.core.models import GameModel
from chess3d.db.repository import GameRepository

logger = logging.getLogger(__name__)

REJECTION_ERRORS: dict[Rejection, type[GameError]] = {
    Rejection.GAME_FINISHED: GameStateError,
    Rejection.NOT_YOUR_TURN: NotYourTurnError,
    Rejection.PIECE_NOT_FOUND: IllegalMoveError,
    Rejection.ILLEGAL_MOVE: IllegalMoveError,
    Rejection.SELF_CHECK: IllegalMoveError,
}


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard position (optionally after some opening moves)."""

        # Replaying validates the moves
        new_game = replay(request.moves_uci)

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(to_model(new_game))
        logger.info("Created game %s", game_id)

        return GameResponse.from_state(game_id, from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used by the rendering / UI layer to show the position and whose turn it is.
        """
        game = self._load_game(request.game_id)
        return GameResponse.from_state(request.game_id, game)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A rejected move raises, and nothing gets stored."""

        game = self._load_game(request.game_id)

        result = attempt_uci(game, request.to_uci())
        if not result.accepted:
            self._raise_rejection(request, result)

        self.repo.update_game(request.game_id, to_model(result.state))
        if result.state.is_finished:
            logger.info(
                "Game %s finished: %s", request.game_id, result.state.status_text()
            )

        return MoveResponse.from_result(request.game_id, result)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _load_game(self, game_id: UUID) -> GameState:
        return from_model(self._fetch_game(game_id))

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    def _raise_rejection(self, request: MoveRequest, result: MoveResult) -> None:
        assert result.rejection is not None
        error = REJECTION_ERRORS[result.rejection]
        logger.debug(
            "Game %s: move %s rejected (%s)",
            request.game_id,
            request.to_uci(),
            result.rejection.name.lower(),
        )
        raise error(
            f"Move not allowed: {request.to_uci()} ({result.rejection.name.lower().replace('_', ' ')})"
        )
