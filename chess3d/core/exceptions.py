"""
Custom exceptions shared by all layers.

The rules engine itself answers questions with booleans and never raises for an illegal move.
These errors are raised at the boundaries: by the service when a move gets rejected, by the repository layer, or
when a position violates an invariant the engine relies on (a programming error, not a user error).
"""


class GameError(Exception):
    """Base class for everything that can go wrong while handling a game."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested operation (ex. it already finished)."""


class IllegalMoveError(GameError):
    """The requested move breaks the rules of chess."""


class NotYourTurnError(GameError):
    """A piece of the color that is not to move was asked to move."""


class PositionError(GameError):
    """The position breaks an invariant of the engine, ex. a side without exactly one king."""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class InvalidRequestError(GameError):
    """Request could not be interpreted (raised by the validators of the request models)."""
