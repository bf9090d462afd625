"""Custom exceptions. Every layer raises a subclass of GameError so the outer layers can catch one type."""


class GameError(Exception):
    """Root of all errors raised on purpose by this application."""


class GameStateError(GameError):
    """The game is not in a state where the request makes sense (not started, already finished, ...)."""


class IllegalMoveError(GameError):
    """The requested move is not in the legal move set."""


class NotYourTurnError(GameError):
    """A player tried to move while another color is to move."""


class PlayerEliminatedError(GameError):
    """An eliminated color tried to move."""


class RoomError(GameError):
    """Unknown room or player, full room, or an action the player is not allowed to take."""


class InvalidRequestError(GameError):
    """Request data could not be interpreted."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""
