"""Custom exceptions. Every layer raises a subclass of GameError, so callers can catch the whole family at once."""


class GameError(Exception):
    """Top-level exception for anything going wrong inside the chess domain."""


class GameStateError(GameError):
    """The requested operation is not allowed in the current status of the game (ex. moving after checkmate)."""


class IllegalMoveError(GameError):
    """A move that breaks the rules of chess."""


class InvalidSquareError(GameError):
    """Cannot interpret the input as one of the 64 squares."""


class BoardInvariantError(GameError):
    """
    The board is in a state that should never be reached during play (ex. a king is missing).
    Treated as fatal: it indicates a programming error, not bad user input.
    """


class InvalidRequestError(GameError):
    """Data crossing the wire boundary does not validate."""


class OpponentUnavailableError(GameError):
    """The external opponent could not be reached, or replied with something that cannot be read as a move."""
