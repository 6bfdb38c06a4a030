"""
Custom exceptions shared by all layers.

Every error raised on purpose derives from GameError, so a transport layer can catch one base class
and reply with the message of the specific error.
"""


class GameError(Exception):
    """Top level exception for anything that went wrong while handling a game request."""


# --- GAME STATE (domain layer) ---
class GameStateError(GameError):
    """The requested transition is not allowed in the current state of the game."""


class CapacityError(GameStateError):
    """The game already holds the maximum number of active players."""


class InsufficientPlayersError(GameStateError):
    """Not enough active players to start the game."""


class GameOverError(GameStateError):
    """No more moves can be played in a finished game."""


class GameNotStartedError(GameStateError):
    """Moves are only accepted once the opening dots have been dealt."""


class TurnOrderError(GameStateError):
    """Someone tried to move while it is another player's turn."""


class IllegalCellError(GameStateError):
    """Target cell is owned by an opponent (or does not exist on the board)."""


# --- ROOMS / PERSISTENCE ---
class RepositoryError(GameError):
    """Something went wrong looking up or storing a room."""


class RoomNotFoundError(RepositoryError):
    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id!r} not found.")


class RoomFullError(RepositoryError):
    def __init__(self, room_id: str, capacity: int) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id!r} is full ({capacity} players).")


# --- REQUEST VALIDATION (api layer) ---
class InvalidRequestError(GameError):
    """Raised inside pydantic validators. Not a ValueError, so pydantic lets it propagate unchanged."""
