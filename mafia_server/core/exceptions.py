"""
Exceptions for room and game-state errors.
"""


class RoomError(Exception):
    """Recoverable, user-facing room error reported back to the requester."""

    error_type = "room-error"
    default_message = "Room error"

    def __init__(self, room_code: str, message: str = ""):
        self.room_code = room_code
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        """Payload for the room-error event."""
        return {"type": self.error_type, "message": self.message}


class RoomNotFoundError(RoomError):
    """Raised when a room code does not name an active room."""

    error_type = "not-found"
    default_message = "Room does not exist"


class UsernameTakenError(RoomError):
    """Raised when a username is already used by a player in the room."""

    error_type = "username-taken"
    default_message = "Username is already in use"


class GameInProgressError(RoomError):
    """Raised when joining a room whose game has already started."""

    error_type = "game-in-progress"
    default_message = "Game is already in session"


class InvalidStateTransitionError(Exception):
    """Raised when a room state would move backwards."""

    def __init__(self, room_code: str, current: str, requested: str):
        self.room_code = room_code
        self.current = current
        self.requested = requested
        super().__init__(f"Room {room_code} cannot move from {current} to {requested}")


class RoleAlreadyAssignedError(Exception):
    """Raised when a role is assigned to a player that already has one."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Player {username} already has a role")
