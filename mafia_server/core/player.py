"""
Player and chat message records.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum

from .roles import Role
from .exceptions import RoleAlreadyAssignedError


class PlayerStatus(Enum):
    """Player status in the game."""
    ALIVE = "alive"
    DEAD = "dead"


@dataclass
class Player:
    """Represents a connected participant in a room."""
    id: str  # connection identity (socket sid)
    username: str
    status: PlayerStatus = PlayerStatus.ALIVE
    role: Optional[Role] = None

    @property
    def is_alive(self) -> bool:
        """Check if player is alive."""
        return self.status == PlayerStatus.ALIVE

    @property
    def is_mafia(self) -> bool:
        """Check if player is mafia."""
        return self.role is not None and self.role.is_mafia

    def assign_role(self, role: Role) -> None:
        """Set the hidden role. A role can only be set once."""
        if self.role is not None:
            raise RoleAlreadyAssignedError(self.username)
        self.role = role

    def kill(self) -> None:
        """Mark player as dead."""
        self.status = PlayerStatus.DEAD

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize for other players. Roles never leave the server this way."""
        return {"username": self.username, "status": self.status.value}


@dataclass(frozen=True)
class ChatMessage:
    """A chat line stored on a room."""
    user: str
    message: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user, "message": self.message, "timestamp": self.timestamp}
