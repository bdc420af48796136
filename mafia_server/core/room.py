"""
Room state: membership, chat history and the lobby/game lifecycle.
"""

from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Dict, List, Optional, Any

from .player import Player, ChatMessage
from .roles import Role
from .exceptions import InvalidStateTransitionError


class RoomState(Enum):
    """Room lifecycle state. Only ever moves forward."""
    PRE_GAME = "pre-game"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


_STATE_ORDER = [RoomState.PRE_GAME, RoomState.IN_PROGRESS, RoomState.COMPLETED]


@dataclass(eq=False)
class Room:
    """One game session."""
    code: str
    host: Optional[str] = None
    state: RoomState = RoomState.PRE_GAME
    start_time: Optional[int] = None  # epoch milliseconds
    players: Dict[str, Player] = field(default_factory=dict)  # {player id: Player}
    messages: List[ChatMessage] = field(default_factory=list)
    lock: RLock = field(default_factory=RLock, repr=False)

    @property
    def is_in_progress(self) -> bool:
        return self.state == RoomState.IN_PROGRESS

    def transition_to(self, new_state: RoomState) -> None:
        """Advance the lifecycle state. Moving backwards raises."""
        with self.lock:
            if _STATE_ORDER.index(new_state) < _STATE_ORDER.index(self.state):
                raise InvalidStateTransitionError(self.code, self.state.value, new_state.value)
            self.state = new_state

    def get_player_by_username(self, username: str) -> Optional[Player]:
        """Find a player by exact username."""
        for player in self.players.values():
            if player.username == username:
                return player
        return None

    def get_alive_players(self) -> List[Player]:
        """Get all alive players."""
        return [p for p in self.players.values() if p.is_alive]

    def get_alive_by_role(self, role: Role) -> List[Player]:
        """Get alive players holding the given role."""
        return [p for p in self.get_alive_players() if p.role == role]

    def get_alive_non_mafia(self) -> List[Player]:
        """Alive townspeople, doctors and detectives."""
        return [p for p in self.get_alive_players() if p.role is not None and not p.is_mafia]

    def add_message(self, message: ChatMessage) -> None:
        with self.lock:
            self.messages.append(message)

    def public_players(self) -> List[Dict[str, Any]]:
        """Membership list without roles."""
        return [p.to_public_dict() for p in self.players.values()]

    def snapshot(self) -> Dict[str, Any]:
        """Room view sent to a player who just joined."""
        with self.lock:
            return {
                "roomCode": self.code,
                "messages": [m.to_dict() for m in self.messages],
                "users": self.public_players(),
                "state": self.state.value,
                "startTime": self.start_time,
            }
