"""
In-memory registry of active rooms.
"""

import logging
import secrets
from threading import Lock
from typing import Callable, Dict, List, Optional

from .room import Room, RoomState
from .player import Player
from .exceptions import RoomNotFoundError, UsernameTakenError, GameInProgressError

logger = logging.getLogger(__name__)


def generate_room_code() -> str:
    """Eight upper-case hex characters."""
    return secrets.token_hex(4).upper()


class RoomStore:
    """Owns every active room, keyed by room code."""

    def __init__(self, code_factory: Callable[[], str] = generate_room_code):
        self._rooms: Dict[str, Room] = {}
        self._lock = Lock()
        self._code_factory = code_factory

    def __len__(self) -> int:
        return len(self._rooms)

    def create_room(self, host_id: str) -> str:
        """Register an empty pre-game room hosted by host_id and return its code."""
        with self._lock:
            code = self._code_factory()
            while code in self._rooms:
                code = self._code_factory()
            self._rooms[code] = Room(code=code, host=host_id)
        logger.info("[ROOM] Created %s (host %s)", code, host_id)
        return code

    def get_room(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def require_room(self, code: str) -> Room:
        """Get a room or raise RoomNotFoundError."""
        room = self.get_room(code)
        if room is None:
            raise RoomNotFoundError(code)
        return room

    def is_active(self, room: Room) -> bool:
        """Check that this exact room object is still registered."""
        return self._rooms.get(room.code) is room

    def add_player(self, code: str, player_id: str, username: str) -> Player:
        """
        Add a player to a pre-game room.

        Raises:
            RoomNotFoundError: no room with this code
            UsernameTakenError: another player already uses this username
            GameInProgressError: the room has left the pre-game state
        """
        room = self.require_room(code)
        with room.lock:
            if room.get_player_by_username(username) is not None:
                raise UsernameTakenError(code)
            if room.state != RoomState.PRE_GAME:
                raise GameInProgressError(code)
            player = Player(id=player_id, username=username)
            room.players[player_id] = player
        logger.info("[ROOM] %s joined %s", username, code)
        return player

    def remove_player(self, code: str, player_id: str) -> Optional[Player]:
        """Remove a player entry. Returns the removed player, if any."""
        room = self.get_room(code)
        if room is None:
            return None
        with room.lock:
            player = room.players.pop(player_id, None)
        if player:
            logger.info("[ROOM] %s left %s", player.username, code)
        return player

    def destroy_room(self, code: str) -> Optional[Room]:
        """Drop a room from the registry."""
        with self._lock:
            room = self._rooms.pop(code, None)
        if room:
            logger.info("[ROOM] Destroyed %s", code)
        return room

    def rooms_with_member(self, member_id: str) -> List[Room]:
        """Rooms in which member_id is a player or the host."""
        with self._lock:
            rooms = list(self._rooms.values())
        return [r for r in rooms if member_id in r.players or r.host == member_id]
