"""
Event emitter for sending game events to connected players.
"""

import logging
from typing import Any, Dict, List, Optional

from .gateway import Gateway

logger = logging.getLogger(__name__)

SYSTEM_USER = "System"


class EventEmitter:
    """Typed outbound events, delivered through a gateway."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def _emit(self, event_type: str, data: Any = None, to: Optional[str] = None) -> None:
        """Emit an event to a room or a single connection."""
        try:
            self.gateway.emit(event_type, data, to=to)
        except Exception:
            # A failed delivery must not break the game loop
            logger.exception("Error emitting %s to %s", event_type, to)

    def join(self, sid: str, room_code: str) -> None:
        """Subscribe a connection to room broadcasts."""
        self.gateway.enter_room(sid, room_code)

    def close(self, room_code: str) -> None:
        """Drop every subscription to a room."""
        try:
            self.gateway.close_room(room_code)
        except Exception:
            logger.exception("Error closing room %s", room_code)

    # Replies to a single connection

    def emit_room_created(self, sid: str, room_code: str) -> None:
        self._emit("room-created", room_code, to=sid)

    def emit_room_joined(self, sid: str, snapshot: Dict[str, Any]) -> None:
        self._emit("room-joined", snapshot, to=sid)

    def emit_room_error(self, sid: str, payload: Dict[str, Any]) -> None:
        self._emit("room-error", payload, to=sid)

    def emit_player_joined(self, host_sid: str, username: str) -> None:
        """Tell the host about a new player."""
        self._emit("player-joined", username, to=host_sid)

    def emit_your_role(self, sid: str, role: Optional[str]) -> None:
        """Privately tell one player their role."""
        self._emit("your-role", role, to=sid)

    # Room broadcasts

    def emit_game_started(self, room_code: str, start_time: int, players: List[Dict[str, Any]]) -> None:
        self._emit("game-started", {"startTime": start_time, "players": players}, to=room_code)

    def emit_game_timer(self, room_code: str, elapsed: str) -> None:
        self._emit("game-timer", elapsed, to=room_code)

    def emit_new_message(self, room_code: str, message: Dict[str, Any]) -> None:
        self._emit("new-message", message, to=room_code)

    def emit_announcement(self, room_code: str, text: str, timestamp: int) -> None:
        """System chat line. Not stored in the room history."""
        self.emit_new_message(room_code, {"user": SYSTEM_USER, "message": text, "timestamp": timestamp})

    def emit_night_resolution(self, room_code: str, actions: List[Dict[str, str]]) -> None:
        self._emit("night-cycle-resolution", {"actions": actions}, to=room_code)

    def emit_game_over(self, room_code: str, winner: str) -> None:
        self._emit("game-over", {"winner": winner}, to=room_code)

    def emit_host_disconnected(self, room_code: str) -> None:
        self._emit("host-disconnected", to=room_code)
