"""
Session lifecycle: create, join, start, chat, night actions and disconnects.
"""

import logging
import random
from typing import Dict, Optional

from ..core import (
    Room,
    RoomState,
    RoomStore,
    Player,
    ChatMessage,
    ActionKind,
    RoomError,
    Scheduler,
    assign_roles,
    format_elapsed,
)
from ..config.game_config import GameConfig, default_config
from ..phases import NightCycleEngine
from .event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class SessionManager:
    """Applies client requests to the room store and starts games."""

    def __init__(self, room_store: RoomStore, event_emitter: EventEmitter, scheduler: Scheduler,
                 config: GameConfig = default_config, rng: Optional[random.Random] = None):
        self.room_store = room_store
        self.event_emitter = event_emitter
        self.scheduler = scheduler
        self.config = config
        self.rng = rng or random.Random(config.random_seed)
        self.engines: Dict[str, NightCycleEngine] = {}  # {room code: running engine}

    def create_room(self, sid: str, username: Optional[str] = None) -> str:
        """New pre-game room hosted by sid."""
        code = self.room_store.create_room(sid)
        self.event_emitter.emit_room_created(sid, code)

        if self.config.host_joins_as_player and username:
            self.join_room(sid, code, username)
        return code

    def join_room(self, sid: str, code: str, username: str) -> Optional[Player]:
        """Add sid to a room, or report why it can't join."""
        try:
            player = self.room_store.add_player(code, sid, username)
        except RoomError as e:
            logger.info("[ROOM] %s rejected from %s: %s", username, code, e.error_type)
            self.event_emitter.emit_room_error(sid, e.to_payload())
            return None

        room = self.room_store.get_room(code)
        if room is None:
            return None

        self.event_emitter.join(sid, code)
        if room.host:
            self.event_emitter.emit_player_joined(room.host, username)
        self.event_emitter.emit_room_joined(sid, room.snapshot())
        return player

    def send_message(self, code: str, user: str, message: str) -> Optional[ChatMessage]:
        """Store and relay a chat line. Only while a game is running."""
        room = self.room_store.get_room(code)
        if room is None:
            return None

        with room.lock:
            if not room.is_in_progress:
                return None
            chat = ChatMessage(user=user, message=message, timestamp=self.scheduler.now_ms())
            room.add_message(chat)

        self.event_emitter.emit_new_message(code, chat.to_dict())
        return chat

    def start_game(self, sid: str, code: str) -> Optional[NightCycleEngine]:
        """
        Host-only. Assigns roles, tells each player theirs, starts the game
        timer and the night cycle engine. Silently refused when too few players.
        """
        room = self.room_store.get_room(code)
        if room is None or room.host != sid:
            return None

        with room.lock:
            if room.state != RoomState.PRE_GAME:
                return None
            if not assign_roles(list(room.players.values()), self.rng, self.config.min_players):
                logger.info("[GAME] Room %s: start refused with %d players", code, len(room.players))
                return None

            room.transition_to(RoomState.IN_PROGRESS)
            room.start_time = self.scheduler.now_ms()
            roles = [(pid, p.role.value) for pid, p in room.players.items()]
            players = room.public_players()

        logger.info("[GAME] Room %s: game started with %d players", code, len(players))

        for pid, role in roles:
            self.event_emitter.emit_your_role(pid, role)

        engine = NightCycleEngine(room, self.room_store, self.event_emitter, self.scheduler,
                                  config=self.config, rng=self.rng)
        self.engines[code] = engine

        self.scheduler.start_background_task(self.run_game_timer, room)
        self.event_emitter.emit_game_started(code, room.start_time, players)
        self.scheduler.start_background_task(self.run_engine, engine)
        return engine

    def run_game_timer(self, room: Room) -> None:
        """Broadcast elapsed game time until the game ends or the room is gone."""
        while True:
            self.scheduler.sleep(self.config.timer_interval)
            if not (self.room_store.is_active(room) and room.is_in_progress):
                break
            elapsed = format_elapsed(room.start_time, self.scheduler.now_ms())
            self.event_emitter.emit_game_timer(room.code, elapsed)

    def run_engine(self, engine: NightCycleEngine) -> None:
        """Background task body for a room's night cycles."""
        code = engine.room.code
        try:
            engine.run()
        except Exception:
            logger.exception("[GAME] Room %s: night cycle crashed", code)
        finally:
            if self.engines.get(code) is engine:
                del self.engines[code]

    def night_action(self, sid: str, code: str, action: str, target: str) -> bool:
        """Forward a night action to the room's current night, if any."""
        engine = self.engines.get(code)
        if engine is None:
            return False

        try:
            kind = ActionKind(action)
        except ValueError:
            logger.debug("[NIGHT] Unknown action %r from %s", action, sid)
            return False

        cycle_key = engine.cycle_key
        if cycle_key is None:
            return False
        return engine.submit_action(cycle_key, sid, kind, target)

    def disconnect(self, sid: str) -> None:
        """Drop sid from every room; a departing host takes the room down."""
        for room in self.room_store.rooms_with_member(sid):
            self.room_store.remove_player(room.code, sid)

            if room.host == sid:
                logger.info("[ROOM] Host left %s, closing room", room.code)
                self.event_emitter.emit_host_disconnected(room.code)
                self.event_emitter.close(room.code)
                self.room_store.destroy_room(room.code)
                self.engines.pop(room.code, None)
