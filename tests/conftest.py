"""
Pytest fixtures for Mafia room server tests.
"""

import random
import pytest
from typing import Any, Callable, Dict, List, Optional

from mafia_server.core import Room, RoomState, RoomStore, Role, Scheduler
from mafia_server.config.game_config import GameConfig
from mafia_server.phases import NightCycleEngine
from mafia_server.web import EventEmitter, Gateway, SessionManager


class ManualScheduler(Scheduler):
    """
    Virtual clock. sleep() never blocks: it runs the next scripted callback
    (if any) and then advances the clock. Background tasks are only recorded.
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self.clock = start
        self.sleeps: List[float] = []
        self.tasks: List[tuple] = []
        self._during_sleep: List[Optional[Callable[[], Any]]] = []

    def now(self) -> float:
        return self.clock

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if self._during_sleep:
            callback = self._during_sleep.pop(0)
            if callback is not None:
                callback()
        self.clock += seconds

    def during_sleeps(self, *callbacks: Optional[Callable[[], Any]]) -> None:
        """Queue callbacks, one per upcoming sleep. None skips a sleep."""
        self._during_sleep.extend(callbacks)

    def start_background_task(self, target, *args, **kwargs):
        self.tasks.append((target, args, kwargs))
        return None


class RecordingGateway(Gateway):
    """Gateway that keeps everything it was asked to deliver."""

    def __init__(self):
        self.events: List[tuple] = []  # (event, data, to)
        self.members: Dict[str, set] = {}
        self.closed: List[str] = []

    def emit(self, event, data=None, to=None):
        self.events.append((event, data, to))

    def enter_room(self, sid, room):
        self.members.setdefault(room, set()).add(sid)

    def close_room(self, room):
        self.closed.append(room)
        self.members.pop(room, None)

    def sent(self, event: str, to: Optional[str] = None) -> List[Any]:
        """Payloads of every emitted event with this name (and recipient)."""
        return [data for name, data, target in self.events
                if name == event and (to is None or target == to)]

    def names(self) -> List[str]:
        return [name for name, _, _ in self.events]


USERNAMES = ["A", "B", "C", "D", "E"]
HOST_SID = "sid-host"


def sid_for(username: str) -> str:
    return f"sid-{username}"


@pytest.fixture
def game_config() -> GameConfig:
    """Test configuration with the standard timings."""
    return GameConfig(random_seed=1234)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def event_emitter(gateway) -> EventEmitter:
    return EventEmitter(gateway)


@pytest.fixture
def room_store() -> RoomStore:
    return RoomStore()


@pytest.fixture
def sessions(room_store, event_emitter, scheduler, game_config) -> SessionManager:
    return SessionManager(room_store, event_emitter, scheduler, config=game_config,
                          rng=random.Random(game_config.random_seed))


@pytest.fixture
def lobby(room_store) -> Room:
    """Pre-game room hosted by a non-playing host, with players A-E."""
    code = room_store.create_room(HOST_SID)
    for username in USERNAMES:
        room_store.add_player(code, sid_for(username), username)
    return room_store.get_room(code)


@pytest.fixture
def started_room(lobby, scheduler) -> Room:
    """
    In-progress room with fixed roles:
    A mafia, B doctor, C detective, D and E townspeople.
    """
    roles = [Role.MAFIA, Role.DOCTOR, Role.DETECTIVE, Role.TOWNSPEOPLE, Role.TOWNSPEOPLE]
    for username, role in zip(USERNAMES, roles):
        lobby.players[sid_for(username)].assign_role(role)
    lobby.transition_to(RoomState.IN_PROGRESS)
    lobby.start_time = scheduler.now_ms()
    return lobby


@pytest.fixture
def engine(started_room, room_store, event_emitter, scheduler, game_config) -> NightCycleEngine:
    return NightCycleEngine(started_room, room_store, event_emitter, scheduler,
                            config=game_config, rng=random.Random(game_config.random_seed))
