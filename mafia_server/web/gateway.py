"""
Pub/sub gateway between the game and connected clients.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from flask_socketio import SocketIO

from ..core.scheduler import Scheduler


class Gateway(ABC):
    """Delivers events to a room or to a single connection."""

    @abstractmethod
    def emit(self, event: str, data: Any = None, to: Optional[str] = None) -> None:
        """Send an event to a room code or a single sid (None broadcasts)."""
        pass

    @abstractmethod
    def enter_room(self, sid: str, room: str) -> None:
        """Subscribe a connection to a room's broadcasts."""
        pass

    @abstractmethod
    def close_room(self, room: str) -> None:
        """Remove every connection from a room."""
        pass


class SocketIOGateway(Gateway):
    """Gateway backed by a Flask-SocketIO server."""

    def __init__(self, socketio: SocketIO, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event: str, data: Any = None, to: Optional[str] = None) -> None:
        args = () if data is None else (data,)
        self.socketio.emit(event, *args, to=to, namespace=self.namespace)

    def enter_room(self, sid: str, room: str) -> None:
        # Works outside a request context, unlike flask_socketio.join_room
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def close_room(self, room: str) -> None:
        self.socketio.close_room(room, namespace=self.namespace)


class SocketIOScheduler(Scheduler):
    """Scheduler using the Socket.IO server's async mode for sleeps and tasks."""

    def __init__(self, socketio: SocketIO):
        self.socketio = socketio

    def sleep(self, seconds: float) -> None:
        self.socketio.sleep(seconds)

    def start_background_task(self, target: Callable[..., Any], *args, **kwargs) -> Any:
        return self.socketio.start_background_task(target, *args, **kwargs)
