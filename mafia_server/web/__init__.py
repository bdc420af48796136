"""
Socket.IO server, session lifecycle and outbound events.
"""

from .event_emitter import EventEmitter
from .gateway import Gateway, SocketIOGateway, SocketIOScheduler
from .lifecycle import SessionManager
from .game_server import GameServer

__all__ = ['EventEmitter', 'Gateway', 'SocketIOGateway', 'SocketIOScheduler', 'SessionManager', 'GameServer']
