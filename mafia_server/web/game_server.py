"""
Socket.IO server that lets players create, join and play Mafia rooms.
"""

import logging
import random
from typing import Any, Optional

from flask import Flask, jsonify, request
from flask_socketio import SocketIO

from ..config.game_config import GameConfig, default_config
from ..core import RoomStore, Scheduler
from .event_emitter import EventEmitter
from .gateway import SocketIOGateway, SocketIOScheduler
from .lifecycle import SessionManager

logger = logging.getLogger(__name__)


def _room_code_from(data: Any) -> Optional[str]:
    """start-game sends a bare room code; accept {roomCode: ...} as well."""
    if isinstance(data, dict):
        data = data.get('roomCode')
    return data if isinstance(data, str) else None


class GameServer:
    """Flask app plus Socket.IO event handlers for the room server."""

    def __init__(self, config: GameConfig = default_config, scheduler: Optional[Scheduler] = None,
                 room_store: Optional[RoomStore] = None, rng: Optional[random.Random] = None):
        self.config = config
        self.app = Flask(__name__)
        self.socketio = SocketIO(self.app,
                                 cors_allowed_origins=config.allowed_origins(),
                                 async_mode=config.async_mode)

        self.event_emitter = EventEmitter(SocketIOGateway(self.socketio))
        self.scheduler = scheduler or SocketIOScheduler(self.socketio)
        self.room_store = room_store or RoomStore()
        self.sessions = SessionManager(self.room_store, self.event_emitter, self.scheduler,
                                       config=config, rng=rng)

        # Setup routes
        self._setup_routes()

        # Setup socketio handlers
        self._setup_socketio()

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/')
        def index():
            return jsonify({"status": "ok", "rooms": len(self.room_store)})

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('connect')
        def handle_connect(auth=None):
            logger.debug("Client connected: %s", request.sid)

        @self.socketio.on('create-room')
        def handle_create_room(data=None):
            username = data.get('username') if isinstance(data, dict) else None
            self.sessions.create_room(request.sid, username if isinstance(username, str) else None)

        @self.socketio.on('join-room')
        def handle_join_room(data=None):
            if not isinstance(data, dict):
                return
            username = data.get('username')
            if not isinstance(username, str) or not username:
                return
            self.sessions.join_room(request.sid, str(data.get('roomCode') or ''), username)

        @self.socketio.on('send-message')
        def handle_send_message(data=None):
            if not isinstance(data, dict):
                return
            code, user, message = data.get('roomCode'), data.get('user'), data.get('message')
            if isinstance(code, str) and isinstance(user, str) and isinstance(message, str):
                self.sessions.send_message(code, user, message)

        @self.socketio.on('start-game')
        def handle_start_game(data=None):
            code = _room_code_from(data)
            if code:
                self.sessions.start_game(request.sid, code)

        @self.socketio.on('night-action')
        def handle_night_action(data=None):
            if not isinstance(data, dict):
                return
            code, action, target = data.get('roomCode'), data.get('action'), data.get('player')
            if isinstance(code, str) and isinstance(action, str) and isinstance(target, str):
                self.sessions.night_action(request.sid, code, action, target)

        @self.socketio.on('disconnect')
        def handle_disconnect(reason=None):
            logger.debug("Client disconnected: %s", request.sid)
            self.sessions.disconnect(request.sid)

    def start(self) -> None:
        """Start the web server."""
        logger.info("Starting Mafia room server on http://%s:%s", self.config.host, self.config.port)
        self.socketio.run(self.app, host=self.config.host, port=self.config.port,
                          debug=False, allow_unsafe_werkzeug=True)
