"""
Core game components: rooms, players, roles, and the room registry.
"""

from .roles import Role, ActionKind, assign_roles, get_role_distribution, MIN_PLAYERS
from .player import Player, PlayerStatus, ChatMessage
from .room import Room, RoomState
from .room_store import RoomStore, generate_room_code
from .scheduler import Scheduler, format_elapsed
from .exceptions import (
    RoomError,
    RoomNotFoundError,
    UsernameTakenError,
    GameInProgressError,
    InvalidStateTransitionError,
    RoleAlreadyAssignedError,
)

__all__ = [
    'Role',
    'ActionKind',
    'assign_roles',
    'get_role_distribution',
    'MIN_PLAYERS',
    'Player',
    'PlayerStatus',
    'ChatMessage',
    'Room',
    'RoomState',
    'RoomStore',
    'generate_room_code',
    'Scheduler',
    'format_elapsed',
    'RoomError',
    'RoomNotFoundError',
    'UsernameTakenError',
    'GameInProgressError',
    'InvalidStateTransitionError',
    'RoleAlreadyAssignedError',
]
