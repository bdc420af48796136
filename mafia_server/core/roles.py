"""
Role definitions and role assignment for the Mafia game.
"""

import random
from enum import Enum
from typing import List, Optional, Sequence, TYPE_CHECKING

from .exceptions import RoleAlreadyAssignedError

if TYPE_CHECKING:
    from .player import Player


class Role(Enum):
    """Hidden player roles."""
    MAFIA = "mafia"
    DOCTOR = "doctor"
    DETECTIVE = "detective"
    TOWNSPEOPLE = "townspeople"

    @property
    def is_mafia(self) -> bool:
        """Check if role is on the mafia side."""
        return self == Role.MAFIA


class ActionKind(Enum):
    """Night actions and the role allowed to perform each."""
    KILL = "kill"
    HEAL = "heal"
    GUESS = "guess"

    @property
    def actor_role(self) -> Role:
        return ACTION_ROLES[self]


ACTION_ROLES = {
    ActionKind.KILL: Role.MAFIA,
    ActionKind.HEAL: Role.DOCTOR,
    ActionKind.GUESS: Role.DETECTIVE,
}

MIN_PLAYERS = 5


def get_role_distribution(player_count: int) -> List[Role]:
    """
    Get the role list for a game of the given size.
    Returns: 1 mafia, 1 doctor, 1 detective, the rest townspeople.
    """
    special = [Role.MAFIA, Role.DOCTOR, Role.DETECTIVE]
    return special + [Role.TOWNSPEOPLE] * max(player_count - len(special), 0)


def assign_roles(players: Sequence['Player'], rng: Optional[random.Random] = None,
                 min_players: int = MIN_PLAYERS) -> bool:
    """
    Assign hidden roles to players.

    Shuffles the players uniformly and hands out the role distribution in order.
    Returns False without touching any role when there are fewer than
    ``min_players`` players.
    """
    if len(players) < max(min_players, MIN_PLAYERS):
        return False

    for player in players:
        if player.role is not None:
            raise RoleAlreadyAssignedError(player.username)

    shuffled = list(players)
    (rng or random).shuffle(shuffled)

    for player, role in zip(shuffled, get_role_distribution(len(shuffled))):
        player.assign_role(role)

    return True
