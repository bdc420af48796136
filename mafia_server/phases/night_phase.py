"""
Night cycle engine: collect hidden actions, resolve them, discuss, check for a winner.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core import Room, RoomState, RoomStore, Role, ActionKind, Scheduler
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

NIGHT_STARTED_MESSAGE = "Night Cycle Started"

CycleKey = Tuple[str, int]


class CyclePhase(Enum):
    """Engine state within the night cycle."""
    IDLE = "idle"
    COLLECTING = "collecting"
    RESOLVING = "resolving"
    DISCUSSING = "discussing"
    EVALUATING = "evaluating"
    FINISHED = "finished"
    STOPPED = "stopped"  # room went away mid-game


class Winner(Enum):
    """Game outcomes."""
    MAFIA = "mafia"
    TOWNSPEOPLE = "townspeople"
    DETECTIVES = "detectives"


@dataclass(frozen=True)
class NightAction:
    """A role's nightly choice targeting a player by username."""
    kind: ActionKind
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"action": self.kind.value, "player": self.target}


@dataclass
class NightActions:
    """Action mailbox for one night of one room. Last submission of a kind wins."""
    room_code: str
    cycle_number: int
    actions: Dict[ActionKind, NightAction] = field(default_factory=dict)
    is_open: bool = True

    @property
    def key(self) -> CycleKey:
        return (self.room_code, self.cycle_number)

    def record(self, action: NightAction) -> None:
        self.actions[action.kind] = action

    def get(self, kind: ActionKind) -> Optional[NightAction]:
        return self.actions.get(kind)

    def close(self) -> None:
        self.is_open = False


@dataclass
class NightResolution:
    """Outcome of resolving one night."""
    cycle_number: int
    kill: Optional[NightAction] = None
    heal: Optional[NightAction] = None
    guess: Optional[NightAction] = None
    fallback_kill: bool = False  # kill target was picked at random
    killed: Optional[str] = None
    winner: Optional[Winner] = None

    def resolved_actions(self) -> List[Dict[str, str]]:
        """Actions in resolution order, as broadcast to the room."""
        return [a.to_dict() for a in (self.kill, self.heal, self.guess) if a is not None]


class NightCycleEngine:
    """
    Drives one room's game from start to a winner.

    Each iteration opens a mailbox keyed by (room code, cycle number), waits
    for the collection window, resolves kill/heal/guess, waits out the
    discussion and evaluates win conditions. Waits go through the injected
    scheduler; no room lock is held while waiting.
    """

    def __init__(self, room: Room, room_store: RoomStore, event_emitter: 'EventEmitter',
                 scheduler: Scheduler, config: GameConfig = default_config,
                 rng: Optional[random.Random] = None):
        self.room = room
        self.room_store = room_store
        self.event_emitter = event_emitter
        self.scheduler = scheduler
        self.config = config
        self.rng = rng or random.Random(config.random_seed)

        self.phase = CyclePhase.IDLE
        self.cycle_number = 0
        self.mailbox: Optional[NightActions] = None
        self.winner: Optional[Winner] = None
        self.history: List[NightResolution] = []

    @property
    def is_active(self) -> bool:
        """Room still registered and its game still running."""
        return self.room_store.is_active(self.room) and self.room.is_in_progress

    @property
    def cycle_key(self) -> Optional[CycleKey]:
        """Key of the currently open mailbox, if any."""
        mailbox = self.mailbox
        if mailbox is None or not mailbox.is_open:
            return None
        return mailbox.key

    def run(self) -> Optional[Winner]:
        """
        Run night cycles until a winner is found or the room goes away.
        Returns the winner, or None if the game was abandoned.
        """
        logger.info("[GAME] Room %s: night cycles begin", self.room.code)

        while self.is_active:
            self.begin_collecting()
            self.scheduler.sleep(self.config.night_duration)
            if not self.is_active:
                break

            resolution = self.resolve()
            if resolution.winner:
                self.finish(resolution.winner)
                return self.winner

            self.phase = CyclePhase.DISCUSSING
            self.scheduler.sleep(self.config.discussion_duration)
            if not self.is_active:
                break

            winner = self.evaluate_outcome()
            if winner:
                self.finish(winner)
                return self.winner

        self.stop()
        return None

    def begin_collecting(self) -> NightActions:
        """Open a fresh action mailbox and announce the night."""
        with self.room.lock:
            self.cycle_number += 1
            self.mailbox = NightActions(self.room.code, self.cycle_number)
            self.phase = CyclePhase.COLLECTING

        logger.info("[NIGHT] Room %s: night %d started", self.room.code, self.cycle_number)
        self.event_emitter.emit_announcement(self.room.code, NIGHT_STARTED_MESSAGE, self.scheduler.now_ms())
        return self.mailbox

    def submit_action(self, cycle_key: CycleKey, player_id: str, kind: ActionKind, target: str) -> bool:
        """
        Record a night action if it belongs to the open mailbox and the
        submitter is alive with the matching role. Returns False when dropped.
        """
        with self.room.lock:
            mailbox = self.mailbox
            if mailbox is None or not mailbox.is_open or mailbox.key != tuple(cycle_key or ()):
                return self._drop(player_id, kind, "no open night for this key")
            if self.room.state != RoomState.IN_PROGRESS:
                return self._drop(player_id, kind, "game not in progress")

            player = self.room.players.get(player_id)
            if player is None or not player.is_alive:
                return self._drop(player_id, kind, "player missing or dead")
            if player.role != kind.actor_role:
                return self._drop(player_id, kind, "wrong role")
            if self.room.get_player_by_username(target) is None:
                return self._drop(player_id, kind, "unknown target")

            mailbox.record(NightAction(kind, target))

        logger.debug("[NIGHT] Room %s: %s submitted %s", self.room.code, player.username, kind.value)
        return True

    def _drop(self, player_id: str, kind: ActionKind, reason: str) -> bool:
        logger.debug("[NIGHT] Room %s: dropped %s from %s (%s)", self.room.code, kind.value, player_id, reason)
        return False

    def resolve(self) -> NightResolution:
        """
        Close the mailbox and apply the night's effects.

        Order: kill (cancelled only by a heal on the same target), then guess.
        A guess on the mafia ends the game and nothing is broadcast here.
        """
        with self.room.lock:
            self.phase = CyclePhase.RESOLVING
            mailbox = self.mailbox or NightActions(self.room.code, self.cycle_number)
            mailbox.close()

            resolution = NightResolution(
                cycle_number=self.cycle_number,
                kill=mailbox.get(ActionKind.KILL),
                heal=mailbox.get(ActionKind.HEAL),
                guess=mailbox.get(ActionKind.GUESS),
            )

            if resolution.kill is None:
                target = self._choose_fallback_target()
                if target is not None:
                    resolution.kill = NightAction(ActionKind.KILL, target)
                    resolution.fallback_kill = True

            if resolution.kill is not None:
                victim = self.room.get_player_by_username(resolution.kill.target)
                healed = resolution.heal is not None and resolution.heal.target == resolution.kill.target
                if victim is not None and victim.is_alive and not healed:
                    victim.kill()
                    resolution.killed = victim.username

            if resolution.guess is not None:
                suspect = self.room.get_player_by_username(resolution.guess.target)
                if suspect is not None and suspect.is_mafia:
                    resolution.winner = Winner.DETECTIVES

        self.history.append(resolution)
        logger.info("[NIGHT] Room %s: night %d resolved, killed=%s, fallback=%s",
                    self.room.code, self.cycle_number, resolution.killed, resolution.fallback_kill)

        if resolution.winner is None:
            self.event_emitter.emit_night_resolution(self.room.code, resolution.resolved_actions())
        return resolution

    def _choose_fallback_target(self) -> Optional[str]:
        """Random alive player other than the acting mafia member."""
        mafia = self.room.get_alive_by_role(Role.MAFIA)
        if not mafia:
            return None
        candidates = [p.username for p in self.room.get_alive_players() if p.username != mafia[0].username]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def evaluate_outcome(self) -> Optional[Winner]:
        """Win check after discussion: no mafia left, or at most one non-mafia left."""
        with self.room.lock:
            self.phase = CyclePhase.EVALUATING
            if not self.room.get_alive_by_role(Role.MAFIA):
                return Winner.TOWNSPEOPLE
            if len(self.room.get_alive_non_mafia()) <= 1:
                return Winner.MAFIA
        return None

    def finish(self, winner: Winner) -> None:
        """Complete the room and announce the winner."""
        with self.room.lock:
            if self.mailbox:
                self.mailbox.close()
            self.phase = CyclePhase.FINISHED
            self.winner = winner
            self.room.transition_to(RoomState.COMPLETED)

        logger.info("[GAME] Room %s: game over, %s win", self.room.code, winner.value)
        if self.room_store.is_active(self.room):
            self.event_emitter.emit_game_over(self.room.code, winner.value)

    def stop(self) -> None:
        """Abandon the loop without broadcasting anything."""
        with self.room.lock:
            if self.mailbox:
                self.mailbox.close()
            if self.phase != CyclePhase.FINISHED:
                self.phase = CyclePhase.STOPPED
        logger.info("[GAME] Room %s: night cycles stopped", self.room.code)
