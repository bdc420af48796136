"""
Tests for the room registry and room state.
"""

import re
import pytest

from mafia_server.core import (
    RoomStore,
    RoomState,
    Role,
    ChatMessage,
    RoomNotFoundError,
    UsernameTakenError,
    GameInProgressError,
    InvalidStateTransitionError,
)
from conftest import HOST_SID, USERNAMES, sid_for


def test_create_room(room_store):
    """Test that a new room is empty, pre-game and hosted by its creator."""
    code = room_store.create_room("creator")
    room = room_store.get_room(code)

    assert re.fullmatch(r"[0-9A-F]{8}", code)
    assert room.host == "creator"
    assert room.state == RoomState.PRE_GAME
    assert room.players == {}
    assert room.messages == []
    assert room.start_time is None


def test_create_room_skips_codes_in_use():
    codes = iter(["AAAA0000", "AAAA0000", "BBBB1111"])
    store = RoomStore(code_factory=lambda: next(codes))

    assert store.create_room("h1") == "AAAA0000"
    assert store.create_room("h2") == "BBBB1111"
    assert len(store) == 2


def test_get_room_unknown(room_store):
    assert room_store.get_room("NOPE") is None
    with pytest.raises(RoomNotFoundError):
        room_store.require_room("NOPE")


def test_add_player(room_store):
    code = room_store.create_room(HOST_SID)
    player = room_store.add_player(code, "sid-1", "alice")

    assert player.username == "alice"
    assert player.is_alive
    assert player.role is None
    assert room_store.get_room(code).players["sid-1"] is player


def test_add_player_unknown_room(room_store):
    with pytest.raises(RoomNotFoundError) as exc_info:
        room_store.add_player("NOPE", "sid-1", "alice")
    assert exc_info.value.error_type == "not-found"
    assert exc_info.value.to_payload() == {"type": "not-found", "message": "Room does not exist"}


def test_add_player_username_taken(room_store):
    """A room never holds two players with the same username."""
    code = room_store.create_room(HOST_SID)
    room_store.add_player(code, "sid-1", "alice")

    with pytest.raises(UsernameTakenError) as exc_info:
        room_store.add_player(code, "sid-2", "alice")

    assert exc_info.value.error_type == "username-taken"
    assert len(room_store.get_room(code).players) == 1


def test_username_match_is_case_sensitive(room_store):
    code = room_store.create_room(HOST_SID)
    room_store.add_player(code, "sid-1", "alice")
    room_store.add_player(code, "sid-2", "Alice")
    assert len(room_store.get_room(code).players) == 2


@pytest.mark.parametrize("state", [RoomState.IN_PROGRESS, RoomState.COMPLETED])
def test_add_player_after_game_start(lobby, room_store, state):
    """No joins once the game has left pre-game."""
    lobby.transition_to(state)

    with pytest.raises(GameInProgressError) as exc_info:
        room_store.add_player(lobby.code, "sid-late", "late")

    assert exc_info.value.error_type == "game-in-progress"
    assert "sid-late" not in lobby.players


def test_remove_player(lobby, room_store):
    removed = room_store.remove_player(lobby.code, sid_for("B"))

    assert removed.username == "B"
    assert sid_for("B") not in lobby.players
    assert room_store.remove_player(lobby.code, sid_for("B")) is None
    assert room_store.remove_player("NOPE", sid_for("A")) is None


def test_destroy_room(lobby, room_store):
    assert room_store.destroy_room(lobby.code) is lobby
    assert room_store.get_room(lobby.code) is None
    assert not room_store.is_active(lobby)
    assert room_store.destroy_room(lobby.code) is None


def test_rooms_with_member(lobby, room_store):
    """Host counts as a member even without a player entry."""
    other = room_store.create_room("someone-else")

    assert room_store.rooms_with_member(HOST_SID) == [lobby]
    assert room_store.rooms_with_member(sid_for("C")) == [lobby]
    assert room_store.rooms_with_member("someone-else") == [room_store.get_room(other)]
    assert room_store.rooms_with_member("stranger") == []


def test_state_is_monotonic(lobby):
    """pre-game -> in-progress -> completed, never backwards."""
    lobby.transition_to(RoomState.IN_PROGRESS)
    lobby.transition_to(RoomState.COMPLETED)

    with pytest.raises(InvalidStateTransitionError):
        lobby.transition_to(RoomState.IN_PROGRESS)
    with pytest.raises(InvalidStateTransitionError):
        lobby.transition_to(RoomState.PRE_GAME)
    assert lobby.state == RoomState.COMPLETED


def test_snapshot_hides_roles(started_room):
    started_room.add_message(ChatMessage(user="A", message="hi", timestamp=5))
    snapshot = started_room.snapshot()

    assert snapshot["roomCode"] == started_room.code
    assert snapshot["state"] == "in-progress"
    assert snapshot["startTime"] == started_room.start_time
    assert snapshot["messages"] == [{"user": "A", "message": "hi", "timestamp": 5}]
    assert snapshot["users"] == [{"username": u, "status": "alive"} for u in USERNAMES]
    assert "role" not in str(snapshot)


def test_alive_queries(started_room):
    started_room.get_player_by_username("D").kill()

    assert [p.username for p in started_room.get_alive_by_role(Role.TOWNSPEOPLE)] == ["E"]
    assert [p.username for p in started_room.get_alive_non_mafia()] == ["B", "C", "E"]
    assert started_room.get_player_by_username("d") is None
