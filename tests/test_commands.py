import pytest

from commands import Cheer, Input, Join, Reset, Start, apply_command
from errors import InvalidPhaseTransition, RoomNotFound, RoundInProgress
from game_state import LOBBY, RUNNING
from settings import JOIN_SPECTATE


def test_join_then_start(room):
    participant = apply_command(room, Join(sid="sid-1", name="Alice"), now=10.0)
    assert room.subscribers == {"sid-1": "participant"}
    assert apply_command(room, Start(), now=20.0)
    assert room.phase == RUNNING
    assert room.started_at == 20.0
    assert participant.alive


def test_duplicate_start_is_an_invalid_transition(room):
    apply_command(room, Start(), now=20.0)
    with pytest.raises(InvalidPhaseTransition):
        apply_command(room, Start(), now=30.0)
    assert room.started_at == 20.0
    assert not room.lock.locked()


def test_join_while_running_rejected_by_default(room):
    apply_command(room, Start(), now=20.0)
    with pytest.raises(RoundInProgress):
        apply_command(room, Join(sid="sid-late", name="Late"))
    assert "sid-late" not in room.subscribers


def test_join_while_running_as_spectator(room):
    apply_command(room, Start(), now=20.0)
    assert apply_command(room, Join(sid="sid-late", name="Late", policy=JOIN_SPECTATE)) is None
    assert room.subscribers["sid-late"] == "spectator"
    assert room.participants == {}


def test_existing_participant_rejoining_mid_round_keeps_their_entry(room):
    participant = apply_command(room, Join(sid="sid-1", name="Alice"))
    apply_command(room, Start(), now=20.0)
    assert apply_command(room, Join(sid="sid-1", name="Alice")) is participant


def test_last_input_before_tick_wins(room):
    participant = apply_command(room, Join(sid="sid-1", name="Alice"))
    apply_command(room, Start(), now=20.0)
    for x in (0.1, 0.7, 0.3):
        apply_command(room, Input(sid="sid-1", x=x))
    assert participant.normalized_x == 0.3


def test_reset_is_idempotent(room):
    apply_command(room, Join(sid="sid-1", name="Alice"))
    apply_command(room, Reset(), now=30.0)
    apply_command(room, Reset(), now=31.0)
    assert room.phase == LOBBY
    assert room.last_activity == 31.0


def test_cheer_command(room):
    apply_command(room, Join(sid="sid-1", name="Alice"))
    bob = apply_command(room, Join(sid="sid-2", name="Bob"))
    apply_command(room, Start(), now=20.0)
    room.participants["sid-1"].alive = False
    assert apply_command(room, Cheer(sid="sid-1", target_id=bob.id))
    assert room.cheer_counts[bob.id] == 1


def test_unknown_command(room):
    with pytest.raises(TypeError):
        apply_command(room, object())


def test_join_on_a_closed_room(room):
    room.closed = True
    with pytest.raises(RoomNotFound):
        apply_command(room, Join(sid="sid-1", name="Alice"))
    assert room.participants == {}
    assert room.subscribers == {}
