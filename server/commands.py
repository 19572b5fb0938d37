import time
from dataclasses import dataclass

from errors import InvalidPhaseTransition, RoomNotFound, RoundInProgress
from game_state import RUNNING
from settings import JOIN_REJECT


@dataclass
class Join:
    sid: str
    name: str
    policy: str = JOIN_REJECT


@dataclass
class Start:
    pass


@dataclass
class Reset:
    pass


@dataclass
class Input:
    sid: str
    x: object


@dataclass
class Cheer:
    sid: str
    target_id: str


def _apply_join(room, command, now):
    if room.closed:
        raise RoomNotFound()
    if room.phase == RUNNING and command.sid not in room.participants:
        if command.policy == JOIN_REJECT:
            raise RoundInProgress("Round already running")
        room.subscribers[command.sid] = "spectator"
        return None
    participant = room.add_participant(command.sid, command.name, now)
    room.subscribers[command.sid] = "participant"
    return participant


def apply_command(room, command, now=None):
    now = time.time() if now is None else now
    with room.lock:
        if isinstance(command, Join):
            return _apply_join(room, command, now)
        if isinstance(command, Start):
            if room.phase == RUNNING:
                raise InvalidPhaseTransition("Round already running")
            return room.start_round(now)
        if isinstance(command, Reset):
            room.reset_to_lobby()
            room.last_activity = now
            return True
        if isinstance(command, Input):
            return room.set_input(command.sid, command.x)
        if isinstance(command, Cheer):
            return room.cheer(command.sid, command.target_id)
    raise TypeError(f"Unknown command {command!r}")
