import logging
import random
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from errors import DuplicateName, InvalidInput, NotAuthorizedForAction, RoomNotFound, RoundInProgress
from settings import NAME_MAX_LENGTH, PLAYER_COLORS, ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH

logger = logging.getLogger(__name__)

LOBBY = "lobby"
RUNNING = "running"
ENDED = "ended"


def normalize_code(raw_code):
    return str(raw_code or "").strip().upper()


def clean_name(raw_name):
    name = str(raw_name or "").strip()[:NAME_MAX_LENGTH]
    if not name:
        raise InvalidInput("Name required")
    return name


def _generate_room_code(existing_codes):
    while True:
        code = "".join(random.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
        if code not in existing_codes:
            return code


@dataclass
class ParticipantState:
    sid: str
    id: str
    name: str
    color: str
    normalized_x: float = 0.5
    alive: bool = True
    score: int = 0
    eliminated_at: Optional[float] = None

    def reset_for_round(self):
        self.normalized_x = 0.5
        self.alive = True
        self.score = 0
        self.eliminated_at = None


@dataclass
class ObstacleState:
    id: int
    kind: str
    x: float
    y: float
    width: int
    height: int
    fall_speed: float


@dataclass
class RoomState:
    code: str
    created_at: float = field(default_factory=time.time)
    phase: str = LOBBY
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    winner_id: Optional[str] = None
    started_participant_count: int = 0
    scroll_speed: float = 0.0
    next_spawn_deadline: float = 0.0
    ticks_elapsed: int = 0
    next_obstacle_id: int = 1
    participants: dict = field(default_factory=dict)
    cheer_counts: dict = field(default_factory=dict)
    obstacles: list = field(default_factory=list)
    subscribers: dict = field(default_factory=dict)
    last_activity: float = field(default_factory=time.time)
    closed: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)

    def _clear_round(self):
        self.started_at = None
        self.ended_at = None
        self.winner_id = None
        self.scroll_speed = 0.0
        self.next_spawn_deadline = 0.0
        self.ticks_elapsed = 0
        self.obstacles = []
        for participant in self.participants.values():
            participant.reset_for_round()
            self.cheer_counts[participant.id] = 0

    def start_round(self, now):
        if self.phase == RUNNING:
            return False
        self._clear_round()
        self.phase = RUNNING
        self.started_at = now
        self.started_participant_count = len(self.participants)
        self.last_activity = now
        logger.info("Room %s started with %d participants", self.code, self.started_participant_count)
        return True

    def end_round(self, now, winner_id=None):
        self.phase = ENDED
        self.ended_at = now
        self.winner_id = winner_id
        self.last_activity = now
        logger.info("Room %s ended, winner=%s", self.code, winner_id)

    def reset_to_lobby(self):
        if self.phase != LOBBY:
            logger.info("Room %s reset to lobby from %s", self.code, self.phase)
        self._clear_round()
        self.phase = LOBBY
        self.started_participant_count = 0

    def alive_participants(self):
        return [participant for participant in self.participants.values() if participant.alive]

    def add_participant(self, sid, name, now=None):
        existing = self.participants.get(sid)
        if existing:
            return existing
        if self.phase == RUNNING:
            raise RoundInProgress("Round already running")
        name = clean_name(name)
        lowered = name.lower()
        if any(participant.name.lower() == lowered for participant in self.participants.values()):
            raise DuplicateName(f"Name {name!r} already taken")
        participant = ParticipantState(
            sid=sid,
            id=secrets.token_hex(5),
            name=name,
            color=random.choice(PLAYER_COLORS),
        )
        self.participants[sid] = participant
        self.cheer_counts[participant.id] = 0
        self.last_activity = time.time() if now is None else now
        return participant

    def remove_participant(self, sid):
        participant = self.participants.pop(sid, None)
        if participant:
            self.cheer_counts.pop(participant.id, None)
        return participant

    def set_input(self, sid, raw_x):
        participant = self.participants.get(sid)
        if not participant or self.phase != RUNNING or not participant.alive:
            return None
        try:
            x = float(raw_x)
        except (TypeError, ValueError):
            raise InvalidInput("Position must be a number")
        if x != x or x in (float("inf"), float("-inf")):
            raise InvalidInput("Position must be finite")
        participant.normalized_x = max(0.0, min(1.0, x))
        return participant

    def cheer(self, sid, target_id):
        if self.phase != RUNNING:
            return False
        cheerer = self.participants.get(sid)
        if not cheerer:
            raise NotAuthorizedForAction("Only participants can cheer")
        if cheerer.alive:
            raise NotAuthorizedForAction("Only eliminated participants can cheer")
        target_id = str(target_id or "")
        if target_id not in self.cheer_counts:
            return False
        self.cheer_counts[target_id] += 1
        return True


class GameState:
    def __init__(self):
        self.rooms = {}
        self.lock = threading.Lock()

    def create_room(self, now=None):
        with self.lock:
            code = _generate_room_code(self.rooms.keys())
            room = RoomState(code=code, created_at=time.time() if now is None else now)
            room.last_activity = room.created_at
            self.rooms[code] = room
        logger.info("Room %s created", code)
        return room

    def find_room(self, code):
        with self.lock:
            return self.rooms.get(normalize_code(code))

    def get_room(self, code):
        room = self.find_room(code)
        if not room:
            raise RoomNotFound()
        return room

    def remove_room(self, code):
        with self.lock:
            room = self.rooms.pop(normalize_code(code), None)
        if room:
            logger.info("Room %s removed", room.code)
        return room

    def list_rooms(self):
        with self.lock:
            return list(self.rooms.values())

    def running_rooms(self):
        return [room for room in self.list_rooms() if room.phase == RUNNING]

    def sweep_idle(self, now, timeout):
        removed = []
        for room in self.list_rooms():
            with room.lock:
                if room.phase == RUNNING or room.subscribers or room.participants:
                    continue
                if now - room.last_activity < timeout:
                    continue
                room.closed = True
                self.remove_room(room.code)
            removed.append(room.code)
        return removed
