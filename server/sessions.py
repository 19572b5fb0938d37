import logging
import threading
import time

from commands import Join, apply_command
from errors import RoomNotFound
from settings import JOIN_REJECT

logger = logging.getLogger(__name__)

HOST = "host"
DISPLAY = "display"


class SessionMapper:
    def __init__(self, state):
        self.state = state
        self.bindings = {}
        self.lock = threading.Lock()

    def _bind(self, sid, code):
        with self.lock:
            self.bindings.setdefault(sid, set()).add(code)

    def subscribe(self, sid, code, role):
        room = self.state.get_room(code)
        with room.lock:
            if room.closed:
                raise RoomNotFound()
            room.subscribers.setdefault(sid, role)
        self._bind(sid, room.code)
        logger.debug("%s %s subscribed to room %s", role, sid, room.code)
        return room

    def join_participant(self, sid, code, name, policy=JOIN_REJECT):
        room = self.state.get_room(code)
        participant = apply_command(room, Join(sid=sid, name=name, policy=policy))
        self._bind(sid, room.code)
        if participant:
            logger.debug("Participant %s (%s) joined room %s", participant.id, participant.name, room.code)
        else:
            logger.debug("Spectator %s joined running room %s", sid, room.code)
        return room, participant

    def disconnect(self, sid):
        with self.lock:
            codes = self.bindings.pop(sid, set())
        changed = []
        for code in codes:
            room = self.state.find_room(code)
            if not room:
                continue
            with room.lock:
                room.subscribers.pop(sid, None)
                participant = room.remove_participant(sid)
                room.last_activity = time.time()
            if participant:
                logger.debug("Participant %s left room %s", participant.id, room.code)
                changed.append(room)
        return changed
