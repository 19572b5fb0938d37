import logging
import random
import time
from dataclasses import dataclass, field

from broadcast import elimination_payload, personal_snapshots, shared_snapshot
from collision import first_hit, participant_hitbox
from difficulty import double_spawn_chance, scroll_speed, spawn_interval
from game_state import RUNNING
from obstacles import advance_obstacles, can_spawn, prune_obstacles, spawn_obstacle
from settings import ROOM_IDLE_TIMEOUT, SCORE_PER_SECOND, SWEEP_EVERY_TICKS, TICK_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class TickOutcome:
    eliminations: list = field(default_factory=list)
    spawned: int = 0
    ended: bool = False


def tick_score(ticks_elapsed):
    return int(ticks_elapsed * TICK_SECONDS * SCORE_PER_SECOND)


def _spawn(room, now, elapsed, rng, outcome):
    if now < room.next_spawn_deadline or not can_spawn(room):
        return
    spawn_obstacle(room, room.scroll_speed, rng)
    outcome.spawned += 1
    chance = double_spawn_chance(elapsed)
    if chance and can_spawn(room) and rng.random() < chance:
        spawn_obstacle(room, room.scroll_speed, rng)
        outcome.spawned += 1
    room.next_spawn_deadline = now + spawn_interval(elapsed)


def _resolve_collisions(room, now, outcome):
    score = tick_score(room.ticks_elapsed)
    for participant in room.participants.values():
        if not participant.alive:
            continue
        participant.score = max(participant.score, score)
        hitbox = participant_hitbox(participant.normalized_x)
        if first_hit(hitbox, room.obstacles) is None:
            continue
        participant.alive = False
        participant.eliminated_at = now
        outcome.eliminations.append(elimination_payload(room, participant, hitbox, now))


def _check_round_end(room, now):
    alive = room.alive_participants()
    if room.started_participant_count <= 1:
        if not alive:
            room.end_round(now, None)
            return True
        return False
    if len(alive) <= 1:
        room.end_round(now, alive[0].id if alive else None)
        return True
    return False


def step_room(room, now, rng=random):
    outcome = TickOutcome()
    if room.phase != RUNNING:
        return outcome
    room.ticks_elapsed += 1
    elapsed = max(0.0, now - room.started_at)
    room.scroll_speed = scroll_speed(elapsed)
    _spawn(room, now, elapsed, rng, outcome)
    advance_obstacles(room)
    prune_obstacles(room)
    _resolve_collisions(room, now, outcome)
    outcome.ended = _check_round_end(room, now)
    return outcome


class Scheduler:
    def __init__(self, state, broadcaster, sleep=time.sleep, rng=random, idle_timeout=ROOM_IDLE_TIMEOUT):
        self.state = state
        self.broadcaster = broadcaster
        self.sleep = sleep
        self.rng = rng
        self.idle_timeout = idle_timeout
        self.ticks = 0

    def tick_room(self, room, now):
        with room.lock:
            if room.phase != RUNNING:
                return None
            outcome = step_room(room, now, self.rng)
            shared = shared_snapshot(room)
            personal = personal_snapshots(room)
        if outcome.eliminations:
            self.broadcaster.eliminations(room.code, outcome.eliminations)
        self.broadcaster.tick(room.code, shared, personal)
        return outcome

    def tick(self, now=None):
        now = time.time() if now is None else now
        self.ticks += 1
        for room in self.state.running_rooms():
            try:
                self.tick_room(room, now)
            except Exception:
                logger.exception("Tick failed for room %s", room.code)
        if self.ticks % SWEEP_EVERY_TICKS == 0:
            removed = self.state.sweep_idle(now, self.idle_timeout)
            if removed:
                logger.info("Swept %d idle rooms", len(removed))

    def run(self):
        logger.info("World loop started at %.0f ticks/s", 1.0 / TICK_SECONDS)
        next_tick = time.monotonic()
        while True:
            self.tick()
            next_tick += TICK_SECONDS
            delay = next_tick - time.monotonic()
            if delay < 0:
                next_tick = time.monotonic()
                delay = 0
            self.sleep(delay)
