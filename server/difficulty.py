from settings import (
    DOUBLE_SPAWN_AFTER,
    DOUBLE_SPAWN_BASE,
    DOUBLE_SPAWN_GROWTH,
    DOUBLE_SPAWN_MAX,
    MAX_SPEED,
    SPAWN_DECAY,
    SPAWN_MIN,
    SPAWN_START,
    SPEED_PER_SECOND,
    START_SPEED,
)


def _clamp(value, low, high):
    return max(low, min(high, value))


def scroll_speed(elapsed):
    elapsed = max(0.0, elapsed)
    return _clamp(START_SPEED + SPEED_PER_SECOND * elapsed, START_SPEED, MAX_SPEED)


def spawn_interval(elapsed):
    elapsed = max(0.0, elapsed)
    return _clamp(SPAWN_START - SPAWN_DECAY * elapsed, SPAWN_MIN, SPAWN_START)


def double_spawn_chance(elapsed):
    if elapsed <= DOUBLE_SPAWN_AFTER:
        return 0.0
    extra = (elapsed - DOUBLE_SPAWN_AFTER) * DOUBLE_SPAWN_GROWTH
    return min(DOUBLE_SPAWN_MAX, DOUBLE_SPAWN_BASE + extra)
