import random
from collections import namedtuple

from game_state import ObstacleState
from settings import BOUNDARY_Y, FALL_JITTER, MAX_OBSTACLES, PASS_MARGIN, PLAY_WIDTH, SPAWN_ABOVE

ObstacleKind = namedtuple("ObstacleKind", ["name", "width", "height", "weight", "speed_factor"])

OBSTACLE_KINDS = [
    ObstacleKind("heavy-square", 52, 52, 55, 1.0),
    ObstacleKind("light-wide", 78, 28, 23, 1.1),
    ObstacleKind("slow-flat", 64, 36, 22, 0.85),
]


def pick_kind(rng=random):
    total = sum(kind.weight for kind in OBSTACLE_KINDS)
    roll = rng.random() * total
    for kind in OBSTACLE_KINDS:
        if roll < kind.weight:
            return kind
        roll -= kind.weight
    return OBSTACLE_KINDS[-1]


def can_spawn(room):
    return len(room.obstacles) < MAX_OBSTACLES


def spawn_obstacle(room, speed, rng=random):
    kind = pick_kind(rng)
    obstacle = ObstacleState(
        id=room.next_obstacle_id,
        kind=kind.name,
        x=float(rng.randint(0, PLAY_WIDTH - kind.width)),
        y=float(-kind.height - SPAWN_ABOVE),
        width=kind.width,
        height=kind.height,
        fall_speed=speed * kind.speed_factor * rng.uniform(*FALL_JITTER),
    )
    room.obstacles.append(obstacle)
    room.next_obstacle_id += 1
    return obstacle


def advance_obstacles(room):
    for obstacle in room.obstacles:
        obstacle.y += obstacle.fall_speed


def prune_obstacles(room):
    room.obstacles = [obstacle for obstacle in room.obstacles if obstacle.y < BOUNDARY_Y + PASS_MARGIN]
