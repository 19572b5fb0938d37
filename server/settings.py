import logging
import os
import string

TICK_SECONDS = 0.05

# Canvas geometry shared with every client. Must match the client drawing code.
PLAY_WIDTH = 640
PLAY_HEIGHT = 720
CONTROL_HEIGHT = 160
BOUNDARY_Y = PLAY_HEIGHT - CONTROL_HEIGHT

HITBOX_WIDTH = 26
HITBOX_HEIGHT = 42
HITBOX_Y = BOUNDARY_Y - HITBOX_HEIGHT

PASS_MARGIN = 30
SPAWN_ABOVE = 6
MAX_OBSTACLES = 10

START_SPEED = 5.0
SPEED_PER_SECOND = 0.28
MAX_SPEED = 26.0

SPAWN_START = 0.82
SPAWN_MIN = 0.22
SPAWN_DECAY = 0.014

DOUBLE_SPAWN_AFTER = 18.0
DOUBLE_SPAWN_BASE = 0.12
DOUBLE_SPAWN_GROWTH = 0.004
DOUBLE_SPAWN_MAX = 0.35

FALL_JITTER = (0.92, 1.08)

SCORE_PER_SECOND = 10

NAME_MAX_LENGTH = 16
ROOM_CODE_LENGTH = 5
ROOM_CODE_ALPHABET = string.ascii_uppercase

PLAYER_COLORS = [
    "#38E8FF",
    "#FF4FD8",
    "#9B5CFF",
    "#4DFFB5",
    "#FFD24D",
    "#4DA3FF",
    "#FFFFFF",
]

JOIN_REJECT = "reject"
JOIN_SPECTATE = "spectate"
JOIN_POLICIES = (JOIN_REJECT, JOIN_SPECTATE)

SWEEP_EVERY_TICKS = 200

PORT = int(os.environ.get("PORT", "5000"))
JOIN_POLICY = os.environ.get("JOIN_POLICY", JOIN_REJECT).strip().lower()
if JOIN_POLICY not in JOIN_POLICIES:
    JOIN_POLICY = JOIN_REJECT
ROOM_IDLE_TIMEOUT = float(os.environ.get("ROOM_IDLE_TIMEOUT", "1800"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
