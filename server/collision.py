from settings import HITBOX_HEIGHT, HITBOX_WIDTH, HITBOX_Y, PLAY_WIDTH


def boxes_overlap(ax, ay, aw, ah, bx, by, bw, bh):
    # Touching edges are not a hit.
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def participant_hitbox(normalized_x):
    nx = max(0.0, min(1.0, normalized_x))
    return nx * (PLAY_WIDTH - HITBOX_WIDTH), HITBOX_Y, HITBOX_WIDTH, HITBOX_HEIGHT


def first_hit(hitbox, obstacles):
    x, y, w, h = hitbox
    for obstacle in obstacles:
        if boxes_overlap(x, y, w, h, obstacle.x, obstacle.y, obstacle.width, obstacle.height):
            return obstacle
    return None
