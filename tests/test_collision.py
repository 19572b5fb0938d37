from collision import boxes_overlap, first_hit, participant_hitbox
from game_state import ObstacleState
from settings import HITBOX_HEIGHT, HITBOX_WIDTH, HITBOX_Y, PLAY_WIDTH


def _obstacle(obstacle_id, x, y, width=20, height=20):
    return ObstacleState(id=obstacle_id, kind="heavy-square", x=x, y=y, width=width, height=height, fall_speed=0.0)


def test_overlapping_boxes():
    assert boxes_overlap(0, 0, 10, 10, 5, 5, 10, 10)
    assert boxes_overlap(5, 5, 10, 10, 0, 0, 10, 10)


def test_contained_box_overlaps():
    assert boxes_overlap(0, 0, 100, 100, 40, 40, 5, 5)


def test_touching_edges_do_not_overlap():
    assert not boxes_overlap(0, 0, 10, 10, 10, 0, 10, 10)
    assert not boxes_overlap(0, 0, 10, 10, 0, 10, 10, 10)
    assert not boxes_overlap(10, 0, 10, 10, 0, 0, 10, 10)
    assert not boxes_overlap(0, 0, 10, 10, 10, 10, 10, 10)


def test_separated_boxes():
    assert not boxes_overlap(0, 0, 10, 10, 50, 50, 10, 10)


def test_hitbox_maps_normalized_position_into_play_width():
    assert participant_hitbox(0.0) == (0.0, HITBOX_Y, HITBOX_WIDTH, HITBOX_HEIGHT)
    assert participant_hitbox(1.0)[0] == PLAY_WIDTH - HITBOX_WIDTH
    assert participant_hitbox(0.5)[0] == 0.5 * (PLAY_WIDTH - HITBOX_WIDTH)


def test_hitbox_clamps_out_of_range_positions():
    assert participant_hitbox(1.5)[0] == PLAY_WIDTH - HITBOX_WIDTH
    assert participant_hitbox(-1.0)[0] == 0.0


def test_first_hit_returns_first_overlap():
    hitbox = participant_hitbox(0.0)
    far = _obstacle(1, 400, HITBOX_Y)
    near = _obstacle(2, 10, HITBOX_Y)
    also_near = _obstacle(3, 0, HITBOX_Y)
    assert first_hit(hitbox, [far, near, also_near]) is near
    assert first_hit(hitbox, [far]) is None
