import random

import pytest

import app as server
from game_state import ObstacleState, RoomState
from settings import HITBOX_Y, JOIN_REJECT


class RecordingBroadcaster:
    def __init__(self):
        self.calls = []

    def roster(self, room_code, payload):
        self.calls.append(("roster", room_code, payload))

    def round_started(self, room_code, started_at):
        self.calls.append(("roundStarted", room_code, started_at))

    def eliminations(self, room_code, events):
        self.calls.append(("eliminated", room_code, events))

    def tick(self, room_code, shared, personal):
        self.calls.append(("tick", room_code, shared, personal))

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def room():
    return RoomState(code="ABCDE", created_at=1000.0)


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def place_obstacle():
    def _place(room, x, y=HITBOX_Y - 10, width=52, height=52):
        obstacle = ObstacleState(
            id=room.next_obstacle_id, kind="heavy-square", x=x, y=y, width=width, height=height, fall_speed=0.0
        )
        room.next_obstacle_id += 1
        room.obstacles.append(obstacle)
        return obstacle

    return _place


@pytest.fixture
def server_app():
    server.app.config["WORLD_LOOP"] = False
    server.app.config["JOIN_POLICY"] = JOIN_REJECT
    server.state.rooms.clear()
    server.sessions.bindings.clear()
    yield server
    server.state.rooms.clear()
    server.sessions.bindings.clear()


@pytest.fixture
def connect(server_app):
    clients = []

    def _connect():
        client = server_app.socketio.test_client(server_app.app)
        clients.append(client)
        return client

    yield _connect
    for client in clients:
        if client.is_connected():
            client.disconnect()
