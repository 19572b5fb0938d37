from settings import BOUNDARY_Y, CONTROL_HEIGHT, HITBOX_HEIGHT, HITBOX_WIDTH, PLAY_HEIGHT, PLAY_WIDTH


def roster_payload(room):
    return {
        "room": room.code,
        "phase": room.phase,
        "participants": [
            {"id": participant.id, "name": participant.name, "color": participant.color}
            for participant in room.participants.values()
        ],
    }


def shared_snapshot(room):
    participants = []
    for participant in room.participants.values():
        participants.append(
            {
                "id": participant.id,
                "name": participant.name,
                "color": participant.color,
                "x": participant.normalized_x,
                "alive": participant.alive,
                "score": participant.score,
                "cheers": room.cheer_counts.get(participant.id, 0),
            }
        )
    obstacles = []
    for obstacle in room.obstacles:
        obstacles.append(
            {
                "id": obstacle.id,
                "kind": obstacle.kind,
                "x": obstacle.x,
                "y": obstacle.y,
                "width": obstacle.width,
                "height": obstacle.height,
            }
        )
    return {
        "room": room.code,
        "phase": room.phase,
        "startedAt": room.started_at,
        "endedAt": room.ended_at,
        "winnerId": room.winner_id,
        "scrollSpeed": room.scroll_speed,
        "playWidth": PLAY_WIDTH,
        "playHeight": PLAY_HEIGHT,
        "boundaryY": BOUNDARY_Y,
        "controlHeight": CONTROL_HEIGHT,
        "hitbox": {"width": HITBOX_WIDTH, "height": HITBOX_HEIGHT},
        "participants": participants,
        "obstacles": obstacles,
    }


def personal_snapshot(room, participant):
    return {
        "room": room.code,
        "phase": room.phase,
        "winnerId": room.winner_id,
        "me": {
            "id": participant.id,
            "name": participant.name,
            "alive": participant.alive,
            "score": participant.score,
            "x": participant.normalized_x,
        },
    }


def personal_snapshots(room):
    return {sid: personal_snapshot(room, participant) for sid, participant in room.participants.items()}


def elimination_payload(room, participant, hitbox, at):
    x, y, w, h = hitbox
    return {
        "room": room.code,
        "participantId": participant.id,
        "x": x + w / 2,
        "y": y + h / 2,
        "at": at,
    }


class Broadcaster:
    def __init__(self, socketio):
        self.socketio = socketio

    def roster(self, room_code, payload):
        self.socketio.emit("roster", payload, to=room_code)

    def round_started(self, room_code, started_at):
        self.socketio.emit("roundStarted", {"room": room_code, "startedAt": started_at}, to=room_code)

    def eliminations(self, room_code, events):
        for event in events:
            self.socketio.emit("eliminated", event, to=room_code)

    def tick(self, room_code, shared, personal):
        self.socketio.emit("sharedSnapshot", shared, to=room_code)
        for sid, payload in personal.items():
            self.socketio.emit("personalSnapshot", payload, to=sid)
