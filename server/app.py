import logging
import threading
from urllib.parse import urlencode

import segno
from flask import Flask, redirect, request, url_for
from flask_socketio import SocketIO, emit, join_room

from broadcast import Broadcaster, roster_payload, shared_snapshot
from commands import Cheer, Input, Reset, Start, apply_command
from errors import GameError, InvalidPhaseTransition
from game_state import GameState, normalize_code
from sessions import DISPLAY, HOST, SessionMapper
from settings import JOIN_POLICY, PORT, configure_logging
from simulation import Scheduler

logger = logging.getLogger(__name__)

app = Flask(__name__, static_folder="public", static_url_path="")
app.config["JOIN_POLICY"] = JOIN_POLICY
app.config["WORLD_LOOP"] = True
socketio = SocketIO(app, cors_allowed_origins="*")

state = GameState()
sessions = SessionMapper(state)
broadcaster = Broadcaster(socketio)
scheduler = Scheduler(state, broadcaster, sleep=socketio.sleep)

world_task_started = False
world_task_lock = threading.Lock()


def _ensure_world_loop():
    global world_task_started
    if world_task_started or not app.config["WORLD_LOOP"]:
        return
    with world_task_lock:
        if world_task_started:
            return
        world_task_started = True
        socketio.start_background_task(scheduler.run)


def _payload_code(data):
    return normalize_code((data or {}).get("room"))


def _roster(room):
    with room.lock:
        return roster_payload(room)


def _subscribe(data, role):
    try:
        room = sessions.subscribe(request.sid, _payload_code(data), role)
    except GameError as error:
        emit("error", error.to_payload())
        return None
    join_room(room.code)
    emit("ack", {"room": room.code})
    return room


@socketio.on("host.join")
def handle_host_join(data):
    _ensure_world_loop()
    room = _subscribe(data, HOST)
    if room:
        emit("roster", _roster(room))


@socketio.on("display.join")
def handle_display_join(data):
    _ensure_world_loop()
    room = _subscribe(data, DISPLAY)
    if not room:
        return
    with room.lock:
        roster = roster_payload(room)
        snapshot = shared_snapshot(room)
    emit("roster", roster)
    emit("sharedSnapshot", snapshot)


@socketio.on("participant.join")
def handle_participant_join(data):
    _ensure_world_loop()
    payload = data or {}
    try:
        room, participant = sessions.join_participant(
            request.sid,
            _payload_code(payload),
            payload.get("displayName"),
            policy=app.config["JOIN_POLICY"],
        )
    except GameError as error:
        emit("error", error.to_payload())
        return
    join_room(room.code)
    if participant is None:
        emit("ack", {"room": room.code, "spectator": True})
        return
    emit("ack", {"room": room.code, "participantId": participant.id, "name": participant.name})
    broadcaster.roster(room.code, _roster(room))


@socketio.on("host.start")
def handle_host_start(data):
    _ensure_world_loop()
    try:
        room = state.get_room(_payload_code(data))
    except GameError as error:
        emit("error", error.to_payload())
        return
    try:
        apply_command(room, Start())
    except InvalidPhaseTransition:
        logger.debug("Ignored duplicate start for room %s", room.code)
        return
    broadcaster.round_started(room.code, room.started_at)


@socketio.on("host.reset")
def handle_host_reset(data):
    try:
        room = state.get_room(_payload_code(data))
    except GameError as error:
        emit("error", error.to_payload())
        return
    apply_command(room, Reset())
    broadcaster.roster(room.code, _roster(room))


@socketio.on("participant.input")
def handle_participant_input(data):
    payload = data or {}
    room = state.find_room(_payload_code(payload))
    if not room:
        return
    try:
        apply_command(room, Input(sid=request.sid, x=payload.get("x")))
    except GameError as error:
        logger.debug("Dropped input from %s: %s", request.sid, error.message)


@socketio.on("spectator.cheer")
def handle_spectator_cheer(data):
    payload = data or {}
    try:
        room = state.get_room(_payload_code(payload))
        apply_command(room, Cheer(sid=request.sid, target_id=payload.get("targetParticipantId")))
    except GameError as error:
        emit("error", error.to_payload())


@socketio.on("room.state")
def handle_room_state(data):
    room = state.find_room(_payload_code(data))
    if not room:
        return
    with room.lock:
        snapshot = shared_snapshot(room)
    emit("sharedSnapshot", snapshot)


@socketio.on("disconnect")
def handle_disconnect(*_args):
    for room in sessions.disconnect(request.sid):
        broadcaster.roster(room.code, _roster(room))


@socketio.on("connect")
def handle_connect():
    _ensure_world_loop()


@app.get("/api/create-room")
def create_room():
    room = state.create_room()
    join_url = url_for("join_by_link", code=room.code, _external=True)
    qr_image = segno.make_qr(join_url, error="m").png_data_uri(scale=6)
    return {"roomCode": room.code, "joinURL": join_url, "qrImage": qr_image}


@app.get("/join/<code>")
def join_by_link(code):
    return redirect("/player.html?" + urlencode({"room": normalize_code(code)}))


def _page_redirect(page):
    query = request.query_string.decode()
    return redirect(f"/{page}.html" + (f"?{query}" if query else ""))


@app.get("/")
def index():
    return redirect("/host")


@app.get("/host")
def host_page():
    return _page_redirect("host")


@app.get("/projector")
def projector_page():
    return _page_redirect("projector")


@app.get("/player")
def player_page():
    return _page_redirect("player")


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    configure_logging()
    _ensure_world_loop()
    socketio.run(app, host="0.0.0.0", port=PORT, allow_unsafe_werkzeug=True)
