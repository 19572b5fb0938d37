class GameError(Exception):
    code = "game_error"
    default_message = "Action rejected"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_payload(self):
        return {"message": self.message, "code": self.code}


class RoomNotFound(GameError):
    code = "room_not_found"
    default_message = "Room not found"


class RoundInProgress(GameError):
    code = "round_in_progress"
    default_message = "Round already running"


class InvalidPhaseTransition(GameError):
    code = "invalid_phase_transition"
    default_message = "Action not allowed in this phase"


class DuplicateName(GameError):
    code = "duplicate_name"
    default_message = "Name already taken"


class InvalidInput(GameError):
    code = "invalid_input"
    default_message = "Invalid input"


class NotAuthorizedForAction(GameError):
    code = "not_authorized"
    default_message = "Not allowed"
