"""
Room errors - Non-fatal failures reported to the offending connection.

Each error carries an ErrorCode and the human-readable message sent back
as `error{message}`. None of them affects other connections.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_ALREADY_STARTED = "ROOM_ALREADY_STARTED"
    ROOM_FULL = "ROOM_FULL"
    NO_ROOM = "NO_ROOM"
    NOT_HOST = "NOT_HOST"
    INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"


class RoomError(Exception):
    """Base class for errors that end up as an `error` reply."""
    code: ErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RoomNotFound(RoomError):
    code = ErrorCode.ROOM_NOT_FOUND

    def __init__(self, room_code: str):
        super().__init__(f"Room not found: {room_code}")
        self.room_code = room_code


class RoomAlreadyStarted(RoomError):
    code = ErrorCode.ROOM_ALREADY_STARTED

    def __init__(self):
        super().__init__("Game already started")


class RoomFull(RoomError):
    code = ErrorCode.ROOM_FULL

    def __init__(self):
        super().__init__("Room full")


class NoRoom(RoomError):
    code = ErrorCode.NO_ROOM

    def __init__(self):
        super().__init__("No room")


class NotHost(RoomError):
    code = ErrorCode.NOT_HOST

    def __init__(self):
        super().__init__("Only host can start")


class InsufficientPlayers(RoomError):
    code = ErrorCode.INSUFFICIENT_PLAYERS

    def __init__(self, minimum: int):
        super().__init__(f"Need at least {minimum} players")
        self.minimum = minimum
