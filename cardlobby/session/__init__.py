"""
Session Module - Rooms, the room directory and the protocol handler.

Rooms are EPHEMERAL:
- Held in one process's memory, no database
- Removed the moment their last connected player leaves
- Swept as a backstop whenever a new room is created

The handler is transport-agnostic. Anything that can report `is_open()`
and accept `send(text)` can be a connection.
"""

from .delivery import Connection, broadcast, serialize, unicast
from .directory import RoomDirectory, normalize_code
from .errors import (
    ErrorCode,
    InsufficientPlayers,
    NoRoom,
    NotHost,
    RoomAlreadyStarted,
    RoomError,
    RoomFull,
    RoomNotFound,
)
from .handler import ClientSession, Outcome, OutcomeKind, SessionHandler
from .room import GameVariant, Player, Room

__all__ = [
    "Connection",
    "broadcast",
    "serialize",
    "unicast",
    "RoomDirectory",
    "normalize_code",
    "ErrorCode",
    "InsufficientPlayers",
    "NoRoom",
    "NotHost",
    "RoomAlreadyStarted",
    "RoomError",
    "RoomFull",
    "RoomNotFound",
    "ClientSession",
    "Outcome",
    "OutcomeKind",
    "SessionHandler",
    "GameVariant",
    "Player",
    "Room",
]
