"""
Room Directory - Process-wide registry of active rooms.

LIFECYCLE:
1. `create` sweeps abandoned rooms, allocates a fresh code, registers
2. `lookup` resolves a code case-insensitively
3. `remove` deregisters a room the moment its last connected player goes
   (the handler does this on leave and on connection close)
4. The sweep inside `create` is the backstop for rooms whose players
   vanished without a close event ever reaching the handler

Code allocation, lookup, insert and remove all run under the directory
lock, so two concurrent creates can never register the same code.

No persistence. A restart forgets every room.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random
import string
import threading
from typing import TYPE_CHECKING

from .errors import RoomNotFound
from .room import GameVariant, Player, Room
from ..logging_utils import get_logger

if TYPE_CHECKING:
    from .delivery import Connection

log = get_logger("directory")

CODE_LENGTH = 4
CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(code: str | None) -> str:
    return (code or "").upper()


@dataclass
class RoomDirectory:
    """
    Registry of rooms keyed by their 4-character code.

    Usage:
        directory = RoomDirectory()
        room = directory.create(GameVariant.TIEN_LEN, "Host", connection)
        same = directory.lookup(room.code.lower())
    """
    rng: random.Random = field(default_factory=random.Random)
    _rooms: dict[str, Room] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def create(self, variant: GameVariant, host_name: str, host: Connection) -> Room:
        """
        Sweep, then register a new room under a unique code with its host seated.

        The host is seated before the directory lock is released, so a
        concurrent sweep never sees the new room empty.

        Returns:
            The new Room, host at seat 0
        """
        with self._lock:
            self.sweep()
            code = self._generate_code()
            while code in self._rooms:
                code = self._generate_code()
            room = Room(code=code, variant=variant)
            room.add_player(host_name, host)
            self._rooms[code] = room
        log.info("room %s created (%s, capacity %d)", code, variant.value, room.capacity)
        return room

    def admit(self, code: str | None, name: str, connection: Connection) -> tuple[Room, Player]:
        """
        Seat a player in the room registered under `code`.

        Lookup and seating happen under the directory lock, so a room
        cannot be deregistered between the two.

        Raises:
            RoomNotFound: No room under that code
            RoomAlreadyStarted: The game is under way
            RoomFull: Every seat is taken
        """
        normalized = normalize_code(code)
        with self._lock:
            room = self._rooms.get(normalized)
            if room is None:
                raise RoomNotFound(normalized)
            with room.lock:
                player = room.add_player(name, connection)
        log.info("room %s: %s joined at seat %d", room.code, name, player.seat)
        return room, player

    def lookup(self, code: str | None) -> Room | None:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    def remove(self, code: str) -> bool:
        """Deregister a room. Returns False if it was not registered."""
        with self._lock:
            room = self._rooms.pop(normalize_code(code), None)
        if room is not None:
            log.info("room %s removed", room.code)
        return room is not None

    def remove_if_abandoned(self, room: Room) -> bool:
        """
        Deregister `room` if no connected player is left in it.

        Takes the directory lock before the room lock, the same order as
        `sweep`, and only removes the entry if it still points at `room`.
        """
        with self._lock, room.lock:
            if room.has_connected_players():
                return False
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
                log.info("room %s removed (no connected players)", room.code)
                return True
            return False

    def sweep(self) -> list[str]:
        """
        Drop rooms without connected players; prune dead seats from the rest.

        Returns:
            Codes of the rooms that were dropped
        """
        dropped = []
        with self._lock:
            for code, room in list(self._rooms.items()):
                with room.lock:
                    if not room.has_connected_players():
                        del self._rooms[code]
                        dropped.append(code)
                        continue
                    gone = room.prune_disconnected()
                if gone:
                    log.info("room %s: pruned %d disconnected player(s)", code, len(gone))
        if dropped:
            log.info("swept %d abandoned room(s): %s", len(dropped), ", ".join(dropped))
        return dropped

    def codes(self) -> list[str]:
        with self._lock:
            return list(self._rooms)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str):
            return False
        with self._lock:
            return normalize_code(code) in self._rooms

    def _generate_code(self) -> str:
        return "".join(self.rng.choices(CODE_ALPHABET, k=CODE_LENGTH))
