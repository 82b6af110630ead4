"""
Room - Membership and variant configuration for one game session.

INVARIANTS:
- len(players) <= capacity before start
- started goes False -> True exactly once
- After a Tiến Lên start, len(players) == capacity (bots backfilled)
- Seat 0 is the host

Seats are list positions while the room is waiting: a departure before
start closes the gap, so whoever is first in line becomes seat 0 and
host. Once started, seats are frozen because they index the dealt
hands, and a departure just removes the player.

The room never talks to the transport. Callers hold `room.lock` around
any sequence of reads and writes that must not interleave.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import threading

from .errors import RoomAlreadyStarted, RoomFull

if TYPE_CHECKING:
    from .delivery import Connection


MIN_PLAYERS_TO_START = 2


class GameVariant(Enum):
    """Supported game variants, valued by their wire name."""
    TIEN_LEN = "tl"
    XI_DACH = "xd"

    @property
    def capacity(self) -> int:
        return 2 if self is GameVariant.XI_DACH else 4

    @property
    def fills_with_bots(self) -> bool:
        return self is GameVariant.TIEN_LEN

    @classmethod
    def from_wire(cls, value: str | None) -> GameVariant:
        """'xd' selects Xì Dách; anything else (including None) is Tiến Lên."""
        return cls.XI_DACH if value == cls.XI_DACH.value else cls.TIEN_LEN


@dataclass(eq=False)
class Player:
    """A seated player. A player without a connection is a bot."""
    name: str
    seat: int
    connection: Connection | None = None

    @property
    def is_bot(self) -> bool:
        return self.connection is None

    def is_connected(self) -> bool:
        return self.connection is not None and self.connection.is_open()


@dataclass
class Room:
    """
    One game session, identified by a short code.

    Usage:
        room = Room(code="AB12", variant=GameVariant.TIEN_LEN)
        with room.lock:
            room.add_player("Alice", connection)
    """
    code: str
    variant: GameVariant
    players: list[Player] = field(default_factory=list)
    started: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def capacity(self) -> int:
        return self.variant.capacity

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.capacity

    @property
    def host(self) -> Player | None:
        for player in self.players:
            if player.seat == 0:
                return player
        return None

    def is_host(self, connection: Connection) -> bool:
        host = self.host
        return host is not None and host.connection is connection

    def player_names(self) -> list[str]:
        return [p.name for p in self.players]

    def find_player(self, connection: Connection) -> Player | None:
        for player in self.players:
            if player.connection is connection:
                return player
        return None

    def seat_of(self, connection: Connection) -> int | None:
        player = self.find_player(connection)
        return player.seat if player else None

    def has_connected_players(self) -> bool:
        return any(p.is_connected() for p in self.players)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_player(self, name: str, connection: Connection) -> Player:
        """
        Seat a new human player at the next free seat.

        Raises:
            RoomAlreadyStarted: The game is under way
            RoomFull: Every seat is taken
        """
        if self.started:
            raise RoomAlreadyStarted()
        if self.is_full:
            raise RoomFull()
        player = Player(name=name, seat=len(self.players), connection=connection)
        self.players.append(player)
        return player

    def remove_connection(self, connection: Connection) -> Player | None:
        """Remove the player on `connection`; returns it, or None if absent."""
        player = self.find_player(connection)
        if player is None:
            return None
        self.players.remove(player)
        self._reseat()
        return player

    def prune_disconnected(self) -> list[Player]:
        """Drop human players whose connection is no longer open."""
        gone = [p for p in self.players if not p.is_bot and not p.is_connected()]
        if gone:
            self.players = [p for p in self.players if p not in gone]
            self._reseat()
        return gone

    def fill_with_bots(self) -> list[Player]:
        """Backfill empty seats with bots named after their seat."""
        bots = []
        while len(self.players) < self.capacity:
            seat = len(self.players)
            bot = Player(name=f"Bot {seat}", seat=seat)
            self.players.append(bot)
            bots.append(bot)
        return bots

    def mark_started(self) -> bool:
        """Flip started to True. Returns False if it already was."""
        if self.started:
            return False
        self.started = True
        return True

    def _reseat(self) -> None:
        if self.started:
            return
        for index, player in enumerate(self.players):
            player.seat = index
