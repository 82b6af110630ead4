"""
Session Protocol Handler - Per-connection message dispatch.

The handler turns one inbound message into room/directory mutations and
outbound deliveries. Each event runs to completion without awaiting:

    create   -> new room, caller at seat 0
    join     -> caller at the next seat
    start    -> host only; backfill bots, deal, send start messages
    move     -> relay to every other connected member, tagged with pid
    leave    -> drop caller; remove the room if nobody connected is left
    closed   -> same as leave, idempotent

Every event returns an Outcome, so callers and tests can tell an applied
event from a silently ignored one and from a failure that was reported
back to the caller as `error{message}`.

Malformed frames and messages from connections that are not seated in
the room they claim are ignored without a reply: they come from stale or
racing clients, not from something the user can fix.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import random

from ..deal import deal_tien_len, deal_xi_dach
from ..logging_utils import get_logger
from .delivery import broadcast, unicast
from .directory import RoomDirectory
from .errors import ErrorCode, InsufficientPlayers, NoRoom, NotHost, RoomError
from .messages import (
    CreateRequest,
    CreatedMessage,
    ErrorMessage,
    InboundMessage,
    JoinRequest,
    JoinedMessage,
    LeaveRequest,
    MoveRequest,
    PlayersMessage,
    StartRequest,
    StartTienLenMessage,
    StartXiDachMessage,
    cards_payload,
    parse_inbound,
    relayed_move,
)
from .room import MIN_PLAYERS_TO_START, GameVariant, Room

if TYPE_CHECKING:
    from .delivery import Connection

log = get_logger("handler")

DEFAULT_HOST_NAME = "Host"
DEFAULT_PLAYER_NAME = "Player"


class OutcomeKind(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """Result of handling one event."""
    kind: OutcomeKind
    error: ErrorCode | None = None
    detail: str | None = None

    @classmethod
    def applied(cls) -> Outcome:
        return cls(OutcomeKind.APPLIED)

    @classmethod
    def ignored(cls, reason: str) -> Outcome:
        return cls(OutcomeKind.IGNORED, detail=reason)

    @classmethod
    def failed(cls, error: RoomError) -> Outcome:
        return cls(OutcomeKind.FAILED, error=error.code, detail=error.message)

    @property
    def is_applied(self) -> bool:
        return self.kind is OutcomeKind.APPLIED

    @property
    def is_ignored(self) -> bool:
        return self.kind is OutcomeKind.IGNORED

    @property
    def is_failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED


@dataclass
class ClientSession:
    """
    Per-connection record owned by the transport adapter.

    `room_code` is the room this connection currently sits in, or None.
    A connection is in at most one room at a time.
    """
    connection: Connection
    room_code: str | None = None


@dataclass
class SessionHandler:
    """
    Dispatches inbound messages against a RoomDirectory.

    Usage:
        handler = SessionHandler(directory=RoomDirectory())
        session = ClientSession(connection=conn)

        handler.handle_raw(session, '{"type": "create", "name": "A"}')
        ...
        handler.connection_closed(session)
    """
    directory: RoomDirectory = field(default_factory=RoomDirectory)
    rng: random.Random | None = None

    # =========================================================================
    # Entry points
    # =========================================================================

    def handle_raw(self, session: ClientSession, raw: str | bytes) -> Outcome:
        """Parse one frame and dispatch it. Malformed frames are ignored."""
        message = parse_inbound(raw)
        if message is None:
            log.debug("dropping malformed frame")
            return Outcome.ignored("malformed message")
        return self.handle(session, message)

    def handle(self, session: ClientSession, message: InboundMessage) -> Outcome:
        """Dispatch a parsed message; RoomErrors become `error` replies."""
        try:
            if isinstance(message, CreateRequest):
                return self.create(session, message)
            if isinstance(message, JoinRequest):
                return self.join(session, message)
            if isinstance(message, StartRequest):
                return self.start(session)
            if isinstance(message, MoveRequest):
                return self.move(session, message)
            if isinstance(message, LeaveRequest):
                return self.leave(session)
        except RoomError as e:
            log.info("%s: %s", e.code.value, e.message)
            unicast(session.connection, ErrorMessage(message=e.message))
            return Outcome.failed(e)
        return Outcome.ignored(f"unhandled message {type(message).__name__}")

    def connection_closed(self, session: ClientSession) -> Outcome:
        """Transport reported the connection gone. Same effect as leave."""
        return self.leave(session)

    # =========================================================================
    # Events
    # =========================================================================

    def create(self, session: ClientSession, request: CreateRequest) -> Outcome:
        variant = GameVariant.from_wire(request.game)
        name = request.name or DEFAULT_HOST_NAME
        room = self.directory.create(variant, name, session.connection)
        self._leave_current_room(session)
        session.room_code = room.code

        unicast(session.connection, CreatedMessage(code=room.code, max_players=room.capacity))
        with room.lock:
            broadcast(room, self._players_snapshot(room))
        return Outcome.applied()

    def join(self, session: ClientSession, request: JoinRequest) -> Outcome:
        current = self._current_room(session)
        if current is not None and current is self.directory.lookup(request.code):
            with current.lock:
                if current.find_player(session.connection) is not None:
                    return Outcome.ignored("already seated in this room")

        name = request.name or DEFAULT_PLAYER_NAME
        room, _ = self.directory.admit(request.code, name, session.connection)
        self._leave_current_room(session)
        session.room_code = room.code

        unicast(session.connection, JoinedMessage(code=room.code))
        with room.lock:
            broadcast(room, self._players_snapshot(room))
        return Outcome.applied()

    def start(self, session: ClientSession) -> Outcome:
        room = self._current_room(session)
        if room is None:
            raise NoRoom()

        with room.lock:
            if room.started:
                return Outcome.ignored("already started")
            if not room.is_host(session.connection):
                raise NotHost()
            if len(room.players) < MIN_PLAYERS_TO_START:
                raise InsufficientPlayers(MIN_PLAYERS_TO_START)

            room.mark_started()
            if room.variant.fills_with_bots:
                bots = room.fill_with_bots()
                if bots:
                    log.info("room %s: backfilled %d bot(s)", room.code, len(bots))
            if room.variant is GameVariant.TIEN_LEN:
                self._start_tien_len(room)
            else:
                self._start_xi_dach(room)

        log.info("room %s started (%s, %d seats)", room.code, room.variant.value, len(room.players))
        return Outcome.applied()

    def move(self, session: ClientSession, request: MoveRequest) -> Outcome:
        room = self._current_room(session)
        if room is None:
            return Outcome.ignored("no room")

        with room.lock:
            seat = room.seat_of(session.connection)
            if seat is None:
                return Outcome.ignored("sender not seated")
            broadcast(room, relayed_move(request, seat), exclude=session.connection)
        return Outcome.applied()

    def leave(self, session: ClientSession) -> Outcome:
        if self._leave_current_room(session):
            return Outcome.applied()
        return Outcome.ignored("no room")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _current_room(self, session: ClientSession) -> Room | None:
        if session.room_code is None:
            return None
        return self.directory.lookup(session.room_code)

    def _leave_current_room(self, session: ClientSession) -> bool:
        """
        Take the session out of its room, if any.

        Returns:
            True if a registered room was found for the session
        """
        room = self._current_room(session)
        session.room_code = None
        if room is None:
            return False

        with room.lock:
            player = room.remove_connection(session.connection)
            abandoned = not room.has_connected_players()
        if player is not None:
            log.info("room %s: %s left seat %d", room.code, player.name, player.seat)

        # Room lock released first: the directory takes its own lock before the room's
        if abandoned and self.directory.remove_if_abandoned(room):
            return True

        with room.lock:
            broadcast(room, self._players_snapshot(room))
        return True

    def _players_snapshot(self, room: Room) -> PlayersMessage:
        return PlayersMessage(
            players=room.player_names(),
            count=len(room.players),
            max_players=room.capacity,
        )

    def _start_tien_len(self, room: Room) -> None:
        deal = deal_tien_len(self.rng)
        hands = [cards_payload(hand) for hand in deal.hands]
        for player in room.players:
            unicast(player.connection, StartTienLenMessage(
                hands=hands,
                current_turn=deal.first_turn,
                your_index=player.seat,
            ))

    def _start_xi_dach(self, room: Room) -> None:
        deal = deal_xi_dach(self.rng)
        broadcast(room, StartXiDachMessage(
            player=cards_payload(deal.player),
            dealer=cards_payload(deal.dealer),
        ))
