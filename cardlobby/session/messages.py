"""
Wire messages - Pydantic models for everything on the game channel.

Inbound (client -> server), discriminated by `type`:
- create {game?, name?}
- join   {code, name?}
- start  {}
- move   {...arbitrary fields, relayed verbatim}
- leave  {}

Outbound (server -> client):
- created  {code, maxPlayers}
- joined   {code}
- players  {players, count, max}
- error    {message}
- start_tl {hands, currentTurn, yourIndex}
- start_xd {player, dealer}
- move     {...sender fields, pid}

Field names on the wire are camelCase; models use snake_case with
aliases, so always dump with `by_alias=True`.
"""

from __future__ import annotations
from typing import Annotated, Any, Literal, Optional, Union
import json

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..deal import Card


# =============================================================================
# Inbound
# =============================================================================

class CreateRequest(BaseModel):
    """Open a new room and take seat 0."""
    type: Literal["create"]
    game: Optional[str] = Field(None, description="'tl' or 'xd'; anything else means 'tl'")
    name: Optional[str] = None


class JoinRequest(BaseModel):
    """Take the next seat in an existing room."""
    type: Literal["join"]
    code: Optional[str] = None
    name: Optional[str] = None


class StartRequest(BaseModel):
    type: Literal["start"]


class MoveRequest(BaseModel):
    """A game move. Every field is relayed as-is."""
    model_config = ConfigDict(extra="allow")

    type: Literal["move"]

    def payload(self) -> dict[str, Any]:
        return self.model_dump()


class LeaveRequest(BaseModel):
    type: Literal["leave"]


InboundMessage = Annotated[
    Union[CreateRequest, JoinRequest, StartRequest, MoveRequest, LeaveRequest],
    Field(discriminator="type"),
]

_inbound = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage | None:
    """
    Parse one inbound frame.

    Returns:
        The typed message, or None if the frame is not valid JSON, not an
        object, has an unknown `type`, or has fields of the wrong type
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return _inbound.validate_python(data)
    except ValidationError:
        return None


# =============================================================================
# Outbound
# =============================================================================

class _Outbound(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CardPayload(_Outbound):
    """Card on the wire: rank 0..12 (0 is the '3'), suit 0..3 (0 is spades)."""
    r: int = Field(ge=0, lt=13)
    s: int = Field(ge=0, lt=4)

    @classmethod
    def from_card(cls, card: Card) -> CardPayload:
        return cls(r=card.rank, s=card.suit)


def cards_payload(cards: list[Card]) -> list[CardPayload]:
    return [CardPayload.from_card(c) for c in cards]


class CreatedMessage(_Outbound):
    type: Literal["created"] = "created"
    code: str
    max_players: int = Field(alias="maxPlayers")


class JoinedMessage(_Outbound):
    type: Literal["joined"] = "joined"
    code: str


class PlayersMessage(_Outbound):
    """Seat-ordered names, bots included."""
    type: Literal["players"] = "players"
    players: list[str]
    count: int
    max_players: int = Field(alias="max")


class ErrorMessage(_Outbound):
    type: Literal["error"] = "error"
    message: str


class StartTienLenMessage(_Outbound):
    """All four hands go to every seat; the client shows only its own face up."""
    type: Literal["start_tl"] = "start_tl"
    hands: list[list[CardPayload]]
    current_turn: int = Field(alias="currentTurn")
    your_index: int = Field(alias="yourIndex")


class StartXiDachMessage(_Outbound):
    type: Literal["start_xd"] = "start_xd"
    player: list[CardPayload]
    dealer: list[CardPayload]


def relayed_move(move: MoveRequest, sender_seat: int) -> dict[str, Any]:
    """The sender's move with its seat attached as `pid`."""
    return {**move.payload(), "pid": sender_seat}
