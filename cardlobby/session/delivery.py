"""
Delivery - Best-effort unicast and broadcast.

At-most-once semantics:
- A message is serialized and handed to the connection only if the
  connection reports itself open
- Closed connections are skipped silently, never an error to the caller
- Nothing is queued here and nothing is retried

Bots have no connection, so broadcast skips them automatically.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Protocol, Union
import json

from pydantic import BaseModel

from ..logging_utils import get_logger

if TYPE_CHECKING:
    from .room import Room

log = get_logger("delivery")

Message = Union[BaseModel, dict[str, Any]]


class Connection(Protocol):
    """What the core needs from a transport connection."""

    def is_open(self) -> bool:
        ...

    def send(self, text: str) -> None:
        """Hand a serialized message to the transport. Must not block."""
        ...


def serialize(message: Message) -> str:
    """Encode a message as JSON text, using wire (alias) field names."""
    if isinstance(message, BaseModel):
        payload = message.model_dump(mode="json", by_alias=True)
    else:
        payload = message
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def unicast(connection: Connection | None, message: Message) -> bool:
    """
    Send `message` to one connection if it is open.

    Returns:
        True if the message was handed to the transport
    """
    if connection is None or not connection.is_open():
        return False
    connection.send(serialize(message))
    return True


def broadcast(room: Room, message: Message, exclude: Connection | None = None) -> int:
    """
    Send `message` to every connected member of `room`.

    Args:
        room: Target room
        message: Message to send
        exclude: Optional connection to skip (the sender, for relays)

    Returns:
        Number of connections the message was handed to
    """
    text = serialize(message)
    delivered = 0
    for player in room.players:
        conn = player.connection
        if conn is None or conn is exclude:
            continue
        if not conn.is_open():
            log.debug("skipping closed connection for %s in room %s", player.name, room.code)
            continue
        conn.send(text)
        delivered += 1
    return delivered
