"""
WebSocket connection adapter.

Bridges the synchronous handler to Starlette's async WebSocket:
- `send` only enqueues, so the handler never awaits
- One writer task per connection drains the queue in order
- A failed send marks the connection closed; nothing is retried
- A reader that lets OUTBOX_LIMIT frames pile up is treated the same way
"""

from __future__ import annotations
import asyncio
from typing import Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from ..logging_utils import get_logger

log = get_logger("connection")

_CLOSE = None

# Frames a connection may have waiting before it counts as a stalled reader
OUTBOX_LIMIT = 256


class WebSocketConnection:
    """Fire-and-forget sender over one accepted WebSocket."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._outbox: asyncio.Queue[Optional[str]] = asyncio.Queue(maxsize=OUTBOX_LIMIT)
        self._open = True
        self._writer: Optional[asyncio.Task] = None

    @property
    def peer(self) -> str:
        client = self._websocket.client
        return f"{client.host}:{client.port}" if client else "-"

    def is_open(self) -> bool:
        return self._open and self._websocket.client_state == WebSocketState.CONNECTED

    def send(self, text: str) -> None:
        if not self._open:
            return
        try:
            self._outbox.put_nowait(text)
        except asyncio.QueueFull:
            log.info("outbox full for %s, no longer delivering to it", self.peer)
            self._open = False

    def start(self) -> None:
        """Start the writer task. Call from the connection's event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def mark_closed(self) -> None:
        self._open = False

    async def aclose(self) -> None:
        """
        Stop accepting messages and wait for the writer to flush and exit.

        A full outbox belongs to a stalled reader, so its backlog is discarded.
        """
        self._open = False
        while True:
            try:
                self._outbox.put_nowait(_CLOSE)
                break
            except asyncio.QueueFull:
                self._outbox.get_nowait()
        if self._writer is not None:
            await self._writer
            self._writer = None

    async def _drain(self) -> None:
        while True:
            text = await self._outbox.get()
            if text is _CLOSE:
                return
            try:
                await self._websocket.send_text(text)
            except Exception as e:  # noqa: BLE001 - any transport failure ends delivery
                log.debug("send to %s failed, dropping connection output: %s", self.peer, e)
                self._open = False
                return
