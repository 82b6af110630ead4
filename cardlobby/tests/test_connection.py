"""
Tests for the WebSocket connection adapter.

The adapter is exercised against a stand-in socket, so no server runs.
"""

import asyncio

from starlette.websockets import WebSocketState

from ..api.connection import OUTBOX_LIMIT, WebSocketConnection


class StubSocket:
    """Just enough of a Starlette WebSocket for the adapter."""

    def __init__(self):
        self.client = None
        self.client_state = WebSocketState.CONNECTED
        self.frames: list[str] = []

    async def send_text(self, text: str) -> None:
        self.frames.append(text)


class TestWebSocketConnection:
    """Tests for WebSocketConnection."""

    def test_stalled_reader_is_cut_off(self):
        """Once the outbox is full the connection stops accepting frames."""
        conn = WebSocketConnection(StubSocket())
        for i in range(OUTBOX_LIMIT):
            conn.send(f"frame {i}")
        assert conn.is_open()

        conn.send("one too many")

        assert not conn.is_open()
        assert conn._outbox.qsize() == OUTBOX_LIMIT

    def test_close_with_full_outbox(self):
        """Closing a stalled connection does not raise."""
        async def scenario():
            conn = WebSocketConnection(StubSocket())
            for i in range(OUTBOX_LIMIT + 1):
                conn.send(f"frame {i}")
            await conn.aclose()
            return conn

        conn = asyncio.run(scenario())
        assert not conn.is_open()

    def test_writer_delivers_in_order(self):
        """Queued frames reach the socket in order before close returns."""
        socket = StubSocket()

        async def scenario():
            conn = WebSocketConnection(socket)
            conn.start()
            for text in ("a", "b", "c"):
                conn.send(text)
            await conn.aclose()

        asyncio.run(scenario())
        assert socket.frames == ["a", "b", "c"]

    def test_peer_without_client(self):
        assert WebSocketConnection(StubSocket()).peer == "-"
