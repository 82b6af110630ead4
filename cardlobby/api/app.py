"""
FastAPI Application - WebSocket game channel plus a few HTTP endpoints.

Endpoints:
    WS   /           Game channel (create, join, start, move, leave)
    WS   /ws         Same channel, for clients that need a non-root path
    GET  /health     Health check with the live room count
    GET  /           API info

One asyncio task per WebSocket. Inbound text frames go through
SessionHandler.handle_raw; a disconnect goes through
SessionHandler.connection_closed, exactly like an explicit leave.
"""

from typing import Optional
import os

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..logging_utils import get_logger
from ..session import ClientSession, RoomDirectory, SessionHandler
from .connection import WebSocketConnection
from .schemas import HealthResponse, RootResponse

# Environment configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

log = get_logger("api")


def create_app(directory: Optional[RoomDirectory] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        directory: Optional RoomDirectory (a fresh one if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Cardlobby",
        description="Lobby and relay server for Tiến Lên and Xì Dách.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    handler = SessionHandler(directory=directory or RoomDirectory())
    app.state.handler = handler

    # =========================================================================
    # Game channel
    # =========================================================================

    @app.websocket("/")
    @app.websocket("/ws")
    async def game_channel(websocket: WebSocket):
        """
        Messages from client:
        - create {game?, name?}, join {code, name?}, start, move {...}, leave

        Messages from server:
        - created, joined, players, error, start_tl, start_xd, move
        """
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        connection.start()
        session = ClientSession(connection=connection)
        log.debug("connection opened from %s", connection.peer)

        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                raw = frame.get("text")
                if raw is None:
                    raw = frame.get("bytes")
                if raw is None:
                    continue
                handler.handle_raw(session, raw)
        finally:
            connection.mark_closed()
            handler.connection_closed(session)
            await connection.aclose()
            log.debug("connection closed from %s", connection.peer)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__, rooms=len(handler.directory))

    @app.get("/", response_model=RootResponse, tags=["System"])
    async def root() -> RootResponse:
        """Root endpoint with API info."""
        return RootResponse(name="Cardlobby", version=__version__, websocket="/")

    return app


# For running directly: uvicorn cardlobby.api.app:app
app = create_app()
