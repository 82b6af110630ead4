"""
API Module - Network surface of the lobby.

Exposes the session handler over a WebSocket game channel, plus health
and info endpoints over plain HTTP.
"""

from .app import create_app
from .connection import WebSocketConnection
from .schemas import HealthResponse, RootResponse

__all__ = [
    "create_app",
    "WebSocketConnection",
    "HealthResponse",
    "RootResponse",
]
