"""
Pydantic schemas for the HTTP side of the API.

The game channel itself speaks the messages in
`cardlobby.session.messages`; these models only cover the plain HTTP
endpoints so they show up in the OpenAPI schema.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "cardlobby"
    version: str
    rooms: int = Field(0, description="Rooms currently registered")


class RootResponse(BaseModel):
    """API info."""
    name: str
    version: str
    websocket: str = Field(description="Path of the game channel")
    health: str = "/health"
    docs: str = "/api/docs"
