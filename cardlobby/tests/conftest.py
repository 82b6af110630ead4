"""
Pytest fixtures for Cardlobby tests.
"""

import json
import random

import pytest

from ..session import ClientSession, RoomDirectory, SessionHandler


class FakeConnection:
    """In-memory connection that records every message sent to it."""

    def __init__(self, name: str = "conn"):
        self.name = name
        self.open = True
        self.sent: list[dict] = []

    def is_open(self) -> bool:
        return self.open

    def send(self, text: str) -> None:
        self.sent.append(json.loads(text))

    def close(self) -> None:
        self.open = False

    def of_type(self, message_type: str) -> list[dict]:
        return [m for m in self.sent if m.get("type") == message_type]

    def last(self, message_type: str | None = None) -> dict:
        messages = self.of_type(message_type) if message_type else self.sent
        assert messages, f"{self.name} received no {message_type or 'messages'}"
        return messages[-1]

    def clear(self) -> None:
        self.sent.clear()

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


@pytest.fixture
def directory() -> RoomDirectory:
    """Isolated directory with a seeded code generator."""
    return RoomDirectory(rng=random.Random(1234))


@pytest.fixture
def handler(directory: RoomDirectory) -> SessionHandler:
    """Handler over the test directory with seeded deals."""
    return SessionHandler(directory=directory, rng=random.Random(42))


@pytest.fixture
def make_session():
    """Factory for (session, connection) pairs."""
    def _make(name: str = "conn") -> ClientSession:
        return ClientSession(connection=FakeConnection(name))
    return _make


def send(handler: SessionHandler, session: ClientSession, **message):
    """Encode `message` as a JSON frame and feed it to the handler."""
    return handler.handle_raw(session, json.dumps(message))
