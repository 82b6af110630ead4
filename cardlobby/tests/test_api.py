"""
Tests for the FastAPI layer.

Tests:
- HTTP info and health endpoints
- The WebSocket game channel on both paths
- Disconnect handled like leave
"""

import random

import pytest
from fastapi.testclient import TestClient

from ..api import create_app
from ..session import RoomDirectory


@pytest.fixture
def app():
    return create_app(RoomDirectory(rng=random.Random(5)))


@pytest.fixture
def client(app):
    return TestClient(app)


class TestHTTPEndpoints:
    """Tests for the plain HTTP endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Cardlobby"
        assert data["websocket"] == "/"
        assert data["health"] == "/health"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["rooms"] == 0


class TestGameChannel:
    """Tests for the WebSocket game channel."""

    @pytest.mark.parametrize("path", ["/", "/ws"])
    def test_create_on_both_paths(self, client, path):
        """Both paths serve the same channel."""
        with client.websocket_connect(path) as ws:
            ws.send_json({"type": "create", "game": "xd", "name": "A"})
            created = ws.receive_json()
            players = ws.receive_json()

        assert created["type"] == "created"
        assert created["maxPlayers"] == 2
        assert players == {"type": "players", "players": ["A"], "count": 1, "max": 2}

    def test_room_count_in_health(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "create"})
            ws.receive_json()
            assert client.get("/health").json()["rooms"] == 1

    def test_join_error_reply(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join", "code": "none"})
            assert ws.receive_json() == {"type": "error", "message": "Room not found: NONE"}

    def test_malformed_frame_is_ignored(self, client):
        """Garbage is dropped and the connection stays usable."""
        with client.websocket_connect("/ws") as ws:
            ws.send_text("definitely not json")
            ws.send_json({"type": "start"})
            assert ws.receive_json() == {"type": "error", "message": "No room"}

    def test_two_player_xi_dach_game(self, client):
        """Create, join, start and relay a move between two sockets."""
        with client.websocket_connect("/ws") as host:
            host.send_json({"type": "create", "game": "xd", "name": "A"})
            code = host.receive_json()["code"]
            host.receive_json()

            with client.websocket_connect("/") as guest:
                guest.send_json({"type": "join", "code": code.lower(), "name": "B"})
                assert guest.receive_json() == {"type": "joined", "code": code}
                assert guest.receive_json()["players"] == ["A", "B"]
                assert host.receive_json()["players"] == ["A", "B"]

                host.send_json({"type": "start"})
                deal_host = host.receive_json()
                deal_guest = guest.receive_json()
                assert deal_host["type"] == "start_xd"
                assert deal_host == deal_guest

                guest.send_json({"type": "move", "action": "hit"})
                assert host.receive_json() == {"type": "move", "action": "hit", "pid": 1}

            # Guest socket closed: host sees the shrunken room
            assert host.receive_json() == {
                "type": "players", "players": ["A"], "count": 1, "max": 2,
            }

    def test_tien_len_start_over_socket(self, client):
        with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as guest:
            host.send_json({"type": "create", "game": "tl", "name": "A"})
            code = host.receive_json()["code"]
            host.receive_json()
            guest.send_json({"type": "join", "code": code, "name": "B"})
            guest.receive_json()
            guest.receive_json()
            host.receive_json()

            host.send_json({"type": "start"})
            msg = guest.receive_json()

        assert msg["type"] == "start_tl"
        assert msg["yourIndex"] == 1
        assert [len(hand) for hand in msg["hands"]] == [13, 13, 13, 13]
        assert {"r": 0, "s": 0} in msg["hands"][msg["currentTurn"]]

    def test_disconnect_removes_room(self, app, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "create"})
            code = ws.receive_json()["code"]

        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join", "code": code})
            assert ws.receive_json() == {"type": "error", "message": f"Room not found: {code}"}
        assert code not in app.state.handler.directory
