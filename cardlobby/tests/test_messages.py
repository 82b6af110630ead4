"""
Tests for wire message parsing and serialization.
"""

import json

import pytest

from ..deal import Card
from ..session import serialize
from ..session.messages import (
    CardPayload,
    CreateRequest,
    CreatedMessage,
    JoinRequest,
    LeaveRequest,
    MoveRequest,
    PlayersMessage,
    StartRequest,
    StartTienLenMessage,
    cards_payload,
    parse_inbound,
    relayed_move,
)


class TestParseInbound:
    """Tests for inbound parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ('{"type": "create"}', CreateRequest),
        ('{"type": "join", "code": "AB12"}', JoinRequest),
        ('{"type": "start"}', StartRequest),
        ('{"type": "move"}', MoveRequest),
        ('{"type": "leave"}', LeaveRequest),
    ])
    def test_dispatch_on_type(self, raw, expected):
        assert isinstance(parse_inbound(raw), expected)

    def test_create_fields(self):
        message = parse_inbound('{"type": "create", "game": "xd", "name": "Lan"}')
        assert message.game == "xd"
        assert message.name == "Lan"

    def test_unknown_fields_on_create_are_tolerated(self):
        assert isinstance(parse_inbound('{"type": "create", "extra": 1}'), CreateRequest)

    def test_move_keeps_every_field(self):
        """Move fields are kept verbatim for relaying."""
        raw = '{"type": "move", "cards": [{"r": 1, "s": 2}], "nested": {"a": [1, null]}}'
        message = parse_inbound(raw)
        assert message.payload() == {
            "type": "move",
            "cards": [{"r": 1, "s": 2}],
            "nested": {"a": [1, None]},
        }

    @pytest.mark.parametrize("raw", [
        "{",
        "null",
        '"create"',
        '{"type": 5}',
        '{"type": "unknown"}',
        '{"game": "tl"}',
    ])
    def test_rejects(self, raw):
        assert parse_inbound(raw) is None

    def test_accepts_bytes(self):
        assert isinstance(parse_inbound(b'{"type": "leave"}'), LeaveRequest)


class TestOutbound:
    """Tests for outbound serialization."""

    def test_created_uses_camel_case(self):
        data = json.loads(serialize(CreatedMessage(code="AB12", max_players=4)))
        assert data == {"type": "created", "code": "AB12", "maxPlayers": 4}

    def test_players_uses_max(self):
        data = json.loads(serialize(PlayersMessage(players=["A", "Bot 1"], count=2, max_players=4)))
        assert data == {"type": "players", "players": ["A", "Bot 1"], "count": 2, "max": 4}

    def test_start_tl_shape(self):
        hand = cards_payload([Card(rank=0, suit=0), Card(rank=12, suit=3)])
        message = StartTienLenMessage(hands=[hand, [], [], []], current_turn=0, your_index=2)
        data = json.loads(serialize(message))
        assert data == {
            "type": "start_tl",
            "hands": [[{"r": 0, "s": 0}, {"r": 12, "s": 3}], [], [], []],
            "currentTurn": 0,
            "yourIndex": 2,
        }

    def test_card_wire_form(self):
        """Cards go out as {r, s}."""
        assert CardPayload.from_card(Card(rank=7, suit=2)).model_dump() == {"r": 7, "s": 2}
        assert [c.model_dump() for c in cards_payload([Card(rank=0, suit=0)])] == [{"r": 0, "s": 0}]

    def test_plain_dicts_pass_through(self):
        assert json.loads(serialize({"type": "move", "pid": 1})) == {"type": "move", "pid": 1}

    def test_non_ascii_names_are_kept(self):
        text = serialize(PlayersMessage(players=["Tiến"], count=1, max_players=4))
        assert "Tiến" in text

    def test_relayed_move_sets_pid(self):
        move = parse_inbound('{"type": "move", "action": "pass", "pid": 9}')
        assert relayed_move(move, 3) == {"type": "move", "action": "pass", "pid": 3}
