"""
Dealer - Per-variant dealing on top of a fresh deck.

Tiến Lên:
- 52 cards round-robin to 4 seats (seat i gets deck[i], deck[i+4], ...)
- Each hand sorted by rank * 4 + suit
- First turn goes to whoever holds the 3 of spades

Xì Dách:
- Two cards for the "player", then two for the "dealer"
- Drawn from the END of the shuffled deck, in that order
"""

from __future__ import annotations
from dataclasses import dataclass
import random

from .cards import Card, DECK_SIZE, THREE_OF_SPADES, fresh_deck

TIEN_LEN_SEATS = 4
TIEN_LEN_HAND_SIZE = DECK_SIZE // TIEN_LEN_SEATS
XI_DACH_HAND_SIZE = 2


@dataclass
class TienLenDeal:
    """Four sorted 13-card hands and the seat that plays first."""
    hands: list[list[Card]]
    first_turn: int


@dataclass
class XiDachDeal:
    """One shared table: the player's two cards and the dealer's two."""
    player: list[Card]
    dealer: list[Card]


def deal_tien_len(rng: random.Random | None = None) -> TienLenDeal:
    """
    Deal a Tiến Lên round.

    Args:
        rng: Optional random source (seed it for reproducible deals)

    Returns:
        TienLenDeal with 4 sorted hands and the 3♠ holder as first_turn
    """
    deck = fresh_deck(rng)
    hands: list[list[Card]] = [[] for _ in range(TIEN_LEN_SEATS)]
    for i, card in enumerate(deck):
        hands[i % TIEN_LEN_SEATS].append(card)

    for hand in hands:
        hand.sort(key=lambda c: c.sort_key)

    first_turn = _find_holder(hands, THREE_OF_SPADES)
    return TienLenDeal(hands=hands, first_turn=first_turn)


def deal_xi_dach(rng: random.Random | None = None) -> XiDachDeal:
    """Deal a Xì Dách table by popping from the end of a fresh deck."""
    deck = fresh_deck(rng)
    player = [deck.pop() for _ in range(XI_DACH_HAND_SIZE)]
    dealer = [deck.pop() for _ in range(XI_DACH_HAND_SIZE)]
    return XiDachDeal(player=player, dealer=dealer)


def _find_holder(hands: list[list[Card]], card: Card) -> int:
    for seat, hand in enumerate(hands):
        if card in hand:
            return seat
    # A full deck always contains the card exactly once
    raise AssertionError(f"{card} missing from a full deal")
