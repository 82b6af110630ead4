"""
Deal Module - Shuffling and dealing.

No dependencies on rooms or transport. Every public function takes an
optional random.Random so callers can make deals reproducible.
"""

from .cards import (
    Card,
    DECK_SIZE,
    THREE_OF_SPADES,
    canonical_deck,
    fresh_deck,
    shuffle,
)
from .dealer import TienLenDeal, XiDachDeal, deal_tien_len, deal_xi_dach

__all__ = [
    "Card",
    "DECK_SIZE",
    "THREE_OF_SPADES",
    "canonical_deck",
    "fresh_deck",
    "shuffle",
    "TienLenDeal",
    "XiDachDeal",
    "deal_tien_len",
    "deal_xi_dach",
]
