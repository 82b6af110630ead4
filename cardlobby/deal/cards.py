"""
Cards - The 52-card deck shared by every game variant.

Encoding (clients depend on it):
- Rank 0..12, where rank 0 is the "3" and rank 12 is the "2"
- Suit 0..3, where suit 0 is spades (♠)
- Sort key rank * 4 + suit

No jokers. A deck is built fresh and shuffled for every deal and is
never reused.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, TypeVar
import random

RANK_COUNT = 13
SUIT_COUNT = 4
DECK_SIZE = RANK_COUNT * SUIT_COUNT

RANK_LABELS = ["3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A", "2"]
SUIT_LABELS = ["♠", "♣", "♦", "♥"]

T = TypeVar("T")


@dataclass(frozen=True)
class Card:
    """A single playing card. Immutable value object."""
    rank: int
    suit: int

    def __post_init__(self):
        if not 0 <= self.rank < RANK_COUNT:
            raise ValueError(f"rank must be in [0, {RANK_COUNT}), got {self.rank}")
        if not 0 <= self.suit < SUIT_COUNT:
            raise ValueError(f"suit must be in [0, {SUIT_COUNT}), got {self.suit}")

    @property
    def sort_key(self) -> int:
        return self.rank * SUIT_COUNT + self.suit

    def __lt__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return f"{RANK_LABELS[self.rank]}{SUIT_LABELS[self.suit]}"


THREE_OF_SPADES = Card(rank=0, suit=0)


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Fisher-Yates shuffle over a copy of `items`.

    The input is never mutated. With an unbiased `rng` every permutation
    is equally likely.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def canonical_deck() -> list[Card]:
    """All 52 cards, suits outer and ranks inner."""
    return [Card(rank=r, suit=s) for s in range(SUIT_COUNT) for r in range(RANK_COUNT)]


def fresh_deck(rng: random.Random | None = None) -> list[Card]:
    """Build the canonical deck and shuffle it."""
    return shuffle(canonical_deck(), rng)
