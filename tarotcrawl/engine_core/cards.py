"""
Card Model - Maps flat card indices to tarot cards and builds decks.

A card is identified everywhere in the engine by its index in [0, 56).
The index encodes suit and rank: index = suit_order * 14 + (rank - 1).

Design principles:
- Total: every valid index maps to exactly one card
- Indices, not objects, flow through game state
- Shuffling is injectable for deterministic games
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import random
from typing import MutableSequence, Sequence

from ..config import DECK_SIZE, MAX_POTENCY, RANKS_PER_SUIT
from ..exceptions import InvalidIndexError, InvalidRankError


class Suit(Enum):
    """The four minor arcana suits, in deck order."""
    SWORDS = "swords"
    WANDS = "wands"
    PENTACLES = "pentacles"
    CUPS = "cups"


SUIT_ORDER: tuple[Suit, ...] = (Suit.SWORDS, Suit.WANDS, Suit.PENTACLES, Suit.CUPS)
MONSTER_SUITS = frozenset({Suit.SWORDS, Suit.WANDS})

FACE_NAMES = {11: "Page", 12: "Knight", 13: "Queen", 14: "King"}


@dataclass(frozen=True)
class Card:
    """
    A specific tarot card.

    Monsters (swords, wands) fight at their raw rank, so the four face
    cards stay distinct. Potions (cups) and shields (pentacles) cap at 11.
    """
    index: int
    suit: Suit
    rank: int

    @property
    def is_monster(self) -> bool:
        return self.suit in MONSTER_SUITS

    @property
    def is_potion(self) -> bool:
        return self.suit is Suit.CUPS

    @property
    def is_shield(self) -> bool:
        return self.suit is Suit.PENTACLES

    @property
    def value(self) -> int:
        """Effective value of the card for its suit's effect."""
        if self.is_monster:
            return self.rank
        return min(self.rank, MAX_POTENCY)

    @property
    def name(self) -> str:
        rank_name = FACE_NAMES.get(self.rank, str(self.rank))
        return f"{rank_name} of {self.suit.value.capitalize()}"


def card_at(index: int) -> Card:
    """Map an index from 0-55 to a specific tarot card."""
    if not isinstance(index, int) or index < 0 or index >= DECK_SIZE:
        raise InvalidIndexError(index)
    suit = SUIT_ORDER[index // RANKS_PER_SUIT]
    rank = (index % RANKS_PER_SUIT) + 1
    return Card(index=index, suit=suit, rank=rank)


def index_of(suit: Suit, rank: int) -> int:
    """Inverse of card_at."""
    if rank < 1 or rank > RANKS_PER_SUIT:
        raise InvalidRankError(suit, rank)
    return SUIT_ORDER.index(suit) * RANKS_PER_SUIT + (rank - 1)


def new_deck() -> list[int]:
    """Return a new deck of card indices in identity order."""
    return list(range(DECK_SIZE))


def shuffle(seq: MutableSequence[int], rng: random.Random | None = None) -> MutableSequence[int]:
    """Shuffle a sequence in place using Fisher-Yates and return it."""
    rng = rng or random.Random()
    current = len(seq)
    while current > 0:
        pick = rng.randrange(current)
        current -= 1
        seq[current], seq[pick] = seq[pick], seq[current]
    return seq


def is_shuffled(seq: Sequence[int]) -> bool:
    """Return True unless the sequence is exactly in identity order."""
    return not all(value == i for i, value in enumerate(seq))
