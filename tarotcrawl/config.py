from __future__ import annotations

from enum import Enum

# Core gameplay configuration values.
DECK_SIZE = 56
RANKS_PER_SUIT = 14
ROOM_SIZE = 4              # Slots in a room; empty slots are kept as holes.
MAX_HEALTH = 20
MAX_POTENCY = 11           # Face cards collapse to this for potions and shields.


class Difficulty(Enum):
    """Named rule sets a dungeon can be played under."""
    STANDARD = "standard"
    EASY = "easy"
    HARD = "hard"
