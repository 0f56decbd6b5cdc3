"""
Engine Core - Card model, game state and pure game logic.

The engine is the deterministic core that:
1. Maps card indices to tarot cards
2. Holds the dungeon GameState
3. Applies pure transitions (deal, fold, escape, clear)
"""

from .cards import Card, Suit, card_at, index_of, is_shuffled, new_deck, shuffle
from .state import GameState
from .logic import (
    clear_room,
    deal,
    drink_potion,
    escape_room,
    fight_monster,
    fold_card,
    is_card_foldable,
    is_dungeon_complete,
    is_health_depleted,
    is_room_complete,
    is_room_escapable,
    new_game,
    restart,
    take_shield,
)

__all__ = [
    "Card",
    "Suit",
    "card_at",
    "index_of",
    "is_shuffled",
    "new_deck",
    "shuffle",
    "GameState",
    "clear_room",
    "deal",
    "drink_potion",
    "escape_room",
    "fight_monster",
    "fold_card",
    "is_card_foldable",
    "is_dungeon_complete",
    "is_health_depleted",
    "is_room_complete",
    "is_room_escapable",
    "new_game",
    "restart",
    "take_shield",
]
