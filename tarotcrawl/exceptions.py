"""Custom exceptions for the Tarotcrawl package.

Every exception here signals a programmer or data error. None of them are
caught inside the engine.
"""
from __future__ import annotations


class TarotcrawlError(Exception):
    """Base exception for all engine errors."""
    pass


class InvalidIndexError(TarotcrawlError, IndexError):
    """Raised when a card index falls outside the deck."""

    def __init__(self, index: int):
        super().__init__(f"Invalid index: {index}")
        self.index = index


class InvalidRankError(TarotcrawlError, ValueError):
    """Raised when a rank falls outside 1-14 for a suit."""

    def __init__(self, suit, rank: int):
        super().__init__(f"Invalid rank {rank} for {suit.value}")
        self.suit = suit
        self.rank = rank


class DeckConsistencyError(TarotcrawlError):
    """Raised when a deck that should already be shuffled is in identity order."""
    pass


class MissingFoldingCardError(TarotcrawlError):
    """Raised when a mutation needs the folding card but none is set."""
    pass


class CardNotInRoomError(TarotcrawlError):
    """Raised when folding a card that does not occupy a room slot."""

    def __init__(self, index: int):
        super().__init__(f"Card {index} is not in the room")
        self.index = index


__all__ = [
    "TarotcrawlError",
    "InvalidIndexError",
    "InvalidRankError",
    "DeckConsistencyError",
    "MissingFoldingCardError",
    "CardNotInRoomError",
]
