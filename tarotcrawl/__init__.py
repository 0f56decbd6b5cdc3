"""
Tarotcrawl - Dungeon-crawl solitaire engine

A deterministic, rules-driven engine for a single-player dungeon crawl played
with the 56 minor arcana of a tarot deck. The engine provides:
- Card model and deck construction
- Pure game-state transitions
- A pluggable rule engine for difficulty variants
- A turn-flow state machine driven by player events
- A scripted tutorial
"""

__version__ = "0.1.0"
