"""
Pytest fixtures for Tarotcrawl tests.
"""

import random

import pytest

from ..config import DECK_SIZE, ROOM_SIZE
from ..engine_core.logic import deal, new_game
from ..engine_core.state import GameState
from ..rule_engine import RuleEngine, STANDARD_RULES
from ..session.machine import TurnMachine
from ..session.progress import InMemoryProgressStore


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles."""
    return random.Random(1234)


@pytest.fixture
def rules() -> RuleEngine:
    """Rule engine loaded with the standard rules."""
    return RuleEngine(STANDARD_RULES)


@pytest.fixture
def fresh_state(rng) -> GameState:
    """A new, undealt dungeon."""
    return new_game(rng=rng)


@pytest.fixture
def dealt_state(fresh_state) -> GameState:
    """A new dungeon with its first room dealt."""
    return deal(fresh_state)


@pytest.fixture
def build_state():
    """
    Build a partition-complete state around a chosen room.

    Cards not placed in the room or discard go to the draw pile in index
    order, unless draw is given.
    """
    def _build(room=(), discard=(), draw=None, **fields) -> GameState:
        room = tuple(room) + (None,) * (ROOM_SIZE - len(room))
        used = {c for c in room if c is not None} | set(discard)
        if draw is None:
            draw = tuple(i for i in range(DECK_SIZE) if i not in used)
        return GameState(draw=tuple(draw), room=room, discard=tuple(discard), **fields)

    return _build


@pytest.fixture
def assert_partition():
    """Assert every card index is held exactly once."""
    def _check(state: GameState):
        assert sorted(state.iter_cards()) == list(range(DECK_SIZE))

    return _check


@pytest.fixture
def machine(rules) -> TurnMachine:
    """Turn machine for a returning player, so no tutorial dungeon."""
    return TurnMachine(rules, InMemoryProgressStore(player_is_new=False), rng=random.Random(5))
