"""
Session Module - Turn flow, tutorial and collaborator hand-offs.

A session represents one player's dungeon:
- The turn machine turns player events into game logic calls
- The tutorial swaps rules to railroad a new player
- Views are published to renderers after every transition
- Dialogue and animation signals are explicit channels
"""

from .channels import AnimationSignals, DialogueChannel, SignalKind
from .machine import Event, EventType, SendResult, TurnMachine, TurnState
from .manager import DungeonSession, create_session
from .progress import InMemoryProgressStore, JsonProgressStore, ProgressStore
from .schemas import DungeonView
from .tutorial import (
    TUTORIAL_CARDS,
    TUTORIAL_STEPS,
    TutorialController,
    TutorialPhase,
    TutorialStep,
    tutorial_deck,
)

__all__ = [
    "AnimationSignals",
    "DialogueChannel",
    "SignalKind",
    "Event",
    "EventType",
    "SendResult",
    "TurnMachine",
    "TurnState",
    "DungeonSession",
    "create_session",
    "InMemoryProgressStore",
    "JsonProgressStore",
    "ProgressStore",
    "DungeonView",
    "TUTORIAL_CARDS",
    "TUTORIAL_STEPS",
    "TutorialController",
    "TutorialPhase",
    "TutorialStep",
    "tutorial_deck",
]
