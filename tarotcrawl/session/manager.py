"""
Dungeon Session - Composition of one playable dungeon.

A session wires together:
- One RuleEngine holding the active difficulty's rules
- The dialogue channel and animation signals shared with the UI
- The turn machine
- The tutorial controller (active only while the player is new)

The UI talks to the session through three calls (new_game, fold_card,
escape) and observes it through subscribe().
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
from typing import Callable

from ..config import Difficulty
from ..exceptions import TarotcrawlError
from ..rule_engine import RuleEngine, rule_set_for
from .channels import AnimationSignals, DialogueChannel
from .machine import Event, SendResult, Subscriber, TurnMachine
from .progress import InMemoryProgressStore, ProgressStore
from .schemas import DungeonView
from .tutorial import TutorialController

logger = logging.getLogger(__name__)


@dataclass
class DungeonSession:
    """
    One player's dungeon, assembled and ready to start.

    Create with create_session(); the fields are the collaborators a host
    application needs to reach.
    """
    difficulty: Difficulty
    rules: RuleEngine
    progress: ProgressStore
    machine: TurnMachine
    tutorial: TutorialController
    dialogue: DialogueChannel = field(default_factory=DialogueChannel)
    signals: AnimationSignals = field(default_factory=AnimationSignals)

    @property
    def view(self) -> DungeonView:
        return self.machine.view

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        return self.machine.subscribe(subscriber)

    def new_game(self) -> SendResult:
        return self.machine.send(Event.new_game())

    def fold_card(self, index: int) -> SendResult:
        return self.machine.send(Event.fold_card(index))

    def escape(self) -> SendResult:
        return self.machine.send(Event.escape())

    def set_difficulty(self, difficulty: Difficulty):
        """Switch rule sets. Refused while the tutorial is running."""
        if self.tutorial.is_running:
            raise TarotcrawlError("Cannot change difficulty during the tutorial")
        self.rules.reset_rules()
        self.rules.apply_rule_set(rule_set_for(difficulty))
        self.difficulty = difficulty
        logger.info("Difficulty set to %s", difficulty.value)


def create_session(
    difficulty: Difficulty = Difficulty.STANDARD,
    progress: ProgressStore | None = None,
    seed: int | None = None,
) -> DungeonSession:
    """
    Create a new dungeon session.

    Args:
        difficulty: Rule set to play under
        progress: Tutorial progress store; defaults to a new player in memory
        seed: Seed for reproducible shuffles

    Returns:
        Session waiting in the menu for new_game()
    """
    progress = progress or InMemoryProgressStore()
    rules = RuleEngine(rule_set_for(difficulty))
    dialogue = DialogueChannel()
    signals = AnimationSignals()
    machine = TurnMachine(rules, progress, rng=random.Random(seed))
    tutorial = TutorialController(machine, rules, dialogue, signals, progress)

    return DungeonSession(
        difficulty=difficulty,
        rules=rules,
        progress=progress,
        machine=machine,
        tutorial=tutorial,
        dialogue=dialogue,
        signals=signals,
    )
