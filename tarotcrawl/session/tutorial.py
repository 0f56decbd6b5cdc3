"""
Tutorial Controller - Walks a new player through four fixed cards.

The tutorial:
1. Suspends every fold and escape rule when the tutorial dungeon is created
2. Waits for the first player turn and the opening deal animation
3. For each step: shows dialogue and a hint, then allows exactly one card
4. Waits for that card to be folded and its discard animation to finish
5. Restores the suspended rules and records that the tutorial is finished

The controller never drives the machine. It only observes published views
and animation signals, and swaps rules in the shared RuleEngine.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import TYPE_CHECKING, Sequence

from ..engine_core.cards import Suit, index_of, new_deck, shuffle
from ..rule_engine.folding import SpecificCard
from ..rule_engine.rulesets import tutorial_suspended
from .channels import AnimationSignals, DialogueChannel, SignalKind
from .machine import TurnMachine, TurnState
from .progress import ProgressStore

if TYPE_CHECKING:
    from ..rule_engine.engine import Rule, RuleEngine
    from .schemas import DungeonView

logger = logging.getLogger(__name__)

# The 5 of pentacles, 8 of wands, 5 of swords and 3 of cups.
TUTORIAL_CARDS: tuple[int, ...] = (
    index_of(Suit.PENTACLES, 5),
    index_of(Suit.WANDS, 8),
    index_of(Suit.SWORDS, 5),
    index_of(Suit.CUPS, 3),
)


def tutorial_deck(rng: random.Random | None = None) -> list[int]:
    """A shuffled deck with the tutorial cards on top, in order."""
    deck = shuffle(new_deck(), rng)
    for card in reversed(TUTORIAL_CARDS):
        deck.remove(card)
        deck.insert(0, card)
    return deck


@dataclass(frozen=True)
class TutorialStep:
    """One scripted step: what to say, and which tutorial card to fold."""
    fold_card: int  # Position in TUTORIAL_CARDS
    dialogue: tuple[str, ...]
    hint: str

    @property
    def target(self) -> int:
        return TUTORIAL_CARDS[self.fold_card]


TUTORIAL_STEPS: tuple[TutorialStep, ...] = (
    TutorialStep(
        fold_card=0,
        dialogue=("PENTACLES provide a shield to block incoming attacks.",),
        hint="Choose the 5 of PENTACLES to take the shield.",
    ),
    TutorialStep(
        fold_card=1,
        dialogue=(
            "SWORDS and WANDS attack and damage you.",
            "Your shield will block monsters of decreasing power.",
        ),
        hint="Choose the 8 of WANDS to fight.",
    ),
    TutorialStep(
        fold_card=2,
        dialogue=(
            "The last blocked monster's power is displayed next to your shield value.",
            "A monster that matches or exceeds this number will break your shield.",
        ),
        hint="Choose the 5 of SWORDS to fight.",
    ),
    TutorialStep(
        fold_card=3,
        dialogue=("CUPS are healing potions. Drinking more than one in a row has no effect.",),
        hint="Choose the 3 of CUPS to heal.",
    ),
)


class TutorialPhase(Enum):
    """Where the tutorial is."""
    IDLE = "idle"
    AWAITING_TURN = "awaiting_turn"
    AWAITING_FOLD = "awaiting_fold"
    DONE = "done"


class TutorialController:
    """
    Scripted tutorial flow.

    Usage:
        tutorial = TutorialController(machine, rules, dialogue, signals, progress)
        machine.send(Event.new_game())  # tutorial starts if the player is new

        # renderer, later:
        signals.deal_complete()
        signals.discard_complete()
    """

    def __init__(
        self,
        machine: TurnMachine,
        rules: RuleEngine,
        dialogue: DialogueChannel,
        signals: AnimationSignals,
        progress: ProgressStore,
        steps: Sequence[TutorialStep] = TUTORIAL_STEPS,
    ):
        self.machine = machine
        self.rules = rules
        self.dialogue = dialogue
        self.signals = signals
        self.progress = progress
        self.steps = tuple(steps)

        self.phase = TutorialPhase.IDLE
        self._remaining: list[TutorialStep] = []
        self._step_rule: Rule | None = None
        self._suspended: list[Rule] = []
        self._turn_reached = False
        self._deal_done = False
        self._fold_seen = False
        self._discard_done = False

        self._unsubscribers = [
            machine.subscribe(self._on_view),
            signals.subscribe(SignalKind.DEAL_COMPLETE, self._on_signal),
            signals.subscribe(SignalKind.DISCARD_COMPLETE, self._on_signal),
        ]

    @property
    def current_step(self) -> TutorialStep | None:
        return self._remaining[0] if self._remaining else None

    @property
    def is_running(self) -> bool:
        return self.phase in (TutorialPhase.AWAITING_TURN, TutorialPhase.AWAITING_FOLD)

    def close(self):
        """Stop observing the machine and the renderer."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    # -------------------------------------------------------------------------
    # Flow
    # -------------------------------------------------------------------------

    def start(self):
        """Suspend free folding and escaping, then wait for the first turn."""
        if self.is_running:
            return
        self._suspended = tutorial_suspended(self.rules.rules)
        for rule in self._suspended:
            self.rules.remove_rule(rule)
        self._remaining = list(self.steps)
        self._turn_reached = False
        self._deal_done = False
        self.phase = TutorialPhase.AWAITING_TURN
        logger.info("Tutorial started with %d steps", len(self._remaining))

    def cancel(self):
        """Abandon the tutorial without marking it finished."""
        self._drop_step_rule()
        self._restore_rules()
        self._remaining = []
        self.phase = TutorialPhase.IDLE
        logger.info("Tutorial cancelled")

    def _begin_step(self):
        step = self._remaining[0]
        self.dialogue.emit(step.dialogue)
        self.dialogue.emit(step.hint)
        self._step_rule = SpecificCard(step.target)
        self.rules.register_rule(self._step_rule)
        self._fold_seen = False
        self._discard_done = False
        self.phase = TutorialPhase.AWAITING_FOLD
        logger.debug("Tutorial step %d waits for card %d", step.fold_card, step.target)

    def _complete_step(self):
        self._drop_step_rule()
        self._remaining.pop(0)
        if self._remaining:
            self._begin_step()
        else:
            self._finish()

    def _finish(self):
        self._restore_rules()
        self.progress.mark_tutorial_finished()
        self.phase = TutorialPhase.DONE
        logger.info("Tutorial finished")

    def _restore_rules(self):
        self.rules.apply_rule_set(self._suspended)
        self._suspended = []

    def _drop_step_rule(self):
        if self._step_rule is not None:
            self.rules.remove_rule(self._step_rule)
            self._step_rule = None

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def _on_view(self, view: DungeonView):
        if view.state == TurnState.CREATE_TUTORIAL_DUNGEON.value:
            self.start()
        elif view.state == TurnState.RESTART.value:
            if self.is_running:
                self.cancel()
        elif self.phase is TutorialPhase.AWAITING_TURN:
            if view.state == TurnState.PLAYER_TURN.value:
                self._turn_reached = True
                self._check_turn()
        elif self.phase is TutorialPhase.AWAITING_FOLD:
            step = self.current_step
            if view.state == TurnState.FOLD_CARD.value and step and view.folding_card == step.target:
                self._fold_seen = True

    def _on_signal(self, kind: SignalKind):
        if self.phase is TutorialPhase.AWAITING_TURN and kind is SignalKind.DEAL_COMPLETE:
            self._deal_done = True
            self._check_turn()
        elif self.phase is TutorialPhase.AWAITING_FOLD and kind is SignalKind.DISCARD_COMPLETE:
            # Only the discard of the step's own card counts.
            if self._fold_seen:
                self._discard_done = True
                self._complete_step()

    def _check_turn(self):
        if self._turn_reached and self._deal_done:
            self._begin_step()
