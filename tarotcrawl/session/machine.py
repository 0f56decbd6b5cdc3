"""
Turn Machine - The turn-flow state machine of a dungeon.

The machine:
1. Waits in Menu for NEW_GAME
2. Creates a tutorial or standard dungeon
3. Deals a room and hands the turn to the player
4. Folds a card or escapes on player events, guarded by the rules
5. After every fold, ends the turn: Win, GameOver, next room, or next fold

Only three player events change state: NEW_GAME, FOLD_CARD, ESCAPE.
Events with no handler in the active state are dropped.

One event is processed at a time, including every chained transition it
triggers. Subscribers that send events while being notified are queued
until the current event is done. A subscriber that raises is logged and
skipped.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import TYPE_CHECKING, Callable, Sequence

from ..engine_core import logic
from ..engine_core.state import GameState
from .progress import InMemoryProgressStore, ProgressStore
from .schemas import DungeonView

if TYPE_CHECKING:
    from ..rule_engine.engine import RuleEngine

logger = logging.getLogger(__name__)

Subscriber = Callable[[DungeonView], None]


class TurnState(Enum):
    """Leaf states of the machine, as hierarchical paths."""
    MENU = "Menu"
    CREATE_TUTORIAL_DUNGEON = "CreateDungeon.CreateTutorialDungeon"
    STANDARD_DUNGEON = "CreateDungeon.StandardDungeon"
    START = "Dungeon.Start"
    DEAL = "Dungeon.Deal"
    PLAYER_TURN_START = "Dungeon.PlayerTurnStart"
    PLAYER_TURN = "Dungeon.PlayerTurn"
    FOLD_CARD = "Dungeon.FoldCard"
    ESCAPE = "Dungeon.Escape"
    END_TURN = "Dungeon.EndTurn"
    CLEAR_ROOM = "Dungeon.ClearRoom"
    WIN = "Dungeon.Win"
    GAME_OVER = "Dungeon.GameOver"
    RESTART = "Dungeon.Restart"

    def matches(self, path: str) -> bool:
        return self.value == path or self.value.startswith(path + ".")


class EventType(Enum):
    """Player-facing events."""
    NEW_GAME = "NEW_GAME"
    FOLD_CARD = "FOLD_CARD"
    ESCAPE = "ESCAPE"


@dataclass(frozen=True)
class Event:
    """An event sent to the machine."""
    event_type: EventType
    index: int | None = None

    @classmethod
    def new_game(cls) -> Event:
        return cls(event_type=EventType.NEW_GAME)

    @classmethod
    def fold_card(cls, index: int) -> Event:
        return cls(event_type=EventType.FOLD_CARD, index=index)

    @classmethod
    def escape(cls) -> Event:
        return cls(event_type=EventType.ESCAPE)


@dataclass
class SendResult:
    """
    Outcome of sending an event.

    queued: the event arrived while another was being processed and will
    run afterwards; accepted is not known yet.
    """
    accepted: bool
    state: TurnState
    game_state: GameState
    queued: bool = False


class TurnMachine:
    """
    Drives game logic from player events.

    Usage:
        machine = TurnMachine(rules, progress)
        machine.subscribe(render)

        machine.send(Event.new_game())
        machine.send(Event.fold_card(room_card))
    """

    def __init__(
        self,
        rules: RuleEngine,
        progress: ProgressStore | None = None,
        rng: random.Random | None = None,
    ):
        self.rules = rules
        self.progress = progress or InMemoryProgressStore(player_is_new=False)
        self.rng = rng or random.Random()

        self.state = TurnState.MENU
        self.game_state = GameState()
        self.history: list[TurnState] = [TurnState.MENU]

        self._subscribers: list[Subscriber] = []
        self._queue: deque[Event] = deque()
        self._processing = False
        self._pending_deck: Sequence[int] | None = None
        self._handlers = {
            TurnState.MENU: {EventType.NEW_GAME: self._handle_new_game},
            TurnState.PLAYER_TURN: {
                EventType.FOLD_CARD: self._handle_fold_card,
                EventType.ESCAPE: self._handle_escape,
            },
            TurnState.WIN: {EventType.NEW_GAME: self._handle_restart},
            TurnState.GAME_OVER: {EventType.NEW_GAME: self._handle_restart},
        }

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def view(self) -> DungeonView:
        return DungeonView.from_state(self.state.value, self.game_state)

    def matches(self, path: str) -> bool:
        return self.state.matches(path)

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Receive a DungeonView after every transition. Returns an unsubscriber."""
        self._subscribers.append(subscriber)
        return lambda: self._unsubscribe(subscriber)

    def _unsubscribe(self, subscriber: Subscriber):
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def can_escape(self) -> bool:
        return self.state is TurnState.PLAYER_TURN and logic.is_room_escapable(self.game_state, self.rules)

    def can_fold(self, index: int) -> bool:
        return self.state is TurnState.PLAYER_TURN and logic.is_card_foldable(self.game_state, index, self.rules)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def send(self, event: Event) -> SendResult:
        """Process an event and every transition it triggers."""
        if self._processing:
            self._queue.append(event)
            return SendResult(
                accepted=False, state=self.state, game_state=self.game_state, queued=True
            )

        self._processing = True
        try:
            accepted = self._dispatch(event)
            while self._queue:
                self._dispatch(self._queue.popleft())
        finally:
            self._processing = False
        return SendResult(accepted=accepted, state=self.state, game_state=self.game_state)

    def _dispatch(self, event: Event) -> bool:
        handler = self._get_handler(event.event_type)
        if handler is None:
            logger.debug("Dropped %s in %s", event.event_type.value, self.state.value)
            return False
        return handler(event)

    def _get_handler(self, event_type: EventType):
        """Get the handler declared by the active state for an event."""
        return self._handlers.get(self.state, {}).get(event_type)

    def _handle_new_game(self, event: Event) -> bool:
        if self.progress.is_player_new():
            from .tutorial import tutorial_deck

            self._enter(TurnState.CREATE_TUTORIAL_DUNGEON)
            self._pending_deck = tutorial_deck(self.rng)
        else:
            self._enter(TurnState.STANDARD_DUNGEON)
            self._pending_deck = None
        self._start_dungeon()
        return True

    def _handle_restart(self, event: Event) -> bool:
        self._enter(TurnState.RESTART)
        self.game_state = logic.restart(rng=self.rng)
        self._pending_deck = self.game_state.draw
        self._start_dungeon()
        return True

    def _handle_fold_card(self, event: Event) -> bool:
        index = event.index
        if index is None or not logic.is_card_foldable(self.game_state, index, self.rules):
            logger.debug("Fold of %s refused", index)
            return False
        self.game_state = self.game_state._copy_with(folding_card=index)
        self._enter(TurnState.FOLD_CARD)
        self.game_state = logic.fold_card(self.game_state, index, self.rules)
        self._end_turn()
        return True

    def _handle_escape(self, event: Event) -> bool:
        if not logic.is_room_escapable(self.game_state, self.rules):
            logger.debug("Escape refused")
            return False
        self._enter(TurnState.ESCAPE)
        self.game_state = logic.escape_room(self.game_state)
        self._deal()
        return True

    # -------------------------------------------------------------------------
    # Chained transitions
    # -------------------------------------------------------------------------

    def _start_dungeon(self):
        self._enter(TurnState.START)
        self.game_state = logic.new_game(self._pending_deck, self.rng)
        self._pending_deck = None
        logger.info("New dungeon with %d cards", len(self.game_state.draw))
        self._deal()

    def _deal(self):
        self._enter(TurnState.DEAL)
        self.game_state = logic.deal(self.game_state)
        self._enter(TurnState.PLAYER_TURN_START)
        self._enter(TurnState.PLAYER_TURN)

    def _end_turn(self):
        """Guards are checked in a fixed order; the first match wins."""
        self._enter(TurnState.END_TURN)
        state = self.game_state
        if logic.is_dungeon_complete(state):
            logger.info("Dungeon complete with %d health", state.health)
            self._enter(TurnState.WIN)
        elif logic.is_health_depleted(state):
            logger.info("Game over")
            self._enter(TurnState.GAME_OVER)
        elif logic.is_room_complete(state):
            self._enter(TurnState.CLEAR_ROOM)
            self.game_state = logic.clear_room(state)
            self._deal()
        else:
            self._enter(TurnState.PLAYER_TURN)

    def _enter(self, state: TurnState):
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        if state is TurnState.START:
            self.history = []
        self.history.append(state)
        self._publish()

    def _publish(self):
        view = self.view
        for subscriber in list(self._subscribers):
            try:
                subscriber(view)
            except Exception:
                logger.exception("Subscriber failed on %s", view.state)
