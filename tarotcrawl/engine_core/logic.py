"""
Game Logic - Pure transition functions over GameState.

Every function takes a GameState and returns a new one; nothing is mutated
in place. Legality questions and potion effects are delegated to the
RuleEngine passed in by the caller.

Transitions:
- new_game / restart: fresh shuffled dungeon
- deal: fill empty room slots from the front of the draw pile
- fold_card: resolve one room card by suit, then discard it
- escape_room: put the room back at the end of the draw pile
- clear_room: the room was resolved by folding
"""

from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING, Callable, Sequence

from ..config import DECK_SIZE, MAX_HEALTH, MAX_POTENCY
from ..exceptions import CardNotInRoomError, DeckConsistencyError
from ..rule_engine.engine import Determination, Mutation
from .cards import Suit, card_at, is_shuffled, new_deck, shuffle
from .state import EMPTY_ROOM, GameState

if TYPE_CHECKING:
    from ..rule_engine.engine import RuleEngine

logger = logging.getLogger(__name__)

MonsterHandler = Callable[[GameState, int], GameState]
PotionHandler = Callable[[GameState], GameState]
ShieldHandler = Callable[[GameState, int], GameState]


# =============================================================================
# Setup
# =============================================================================

def new_game(deck: Sequence[int] | None = None, rng: random.Random | None = None) -> GameState:
    """
    Start a new dungeon.

    A pre-built deck may be passed in (the tutorial deck, for instance).
    A full-size deck that arrives in identity order was never shuffled
    upstream, which is a priming defect, not something to recover from.
    """
    if deck is None:
        draw = shuffle(new_deck(), rng)
    else:
        draw = list(deck)
        if len(draw) == DECK_SIZE and not is_shuffled(draw):
            raise DeckConsistencyError("Reused deck is not shuffled")
    return GameState(
        draw=tuple(draw),
        room=EMPTY_ROOM,
        discard=(),
        health=MAX_HEALTH,
        shield=0,
        was_last_action_potion=False,
        last_monster_blocked=None,
        did_escape_last_room=False,
        folding_card=None,
    )


def restart(deck: Sequence[int] | None = None, rng: random.Random | None = None) -> GameState:
    """Throw away the current dungeon and build a new one."""
    return new_game(deck, rng)


def deal(state: GameState) -> GameState:
    """Move cards from the front of the draw pile into empty room slots."""
    draw = list(state.draw)
    room = list(state.room)
    for slot, card in enumerate(room):
        if card is None and draw:
            room[slot] = draw.pop(0)
    return state._copy_with(draw=tuple(draw), room=tuple(room))


# =============================================================================
# Folding
# =============================================================================

def fold_card(
    state: GameState,
    index: int,
    rules: RuleEngine,
    monster_handler: MonsterHandler | None = None,
    potion_handler: PotionHandler | None = None,
    shield_handler: ShieldHandler | None = None,
) -> GameState:
    """
    Resolve a room card and move it to the discard pile.

    The card is dispatched by suit to a handler (fight, drink, shield by
    default). While the handler runs, folding_card holds the index.
    """
    card = card_at(index)
    slot = state.slot_of(index)
    if slot is None:
        raise CardNotInRoomError(index)

    folding = state._copy_with(folding_card=index)
    if card.suit in (Suit.SWORDS, Suit.WANDS):
        handler = monster_handler or fight_monster
        update = handler(folding, card.value)
    elif card.suit is Suit.CUPS:
        update = potion_handler(folding) if potion_handler else drink_potion(folding, rules)
    elif card.suit is Suit.PENTACLES:
        handler = shield_handler or take_shield
        update = handler(folding, card.value)
    else:
        raise AssertionError(f"Unknown suit: {card.suit!r}")

    room = list(update.room)
    room[slot] = None
    return update._copy_with(
        room=tuple(room),
        discard=update.discard + (index,),
        folding_card=None,
    )


def fight_monster(state: GameState, value: int) -> GameState:
    """
    Take damage from a monster, reduced by the shield.

    A shield only holds against a strictly decreasing run of monsters:
    a monster at or above the last one blocked breaks it first. The
    monster is always recorded; with no shield up it has no further effect.
    """
    shield = state.shield
    if state.last_monster_blocked is not None and state.last_monster_blocked <= value:
        shield = 0
    damage = max(0, value - shield)
    return state._copy_with(
        shield=shield,
        health=max(0, state.health - damage),
        last_monster_blocked=value,
        was_last_action_potion=False,
    )


def drink_potion(state: GameState, rules: RuleEngine) -> GameState:
    """Drink the folding potion if the rules allow it; the rules decide the effect."""
    if not rules.determine(state, Determination.CAN_DRINK):
        logger.debug("Potion %s has no effect", state.folding_card)
        return state
    return rules.mutate(state, Mutation.DRINK_POTION)


def take_shield(state: GameState, value: int) -> GameState:
    """Replace the shield, whatever it was."""
    return state._copy_with(
        shield=min(value, MAX_POTENCY),
        last_monster_blocked=None,
        was_last_action_potion=False,
    )


# =============================================================================
# Ending rooms
# =============================================================================

def escape_room(state: GameState) -> GameState:
    """Flee: remaining room cards go to the end of the draw pile."""
    return state._copy_with(
        draw=state.draw + state.room_cards,
        room=EMPTY_ROOM,
        did_escape_last_room=True,
    )


def clear_room(state: GameState) -> GameState:
    """Every card of the room was folded."""
    return state._copy_with(did_escape_last_room=False)


# =============================================================================
# Predicates
# =============================================================================

def is_room_complete(state: GameState) -> bool:
    return not state.room_cards


def is_dungeon_complete(state: GameState) -> bool:
    return not state.draw and not state.room_cards


def is_health_depleted(state: GameState) -> bool:
    return state.health <= 0


def is_room_escapable(state: GameState, rules: RuleEngine) -> bool:
    return rules.determine(state, Determination.CAN_ESCAPE)


def is_card_foldable(state: GameState, index: int, rules: RuleEngine) -> bool:
    """Ask the rules whether index may be folded right now."""
    return rules.determine(state._copy_with(folding_card=index), Determination.CAN_FOLD)
