"""Potion rules - whether a cup may be drunk, and what drinking it does."""

from __future__ import annotations

from ..config import MAX_HEALTH
from ..engine_core.cards import card_at
from ..engine_core.state import GameState
from ..exceptions import MissingFoldingCardError
from .engine import Determination, Mutation, Rule


def potion_value(state: GameState) -> int:
    """Effective value of the potion currently being folded."""
    if state.folding_card is None:
        raise MissingFoldingCardError("Drinking a potion requires a folding card")
    return card_at(state.folding_card).value


def heal(state: GameState) -> GameState:
    """Heal by the potion's value, capped at MAX_HEALTH."""
    healing = min(potion_value(state), MAX_HEALTH - state.health)
    return state._copy_with(
        health=state.health + healing,
        was_last_action_potion=True,
    )


def _sicken(state: GameState) -> GameState:
    if not state.was_last_action_potion:
        return heal(state)
    return state._copy_with(
        health=max(0, state.health - potion_value(state)),
        was_last_action_potion=True,
    )


AllYouCanEat = Rule(
    name="All You Can Eat",
    description="Players can drink as many potions as they want in a row.",
    checks={Determination.CAN_DRINK: lambda state: True},
    actions={Mutation.DRINK_POTION: heal},
)

SubsequenceImpotence = Rule(
    name="Subsequence Impotence",
    description="Drinking more than one potion in a row has no effect.",
    checks={Determination.CAN_DRINK: lambda state: not state.was_last_action_potion},
    actions={Mutation.DRINK_POTION: heal},
)

SubsequenceSickness = Rule(
    name="Subsequence Sickness",
    description="Drinking more than one potion in a row will make you sick and lose health.",
    checks={Determination.CAN_DRINK: lambda state: True},
    actions={Mutation.DRINK_POTION: _sicken},
)


__all__ = [
    "AllYouCanEat",
    "SubsequenceImpotence",
    "SubsequenceSickness",
    "heal",
    "potion_value",
]
