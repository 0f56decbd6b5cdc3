"""Folding rules - which room card the player may resolve."""

from __future__ import annotations

from ..engine_core.state import GameState
from .engine import Determination, Rule


def _folding_in_room(state: GameState) -> bool:
    return state.folding_card is not None and state.folding_card in state.room_cards


InRoom = Rule(
    name="Fold in Room",
    description="Players can fold any card in the current room.",
    checks={Determination.CAN_FOLD: _folding_in_room},
)


def SpecificCard(card: int) -> Rule:
    """Players can fold exactly one card, and only while it is in the room."""
    return Rule(
        name="Fold Specific Card",
        description=f"Players can fold card {card}.",
        checks={
            Determination.CAN_FOLD: lambda state: state.folding_card == card and _folding_in_room(state),
        },
    )


__all__ = ["InRoom", "SpecificCard"]
