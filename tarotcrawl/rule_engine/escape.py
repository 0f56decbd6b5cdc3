"""Escape rules - when may the player flee the current room."""

from __future__ import annotations

from ..engine_core.cards import card_at
from ..engine_core.state import GameState
from .engine import Determination, Rule


def _enemies_in_room(state: GameState) -> int:
    return sum(1 for index in state.room_cards if card_at(index).is_monster)


Never = Rule(
    name="No Escape",
    description="Player can never escape a room.",
    absolute=True,
    checks={Determination.CAN_ESCAPE: lambda state: False},
)

Always = Rule(
    name="Always Escape",
    description="Player can always escape a room.",
    absolute=True,
    checks={Determination.CAN_ESCAPE: lambda state: True},
)

SingleRoom = Rule(
    name="Single Room Escape",
    description="Player can escape a room so long as they didn't escape the last room they were in.",
    checks={Determination.CAN_ESCAPE: lambda state: not state.did_escape_last_room},
)

NoEnemies = Rule(
    name="No Enemies Escape",
    description="Player can escape a room so long as there are no enemies in the room.",
    checks={Determination.CAN_ESCAPE: lambda state: _enemies_in_room(state) == 0},
)

OneEnemy = Rule(
    name="One Enemy Escape",
    description="Player can escape a room so long as there is one or fewer enemies in the room.",
    checks={Determination.CAN_ESCAPE: lambda state: _enemies_in_room(state) <= 1},
)


__all__ = ["Never", "Always", "SingleRoom", "NoEnemies", "OneEnemy"]
