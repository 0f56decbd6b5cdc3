"""
Game State - The complete state of one dungeon at a point in time.

Design principles:
- Immutable: every transition returns a new state
- Serializable: plain ints, tuples and flags only
- Partitioned: every card index lives in exactly one of draw, room, discard

The room is a fixed 4-slot tuple. Folding a card leaves a hole (None) in
its slot so collaborators that animate by slot position keep their layout.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Iterator

from ..config import MAX_HEALTH, ROOM_SIZE

EMPTY_ROOM: tuple[int | None, ...] = (None,) * ROOM_SIZE


@dataclass(frozen=True)
class GameState:
    """
    Dungeon state.

    draw is ordered front-to-back: deal takes from the front and an escaped
    room goes back on the end.
    """
    draw: tuple[int, ...] = ()
    room: tuple[int | None, ...] = field(default=EMPTY_ROOM)
    discard: tuple[int, ...] = ()
    health: int = MAX_HEALTH
    shield: int = 0
    was_last_action_potion: bool = False
    last_monster_blocked: int | None = None
    did_escape_last_room: bool = False

    # Transient: set only while a fold is resolving
    folding_card: int | None = None

    @property
    def room_cards(self) -> tuple[int, ...]:
        """Defined room slots, in slot order."""
        return tuple(c for c in self.room if c is not None)

    def iter_cards(self) -> Iterator[int]:
        """Every card index held by the state, pile by pile."""
        yield from self.draw
        yield from self.room_cards
        yield from self.discard

    def slot_of(self, index: int) -> int | None:
        """Room slot holding a card, or None."""
        for slot, card in enumerate(self.room):
            if card == index:
                return slot
        return None

    def _copy_with(self, **kwargs: Any) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form, used for hashing and display."""
        data = asdict(self)
        data["draw"] = list(self.draw)
        data["room"] = list(self.room)
        data["discard"] = list(self.discard)
        return data
