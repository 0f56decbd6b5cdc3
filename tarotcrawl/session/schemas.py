"""
Pydantic Schemas - The read-only view published to collaborators.

After every machine transition, subscribers receive a DungeonView: the
active state path plus the full game state. Renderers derive card
placement from it; the tutorial watches it for progress.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..engine_core.state import GameState


class DungeonView(BaseModel):
    """Snapshot of the turn machine after a transition."""
    state: str = Field(description="Active state path, e.g. Dungeon.PlayerTurn")
    draw: tuple[int, ...] = ()
    room: tuple[Optional[int], ...] = ()
    discard: tuple[int, ...] = ()
    health: int
    shield: int
    was_last_action_potion: bool = False
    last_monster_blocked: Optional[int] = None
    did_escape_last_room: bool = False
    folding_card: Optional[int] = None

    model_config = {"frozen": True}

    @classmethod
    def from_state(cls, path: str, state: GameState) -> "DungeonView":
        return cls(
            state=path,
            draw=state.draw,
            room=state.room,
            discard=state.discard,
            health=state.health,
            shield=state.shield,
            was_last_action_potion=state.was_last_action_potion,
            last_monster_blocked=state.last_monster_blocked,
            did_escape_last_room=state.did_escape_last_room,
            folding_card=state.folding_card,
        )

    def matches(self, path: str) -> bool:
        """True if the active state is path or one of its children."""
        return self.state == path or self.state.startswith(path + ".")
