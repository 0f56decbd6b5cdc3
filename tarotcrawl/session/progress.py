"""
Player Progress - Whether the player still needs the tutorial.

The storage mechanism belongs to the host application. The engine only
reads "is player new" and writes "tutorial finished".
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import json
from pathlib import Path


class ProgressStore(ABC):
    """Abstract persistence collaborator for tutorial progress."""

    @abstractmethod
    def is_player_new(self) -> bool:
        """True until the tutorial has been finished once."""
        pass

    @abstractmethod
    def mark_tutorial_finished(self):
        """Record that the tutorial was completed."""
        pass


class InMemoryProgressStore(ProgressStore):
    """Progress that lives as long as the process."""

    def __init__(self, player_is_new: bool = True):
        self._player_is_new = player_is_new

    def is_player_new(self) -> bool:
        return self._player_is_new

    def mark_tutorial_finished(self):
        self._player_is_new = False


class JsonProgressStore(ProgressStore):
    """
    Progress kept in a small JSON flag file.

    Usage:
        progress = JsonProgressStore("~/.tarotcrawl/progress.json")
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def is_player_new(self) -> bool:
        return self._read().get("tutorial") != "done"

    def mark_tutorial_finished(self):
        data = self._read()
        data["tutorial"] = "done"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f)
