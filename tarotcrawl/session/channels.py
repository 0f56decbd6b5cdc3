"""
Collaborator Channels - Explicit hand-offs between the core and its UI.

- DialogueChannel: the core emits ordered lines of text, the dialogue UI
  listens. Fire-and-forget.
- AnimationSignals: the renderer reports that a deal or discard animation
  finished. The tutorial paces itself on these.

Both are plain instances owned by a session; there is no global bus.
"""

from __future__ import annotations
from enum import Enum
from typing import Callable, Sequence

DialogueListener = Callable[[list[str]], None]
SignalListener = Callable[["SignalKind"], None]


class SignalKind(Enum):
    """Completion signals raised by the rendering collaborator."""
    DEAL_COMPLETE = "DealComplete"
    DISCARD_COMPLETE = "DiscardComplete"


class DialogueChannel:
    """Emit-only channel carrying ordered lines of text."""

    def __init__(self):
        self._listeners: list[DialogueListener] = []

    def subscribe(self, listener: DialogueListener) -> Callable[[], None]:
        """Listen for lines. Returns an unsubscriber."""
        self._listeners.append(listener)
        return lambda: self._unsubscribe(listener)

    def _unsubscribe(self, listener: DialogueListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, text: str | Sequence[str]):
        """Emit text. A string is split into lines on newlines."""
        if isinstance(text, str):
            lines = text.split("\n")
        else:
            lines = [line for item in text for line in item.split("\n")]
        for listener in list(self._listeners):
            listener(lines)


class AnimationSignals:
    """Completion signals from the renderer, fanned out per kind."""

    def __init__(self):
        self._listeners: dict[SignalKind, list[SignalListener]] = {
            kind: [] for kind in SignalKind
        }

    def subscribe(self, kind: SignalKind, listener: SignalListener) -> Callable[[], None]:
        """Listen for one kind of signal. Returns an unsubscriber."""
        self._listeners[kind].append(listener)
        return lambda: self._unsubscribe(kind, listener)

    def _unsubscribe(self, kind: SignalKind, listener: SignalListener):
        if listener in self._listeners[kind]:
            self._listeners[kind].remove(listener)

    def emit(self, kind: SignalKind):
        for listener in list(self._listeners[kind]):
            listener(kind)

    def deal_complete(self):
        """Called by the renderer once per finished deal animation."""
        self.emit(SignalKind.DEAL_COMPLETE)

    def discard_complete(self):
        """Called by the renderer once per finished discard animation."""
        self.emit(SignalKind.DISCARD_COMPLETE)
