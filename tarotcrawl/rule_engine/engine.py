"""
Rule Engine - Pluggable legality checks and state mutations.

The engine decouples "is this action legal right now" and "what exactly
happens on this mutation" from the game logic. Difficulty variants and the
tutorial change behavior by swapping which rules are registered.

Evaluation order is the registration order of an ordered list:
- determine(): any absolute rule short-circuits with its own result,
  otherwise the results of all applicable rules are OR-ed (default False).
- mutate(): every applicable rule computes from the ORIGINAL input state;
  the last applicable rule's result wins (default: state unchanged).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import hashlib
import json
import logging
import threading
import time
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class Determination(Enum):
    """Boolean questions the engine can answer."""
    CAN_ESCAPE = "canEscape"
    CAN_DRINK = "canDrink"
    CAN_FOLD = "canFold"


class Mutation(Enum):
    """State changes the engine can perform."""
    DRINK_POTION = "drinkPotion"


Check = Callable[["GameState"], bool]
Action = Callable[["GameState"], "GameState"]


@dataclass(frozen=True)
class Rule:
    """
    A named rule implementing one or more checks and/or actions.

    absolute: cause determinations to ignore rules registered after this one.
    """
    name: str
    description: str = ""
    absolute: bool = False
    checks: Mapping[Determination, Check] = field(default_factory=dict)
    actions: Mapping[Mutation, Action] = field(default_factory=dict)

    def checks_for(self, kind: Determination) -> bool:
        return kind in self.checks

    def acts_on(self, kind: Mutation) -> bool:
        return kind in self.actions


@dataclass
class DeterminationRecord:
    """One logged determination. Inspection only; never read back by the engine."""
    timestamp: float
    state: GameState
    kind: Determination
    determination: bool
    rules: list[tuple[str, bool]] = field(default_factory=list)


def _log_key(kind: Determination, state: GameState) -> str:
    payload = json.dumps([kind.value, state.to_dict()], sort_keys=True)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class RuleEngine:
    """
    Applies an ordered set of rules to make determinations and mutations.

    Usage:
        rules = RuleEngine()
        rules.apply_rule_set(STANDARD_RULES)

        if rules.determine(state, Determination.CAN_ESCAPE):
            ...
        state = rules.mutate(state, Mutation.DRINK_POTION)
    """

    def __init__(self, rules: Iterable[Rule] | None = None):
        self._rules: list[Rule] = []
        self._log: dict[str, DeterminationRecord] = {}
        self._lock = threading.RLock()
        if rules:
            self.apply_rule_set(rules)

    @property
    def rules(self) -> list[Rule]:
        """Registered rules in evaluation order."""
        with self._lock:
            return list(self._rules)

    def has_rule(self, name: str) -> bool:
        with self._lock:
            return any(r.name == name for r in self._rules)

    def register_rule(self, rule: Rule) -> None:
        """Register a rule. A rule with the same name is replaced in place."""
        with self._lock:
            for i, existing in enumerate(self._rules):
                if existing.name == rule.name:
                    self._rules[i] = rule
                    return
            self._rules.append(rule)

    def remove_rule(self, rule: Rule | str) -> None:
        """Remove a rule by object or name. Unknown names are ignored."""
        name = rule if isinstance(rule, str) else rule.name
        with self._lock:
            self._rules = [r for r in self._rules if r.name != name]

    def apply_rule_set(self, rule_set: Iterable[Rule]) -> None:
        """Register every rule of a set, in order."""
        with self._lock:
            for rule in rule_set:
                self.register_rule(rule)

    def reset_rules(self) -> None:
        with self._lock:
            self._rules = []

    def determine(self, state: GameState, kind: Determination) -> bool:
        """Answer a determination against the registered rules."""
        with self._lock:
            determination = False
            contributing: list[tuple[str, bool]] = []
            for rule in self._rules:
                if not rule.checks_for(kind):
                    continue
                result = bool(rule.checks[kind](state))
                contributing.append((rule.name, result))
                if rule.absolute:
                    determination = result
                    break
                determination = determination or result

            key = _log_key(kind, state)
            if key not in self._log:
                self._log[key] = DeterminationRecord(
                    timestamp=time.time(),
                    state=state,
                    kind=kind,
                    determination=determination,
                    rules=contributing,
                )
            logger.debug("%s -> %s %s", kind.value, determination, contributing)
            return determination

    def mutate(self, state: GameState, kind: Mutation) -> GameState:
        """Apply a mutation. Last applicable rule wins; each sees the input state."""
        with self._lock:
            result = state
            for rule in self._rules:
                if rule.acts_on(kind):
                    result = rule.actions[kind](state)
            return result

    def dump_log(self) -> dict[str, DeterminationRecord]:
        """Return a copy of the determination log."""
        with self._lock:
            return dict(self._log)
