"""Named rule sets, one per difficulty."""

from __future__ import annotations
from typing import Iterable

from ..config import Difficulty
from . import escape, folding, potion
from .engine import Determination, Rule

STANDARD_RULES: tuple[Rule, ...] = (
    folding.InRoom,
    escape.SingleRoom,
    escape.NoEnemies,
    potion.SubsequenceImpotence,
)

# The "development" set: escape any room, every potion heals.
EASY_RULES: tuple[Rule, ...] = (
    folding.InRoom,
    escape.Always,
    potion.AllYouCanEat,
)

HARD_RULES: tuple[Rule, ...] = (
    folding.InRoom,
    escape.NoEnemies,
    potion.SubsequenceSickness,
)

# Kinds the tutorial takes over while it railroads the player.
TUTORIAL_SUSPENDED_KINDS: tuple[Determination, ...] = (
    Determination.CAN_FOLD,
    Determination.CAN_ESCAPE,
)

_RULE_SETS = {
    Difficulty.STANDARD: STANDARD_RULES,
    Difficulty.EASY: EASY_RULES,
    Difficulty.HARD: HARD_RULES,
}


def rule_set_for(difficulty: Difficulty) -> list[Rule]:
    """Ordered rules for a difficulty."""
    return list(_RULE_SETS[difficulty])


def tutorial_suspended(rules: Iterable[Rule]) -> list[Rule]:
    """Registered rules that fold or escape, in evaluation order."""
    return [
        rule for rule in rules
        if any(rule.checks_for(kind) for kind in TUTORIAL_SUSPENDED_KINDS)
    ]
