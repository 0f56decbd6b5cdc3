"""
Rule Engine - Pluggable rules controlling legality and side effects.

Rules answer boolean determinations (canEscape, canDrink, canFold) and
perform mutations (drinkPotion). Swapping the registered rules changes how
the dungeon plays without touching the game logic.
"""

from .engine import Determination, DeterminationRecord, Mutation, Rule, RuleEngine
from . import escape, folding, potion
from .rulesets import (
    EASY_RULES,
    HARD_RULES,
    STANDARD_RULES,
    TUTORIAL_SUSPENDED_KINDS,
    rule_set_for,
    tutorial_suspended,
)

__all__ = [
    "Determination",
    "DeterminationRecord",
    "Mutation",
    "Rule",
    "RuleEngine",
    "escape",
    "folding",
    "potion",
    "EASY_RULES",
    "HARD_RULES",
    "STANDARD_RULES",
    "TUTORIAL_SUSPENDED_KINDS",
    "rule_set_for",
    "tutorial_suspended",
]
