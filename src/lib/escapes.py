"""
Escape region tracking

An escape region suspends indentation analysis between an open and a
close character, e.g. a parenthesized expression spanning several lines
or a comment running to the end of the line.

Regions do not nest: while one rule is active, the open characters of all
other rules are ordinary text until the active rule's close character.
"""

from typing import List, Optional, Tuple

from ..models.stream import EscapeRule
from .log import LOG


class EscapeTracker:
    """
    Registry of EscapeRule plus the zero-or-one rule currently active

    Every unit pulled from the source is shown to character_observe()
    exactly once, in source order.
    """

    def __init__(self) -> None:
        self.rules: List[EscapeRule] = []
        self.active: Optional[EscapeRule] = None

    def rule_add(self, rule: EscapeRule) -> None:
        self.rules.append(rule)

    def view(self) -> Tuple[EscapeRule, ...]:
        return tuple(self.rules)

    def character_observe(self, char: str) -> bool:
        """
        Feed one unit and report whether it lies inside an escape region

        The opening character starts the region and the closing character
        still belongs to it. A closing character never opens a new region
        in the same call.

        Args:
            char: Unit just pulled from the source

        Returns:
            True if indentation analysis must be skipped for this unit
        """
        if self.active is not None:
            if char == self.active.close:
                LOG(f"Escape: leaving {self.active.open!r}...{self.active.close!r}", level=3)
                self.active = None
            return True

        for rule in self.rules:
            if rule.open == char:
                LOG(f"Escape: entering {rule.open!r}...{rule.close!r}", level=3)
                self.active = rule
                return True
        return False
