"""
Indentation stack and level resolution

Keeps the literal whitespace of every open nesting level and matches a
newly read whitespace run against it as a prefix chain.

Levels are compared by exact character sequence, never by width: a tab is
not worth any number of spaces. A run that mixes tabs and spaces
differently from the lines that opened its levels is malformed.

Example:
    >>> stack = IndentationStack()
    >>> stack.push("  ")
    >>> stack.push("\\t")
    >>> stack.level_resolve("  ")
    LevelResolution(matched=1, remainder='', depth=2)
    >>> stack.level_resolve("  \\t ").change
    <LevelChange.INDENT: 'indent'>
"""

from typing import List, Tuple

from ..models.stream import IndentLevel, LevelResolution


class IndentationStack:
    """
    Ordered stack of IndentLevel, index 0 = shallowest

    Each entry holds only the whitespace its level added to its parent, so
    the full indentation of level i is the concatenation of entries 0..i.
    """

    def __init__(self) -> None:
        self.levels: List[IndentLevel] = []

    @property
    def depth(self) -> int:
        return len(self.levels)

    def view(self) -> Tuple[IndentLevel, ...]:
        """Read-only snapshot of the open levels"""
        return tuple(self.levels)

    def push(self, indentation: str) -> IndentLevel:
        level = IndentLevel(indentation)
        self.levels.append(level)
        return level

    def pop(self) -> IndentLevel:
        return self.levels.pop()

    def clear(self) -> None:
        self.levels.clear()

    def level_resolve(self, run: str) -> LevelResolution:
        """
        Match a whitespace run against the stack from the bottom up

        Strips each level's whitespace off the front of the run for as long
        as it is a prefix of what remains, stopping at the first level that
        does not match or when the stack is exhausted.

        Args:
            run: Leading whitespace of a line, as read

        Returns:
            LevelResolution with the matched level count and the leftover
        """
        remainder = run
        matched = 0
        for level in self.levels:
            if not level.prefix_is(remainder):
                break
            remainder = remainder[len(level):]
            matched += 1
        return LevelResolution(matched=matched, remainder=remainder, depth=self.depth)
