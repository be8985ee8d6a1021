"""
Stream data models

Value types shared by the indentation stack, the escape tracker and the
transform driver.
"""

from enum import Enum
from dataclasses import dataclass


class LevelChange(Enum):
    """
    Outcome of comparing a line's leading whitespace with the stack

    Used by IndentDedentStream to decide which markers to emit.
    """
    SAME = "same"            # run matches the current deepest level exactly
    INDENT = "indent"        # run extends the deepest level
    DEDENT = "dedent"        # run aligns with an ancestor level
    MALFORMED = "malformed"  # run aligns with no level at all


@dataclass(frozen=True)
class IndentLevel:
    """
    One nesting level's literal whitespace prefix

    Stores only the whitespace this level added on top of its parent,
    exactly as it appeared on the line that opened it.

    Attributes:
        indentation: Non-empty run of whitespace characters

    Example:
        For the lines "a\\n  b\\n  \\tc" the stack holds
        [IndentLevel("  "), IndentLevel("\\t")]
    """
    indentation: str

    def __post_init__(self) -> None:
        if not self.indentation:
            raise ValueError("IndentLevel requires a non-empty indentation")

    def prefix_is(self, run: str) -> bool:
        """Check if this level's whitespace is a literal prefix of run"""
        return run.startswith(self.indentation)

    def __len__(self) -> int:
        return len(self.indentation)


@dataclass(frozen=True)
class EscapeRule:
    """
    Pair of characters delimiting a region without indentation analysis

    A single-line escape is a rule whose close character is the newline
    character, e.g. EscapeRule("#", "\\n") for shell style comments.

    Attributes:
        open: Character that starts the escape region
        close: Character that ends it (and is still part of the region)
    """
    open: str
    close: str

    def __post_init__(self) -> None:
        for name, value in (("open", self.open), ("close", self.close)):
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"EscapeRule.{name} must be a single character, got {value!r}")


@dataclass(frozen=True)
class LevelResolution:
    """
    Result of matching a whitespace run against the indentation stack

    Returned by IndentationStack.level_resolve().

    Attributes:
        matched: Number of stack levels consumed as a prefix chain
        remainder: Whitespace left over after stripping matched levels
        depth: Stack depth at the time of resolution

    Example:
        Stack ["  ", "\\t"], run "  \\t " resolves to
        LevelResolution(matched=2, remainder=" ", depth=2) -> INDENT
    """
    matched: int
    remainder: str
    depth: int

    @property
    def change(self) -> LevelChange:
        if self.matched == self.depth:
            return LevelChange.INDENT if self.remainder else LevelChange.SAME
        if self.remainder:
            return LevelChange.MALFORMED
        return LevelChange.DEDENT

    @property
    def dedents(self) -> int:
        """Number of levels to pop for a DEDENT"""
        return self.depth - self.matched
