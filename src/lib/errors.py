"""
Exception classes for indentdedent

Errors raised by the upstream character source are not wrapped: they
propagate out of read_one() unchanged.
"""

from typing import Optional


class IndentDedentError(Exception):
    """Base exception for all indentdedent errors"""


class IndentationMismatchError(IndentDedentError, IndentationError):
    """
    A line's leading whitespace aligns with no open indentation level

    Raised when the run neither extends the deepest level nor matches the
    concatenation of some ancestor levels exactly, e.g. the last line of
    "a\\n  c\\n b". Being an IndentationError (and so a SyntaxError), it is
    caught by any handler written for compiler-style errors.

    The stream is unusable after this error; its state is not rolled back.

    Attributes:
        lineno: 1-based line number of the offending line
        offset: 1-based column of the first non-whitespace character
        text: The offending whitespace run
        depth: Indentation stack depth when the line was read
        remainder: Part of the run left after stripping matched levels
    """

    def __init__(
        self,
        message: str,
        lineno: Optional[int] = None,
        offset: Optional[int] = None,
        text: Optional[str] = None,
        depth: int = 0,
        remainder: str = "",
        filename: Optional[str] = None,
    ) -> None:
        self.depth = depth
        self.remainder = remainder
        super().__init__(message, (filename, lineno, offset, text))
