"""
indentdedent - Indentation to indent/dedent marker transform

Replaces each increase in leading whitespace with an indent marker and each
decrease with dedent markers, so parsers never see indentation.
"""

__version__ = "1.0.0"

from .lib import (
    IndentDedentStream,
    transform,
    EOF,
    CharSource,
    source_open,
    IndentDedentError,
    IndentationMismatchError,
    LOG,
    state_connectToLogger,
)
from .models import IndentLevel, EscapeRule

__all__ = [
    "IndentDedentStream",
    "transform",
    "EOF",
    "CharSource",
    "source_open",
    "IndentDedentError",
    "IndentationMismatchError",
    "IndentLevel",
    "EscapeRule",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
