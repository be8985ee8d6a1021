"""
indentdedent - Indentation to indent/dedent marker transform

Streams off-side-rule text into a marker-delimited form a context-free
grammar can parse.
"""

__version__ = "1.0.0"

from .stream import IndentDedentStream, transform
from .source import EOF, CharSource, source_open
from .errors import IndentDedentError, IndentationMismatchError
from .log import LOG, state_connectToLogger

__all__ = [
    "IndentDedentStream",
    "transform",
    "EOF",
    "CharSource",
    "source_open",
    "IndentDedentError",
    "IndentationMismatchError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
