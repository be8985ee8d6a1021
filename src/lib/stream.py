"""
Indent/dedent transform stream

Turns indentation-sensitive text into an indentation-free character
stream: every increase in indentation becomes one indent marker, every
decrease one dedent marker per closed level, and the leading whitespace
itself is dropped (or kept after the markers, if asked to).

The stream is pull-based and works one unit at a time:
1. Line start: read the leading whitespace run into a lookahead buffer
2. Resolution: match the run against the indentation stack
3. Emission: queue markers, optional whitespace and the first content
   character, then hand them out one per read

Whitespace-only lines, and lines whose whitespace runs into an escape
region, are replayed verbatim without touching the stack.

Example:
    >>> stream = IndentDedentStream("level 1\\n    level 2\\n    still level 2\\n")
    >>> stream.read()
    'level 1\\n>level 2\\nstill level 2\\n<'
"""

from collections import deque
from typing import Any, Deque, Iterator, Optional, Set, Tuple, TYPE_CHECKING

from ..models.stream import EscapeRule, IndentLevel, LevelChange
from .escapes import EscapeTracker
from .errors import IndentationMismatchError
from .indentation import IndentationStack
from .log import LOG
from .source import EOF, CharSource, source_open

if TYPE_CHECKING:
    from ..config.settings import AppSettings


def _char_check(name: str, value: Any) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{name} must be a single character, got {value!r}")
    return value


class IndentDedentStream:
    r"""
    Streaming indent/dedent transform over a character source

    Handles:
    - Indent and dedent markers from literal prefix matching
    - Flushing open levels as dedents at end of input
    - Escape regions that suspend indentation analysis
    - Configurable markers, newline and whitespace characters
    - Optional preservation of the original indentation

    Configuration changes apply from the next read onwards. Changing the
    whitespace set or the newline character in the middle of a line gives
    undefined results.

    The stream is not reentrant; drive it from one caller at a time.
    """

    def __init__(self, source: Any, name: Optional[str] = None) -> None:
        """
        Initialize the stream over a source

        Args:
            source: str, text file-like object, iterable of strings or
                    CharSource (see source_open())
            name: Optional display name for error messages

        Attributes:
            source: The wrapped CharSource
            name: Display name reported in IndentationMismatchError
        """
        self.source: CharSource = source_open(source, name=name)
        self.name = name if name is not None else getattr(self.source, "name", None)

        self._stack = IndentationStack()
        self._escapes = EscapeTracker()
        # read ahead to decide, then replay
        self._buffer: Deque[str] = deque()
        self._whitespace: Set[str] = {" ", "\t"}

        self._indent_char = ">"
        self._dedent_char = "<"
        self._newline_char = "\n"
        self._keep_whitespace = False

        # no character read yet counts as a line start
        self._line_start = True
        self._exhausted = False
        self._closed = False

        self._line = 1
        self._column = 0

        # markers queued so far, end-of-input flush included
        self.indents_emitted = 0
        self.dedents_emitted = 0

    @classmethod
    def from_settings(
        cls, source: Any, settings: "AppSettings", name: Optional[str] = None
    ) -> "IndentDedentStream":
        """
        Create a stream configured from an AppSettings instance

        Args:
            source: Anything accepted by the constructor
            settings: Settings providing markers, whitespace and escapes
            name: Optional display name for error messages

        Returns:
            Configured IndentDedentStream
        """
        stream = cls(source, name=name)
        stream.indent_char = settings.indent_char
        stream.dedent_char = settings.dedent_char
        stream.newline_char = settings.newline_char
        stream.keep_whitespace = settings.keep_whitespace
        stream.whitespace_remove(*stream.whitespace)
        stream.whitespace_add(*settings.whitespace_chars)
        for char in settings.single_line_escapes:
            stream.escape_addSingleLine(char)
        for open_char, close_char in settings.pairedEscapes_parse():
            stream.escape_addPaired(open_char, close_char)
        return stream

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_one(self) -> str:
        """
        Return the next transformed unit, or EOF ("") at end of input

        Returns:
            One character, or the empty string once the input is exhausted
            and all open levels have been closed

        Raises:
            IndentationMismatchError: A line's whitespace aligns with no level
            ValueError: The stream is closed
        """
        if self._closed:
            raise ValueError("I/O operation on closed stream")

        if self._buffer:
            unit = self._buffer.popleft()
        else:
            unit = self._pull()
            if unit != EOF:
                unit = self._unit_process(unit)

        if unit == EOF:
            return self._eof_flush()

        self._line_start = unit == self._newline_char
        return unit

    def read(self, size: int = -1) -> str:
        """
        Read up to size units (all remaining if size is negative)

        Stops early at end of input, like io.TextIOBase.read().
        """
        chars = []
        while size < 0 or len(chars) < size:
            unit = self.read_one()
            if unit == EOF:
                break
            chars.append(unit)
        return "".join(chars)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        unit = self.read_one()
        if unit == EOF:
            raise StopIteration
        return unit

    def _pull(self) -> str:
        """Read one unit from the source, tracking the position"""
        if self._exhausted:
            return EOF
        unit = self.source.read_one()
        if unit == EOF:
            self._exhausted = True
        elif unit == self._newline_char:
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        return unit

    def _unit_process(self, unit: str) -> str:
        """Run a freshly pulled unit through escape and line-start logic"""
        if self._escapes.character_observe(unit):
            return unit
        if not self._line_start:
            return unit
        return self._line_resolve(unit)

    def _line_resolve(self, unit: str) -> str:
        """
        Read a line's leading whitespace and emit the resulting markers

        Args:
            unit: First unit of the line, already seen by the escape tracker

        Returns:
            The first unit to hand out; the rest wait in the buffer
        """
        run = []
        escaping = False
        while unit != EOF and unit in self._whitespace:
            run.append(unit)
            self._buffer.append(unit)
            unit = self._pull()
            if unit != EOF and self._escapes.character_observe(unit):
                escaping = True
                break

        if unit == EOF or unit == self._newline_char or escaping:
            # blank or escaped line: replay as read, levels unchanged
            self._buffer.append(unit)
            return self._buffer.popleft()

        indentation = "".join(run)
        resolution = self._stack.level_resolve(indentation)
        change = resolution.change

        if change is LevelChange.MALFORMED:
            raise IndentationMismatchError(
                f"unindent does not match any outer indentation level "
                f"(depth {resolution.depth}, {resolution.matched} matched, "
                f"{resolution.remainder!r} left over)",
                lineno=self._line,
                offset=self._column,
                text=indentation,
                depth=resolution.depth,
                remainder=resolution.remainder,
                filename=self.name,
            )

        replay = list(self._buffer) if self._keep_whitespace else []
        self._buffer.clear()

        if change is LevelChange.INDENT:
            self._stack.push(resolution.remainder)
            LOG(
                f"Indent at line {self._line}: pushed {resolution.remainder!r} "
                f"(depth {self._stack.depth})",
                level=3,
            )
            self._buffer.append(self._indent_char)
            self.indents_emitted += 1
        elif change is LevelChange.DEDENT:
            for _ in range(resolution.dedents):
                self._stack.pop()
                self._buffer.append(self._dedent_char)
            self.dedents_emitted += resolution.dedents
            LOG(
                f"Dedent at line {self._line}: popped {resolution.dedents} "
                f"(depth {self._stack.depth})",
                level=3,
            )

        self._buffer.extend(replay)
        self._buffer.append(unit)
        return self._buffer.popleft()

    def _eof_flush(self) -> str:
        """Close every open level with a dedent marker at end of input"""
        depth = self._stack.depth
        if not depth:
            return EOF
        LOG(f"End of input: flushing {depth} dedent(s)", level=2)
        self._stack.clear()
        self._buffer.extend(self._dedent_char for _ in range(depth))
        self.dedents_emitted += depth
        self._buffer.append(EOF)
        self._line_start = False
        return self._buffer.popleft()

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying source; further calls do nothing"""
        if self._closed:
            return
        self._closed = True
        LOG(f"Closing stream {self.name or ''}".rstrip(), level=2)
        self.source.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def available(self) -> int:
        """Advisory count of units readable without blocking"""
        if self._buffer:
            return len(self._buffer)
        return self.source.available()

    def __enter__(self) -> "IndentDedentStream":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Configuration and inspection
    # ------------------------------------------------------------------

    @property
    def indent_char(self) -> str:
        return self._indent_char

    @indent_char.setter
    def indent_char(self, value: str) -> None:
        self._indent_char = _char_check("indent_char", value)

    @property
    def dedent_char(self) -> str:
        return self._dedent_char

    @dedent_char.setter
    def dedent_char(self, value: str) -> None:
        self._dedent_char = _char_check("dedent_char", value)

    @property
    def newline_char(self) -> str:
        return self._newline_char

    @newline_char.setter
    def newline_char(self, value: str) -> None:
        self._newline_char = _char_check("newline_char", value)

    @property
    def keep_whitespace(self) -> bool:
        """Whether the original indentation follows the emitted markers"""
        return self._keep_whitespace

    @keep_whitespace.setter
    def keep_whitespace(self, value: bool) -> None:
        self._keep_whitespace = bool(value)

    @property
    def whitespace(self) -> frozenset:
        return frozenset(self._whitespace)

    def whitespace_add(self, *chars: str) -> None:
        """Treat chars as indentation-significant from now on"""
        for char in chars:
            self._whitespace.add(_char_check("whitespace character", char))

    def whitespace_remove(self, *chars: str) -> None:
        """Stop treating chars as indentation-significant"""
        for char in chars:
            self._whitespace.discard(char)

    def escape_add(self, rule: EscapeRule) -> None:
        self._escapes.rule_add(rule)

    def escape_addPaired(self, open_char: str, close_char: str) -> None:
        """Suspend indentation analysis from open_char through close_char"""
        self.escape_add(EscapeRule(open_char, close_char))

    def escape_addSingleLine(self, open_char: str) -> None:
        """
        Suspend indentation analysis from open_char to the end of the line

        The region closes at the newline character configured at the time
        of this call.
        """
        self.escape_add(EscapeRule(open_char, self._newline_char))

    @property
    def escapes(self) -> Tuple[EscapeRule, ...]:
        return self._escapes.view()

    @property
    def escape_active(self) -> Optional[EscapeRule]:
        return self._escapes.active

    @property
    def indentations(self) -> Tuple[IndentLevel, ...]:
        """Open indentation levels, shallowest first"""
        return self._stack.view()

    @property
    def depth(self) -> int:
        return self._stack.depth


_TRANSFORM_OPTIONS = frozenset({
    "indent_char",
    "dedent_char",
    "newline_char",
    "keep_whitespace",
    "whitespace",
    "single_line_escapes",
    "paired_escapes",
})


def transform(source: Any, **options: Any) -> str:
    """
    Run a whole input through a configured IndentDedentStream

    Args:
        source: Anything accepted by IndentDedentStream
        **options: indent_char, dedent_char, newline_char, keep_whitespace,
                   whitespace (replaces the whitespace set),
                   single_line_escapes (iterable of open chars),
                   paired_escapes (iterable of (open, close) pairs)

    Returns:
        The complete transformed text

    Example:
        >>> transform("Hello\\n  World")
        'Hello\\n>World<'
        >>> transform("a\\n  # note\\n b", single_line_escapes="#")
        'a\\n  # note\\n>b<'
    """
    unknown = set(options) - _TRANSFORM_OPTIONS
    if unknown:
        raise TypeError(f"unexpected transform options: {', '.join(sorted(unknown))}")

    with IndentDedentStream(source) as stream:
        for key in ("indent_char", "dedent_char", "newline_char", "keep_whitespace"):
            if key in options:
                setattr(stream, key, options[key])
        if "whitespace" in options:
            stream.whitespace_remove(*stream.whitespace)
            stream.whitespace_add(*options["whitespace"])
        for open_char in options.get("single_line_escapes", ()):
            stream.escape_addSingleLine(open_char)
        for open_char, close_char in options.get("paired_escapes", ()):
            stream.escape_addPaired(open_char, close_char)
        return stream.read()
