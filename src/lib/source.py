"""
Character sources for the transform engine

The engine pulls its input one unit at a time from a CharSource: a lazy,
finite, non-restartable sequence of one-character strings where the empty
string marks end of input. Any error a source raises reaches the engine's
caller unchanged.

source_open() adapts the usual Python inputs:
    - str                       -> TextSource
    - text file-like (.read)    -> StreamSource
    - iterable of strings       -> IterableSource
    - CharSource implementation -> used as is
"""

from typing import Any, Iterable, Iterator, Optional, Protocol, runtime_checkable


EOF = ""


@runtime_checkable
class CharSource(Protocol):
    """Pull-based, fallible source of one-character units"""

    def read_one(self) -> str:
        ...

    def close(self) -> None:
        ...

    def available(self) -> int:
        ...


class TextSource:
    """In-memory source over a string"""

    def __init__(self, text: str, name: Optional[str] = None) -> None:
        self.text = text
        self.position = 0
        self.name = name

    def read_one(self) -> str:
        if self.position >= len(self.text):
            return EOF
        char = self.text[self.position]
        self.position += 1
        return char

    def close(self) -> None:
        self.position = len(self.text)

    def available(self) -> int:
        return len(self.text) - self.position


class StreamSource:
    """
    Source over a text file-like object

    Pulls read(1) from the wrapped object, so the file is never loaded
    whole. close() closes the wrapped object.
    """

    def __init__(self, stream: Any, name: Optional[str] = None) -> None:
        self.stream = stream
        self.name = name if name is not None else getattr(stream, "name", None)

    def read_one(self) -> str:
        char = self.stream.read(1)
        if isinstance(char, bytes):
            raise TypeError(
                f"StreamSource needs a text stream, {self.stream!r} returned bytes"
            )
        return char

    def close(self) -> None:
        self.stream.close()

    def available(self) -> int:
        return 0


class IterableSource:
    """
    Source over any iterable of strings

    Strings longer than one character are split into units. End of input
    is sticky: once the iterator is exhausted it is not pulled again.
    """

    def __init__(self, iterable: Iterable[str], name: Optional[str] = None) -> None:
        self.iterator: Iterator[str] = iter(iterable)
        self.pending = ""
        self.exhausted = False
        self.name = name

    def read_one(self) -> str:
        while not self.pending:
            if self.exhausted:
                return EOF
            try:
                self.pending = next(self.iterator)
            except StopIteration:
                self.exhausted = True
                return EOF
        char, self.pending = self.pending[0], self.pending[1:]
        return char

    def close(self) -> None:
        self.exhausted = True
        self.pending = ""
        close = getattr(self.iterator, "close", None)
        if close is not None:
            close()

    def available(self) -> int:
        return len(self.pending)


def source_open(obj: Any, name: Optional[str] = None) -> CharSource:
    """
    Adapt obj to a CharSource

    Args:
        obj: str, text file-like object, iterable of strings or CharSource
        name: Optional display name used in error messages

    Returns:
        A CharSource reading from obj

    Raises:
        TypeError: obj is none of the supported kinds
    """
    if isinstance(obj, str):
        return TextSource(obj, name=name)
    if isinstance(obj, CharSource):
        return obj
    if hasattr(obj, "read"):
        return StreamSource(obj, name=name)
    if isinstance(obj, (bytes, bytearray)):
        raise TypeError("decode bytes before transforming them")
    try:
        return IterableSource(obj, name=name)
    except TypeError:
        raise TypeError(f"cannot read characters from {type(obj).__name__}") from None
