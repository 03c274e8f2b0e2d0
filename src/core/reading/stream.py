"""Iterator adapter over ``LineReaderEngine``."""
from __future__ import annotations

from typing import Iterator, Optional, Union

from .engine import LineReaderEngine

Line = Union[bytes, str]


class LineStream:
    """Fixed ``next``/``at_end``/``position``/``close`` surface plus Python iteration.

    Each call forwards to exactly one engine operation. With ``encoding`` set,
    lines are decoded to ``str`` using the ``errors`` codec handler.
    """

    def __init__(self, engine: LineReaderEngine, *, encoding: Optional[str] = None, errors: str = "strict") -> None:
        self.engine = engine
        self.encoding = encoding
        self.errors = errors

    def next(self) -> Optional[Line]:
        line = self.engine.readline()
        if line is None or self.encoding is None:
            return line
        return line.decode(self.encoding, errors=self.errors)

    def at_end(self) -> bool:
        return self.engine.eof()

    def position(self) -> int:
        return self.engine.tell()

    def close(self) -> None:
        self.engine.close()

    def __iter__(self) -> Iterator[Line]:
        return self

    def __next__(self) -> Line:
        line = self.next()
        if line is None:
            raise StopIteration
        return line

    def __enter__(self) -> "LineStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
