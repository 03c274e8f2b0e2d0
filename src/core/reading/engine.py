"""Cursor/direction state machine for bidirectional line reading."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from common.config import resolve_reader_options
from common.errors import InvalidArgumentError, InvalidOperationError
from common.models import Direction, Origin, ReaderOptions, ReadMode
from common.text import normalize_line_endings

from .block_source import BlockSource
from .scanner import LineBoundaryScanner, ScanResult
from .separator import build_separator
from .window import SlidingWindow

logger = logging.getLogger(__name__)


class LineReaderEngine:
    """Reads lines forward or backward from a cursor without loading the file.

    ``line_num`` is the signed distance in lines between the origin and the
    cursor: forward reads add one, backward reads subtract one, and
    ``switch`` never touches it. After a switch the next ``readline`` returns
    the line that was just read, from the other side.
    """

    def __init__(self, source: BlockSource, options: ReaderOptions) -> None:
        self.options = options
        self._source = source
        self._direction = options.initial_direction
        self._cursor = 0 if options.origin is Origin.HEAD else source.file_size
        self._line_num = 0
        self._closed = False
        self._window = SlidingWindow(source, options.block_size, anchor=self._cursor)
        self._scanner = LineBoundaryScanner(
            self._window,
            build_separator(
                options.separator,
                horizon=options.pattern_horizon,
                tie_break=options.backward_tie_break,
            ),
        )
        logger.debug(
            "opened %s (size=%d, mode=%s, cursor=%d)",
            source.name,
            source.file_size,
            options.mode.value,
            self._cursor,
        )

    # ------------------------------------------------------------------
    # accessors

    @property
    def mode(self) -> ReadMode:
        return self.options.mode

    @property
    def binmode(self) -> bool:
        return self.options.binmode

    @property
    def file_size(self) -> int:
        return self._source.file_size

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def line_num(self) -> int:
        return self._line_num

    @property
    def window(self) -> SlidingWindow:
        return self._window

    def tell(self) -> int:
        return self._cursor

    def eof(self) -> bool:
        if self._closed:
            return True
        if self._direction is Direction.FORWARD:
            return self._cursor >= self.file_size
        return self._cursor <= 0

    def handle(self) -> BinaryIO:
        """Underlying binary handle positioned at ``tell()``.

        Meant for callers that apply external locking; the engine does not
        track the handle's position afterwards and the caller must not close it.
        """

        if self._closed:
            raise InvalidOperationError("reader is closed")
        return self._source.handle_at(self._cursor)

    # ------------------------------------------------------------------
    # operations

    def readline(self) -> Optional[bytes]:
        """Next line in the current direction, or ``None`` at end-of-stream."""

        if self._closed:
            return None
        previous = self._cursor
        if self._direction is Direction.FORWARD:
            result = self._scanner.scan_forward(previous)
            if result is None:
                return None
            self._window.evict_before(previous)
            step = 1
        else:
            result = self._scanner.scan_backward(previous)
            if result is None:
                return None
            self._window.evict_after(previous)
            step = -1
        self._cursor = result.cursor
        self._line_num += step
        return self._finish(result)

    def switch(self) -> Direction:
        if self.mode is not ReadMode.BIDIRECTIONAL:
            raise InvalidOperationError(
                f"cannot switch direction of a {self.mode.value} reader",
                context={"mode": self.mode.value},
            )
        self._direction = self._direction.opposite
        logger.debug("direction switched to %s at cursor %d", self._direction.value, self._cursor)
        return self._direction

    def direction(self, value: Union[Direction, str, None] = None) -> Direction:
        """Return the current direction, switching first when ``value`` differs."""

        if value is None:
            return self._direction
        target = _coerce_direction(value)
        if target is not self._direction:
            self.switch()
        return self._direction

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._window.release()
        logger.debug("closed %s at cursor %d, line_num %d", self._source.name, self._cursor, self._line_num)
        self._source.close()

    def __enter__(self) -> "LineReaderEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _finish(self, result: ScanResult) -> bytes:
        if self.options.binmode:
            return result.line
        return normalize_line_endings(result.line)


def _coerce_direction(value: Any) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.lower())
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"direction must be 'forward' or 'backward', got {value!r}",
        context={"value": repr(value)},
    )


def open_reader(
    target: Union[str, Path, BinaryIO],
    *,
    options: Optional[ReaderOptions] = None,
    **option_values: Any,
) -> LineReaderEngine:
    """Validate options, then open ``target`` (a path or a binary handle) for reading.

    Keyword arguments are those of ``resolve_reader_options``; a handle passed
    in is borrowed and left open by ``close``.
    """

    if options is None:
        options = resolve_reader_options(**option_values)
    elif option_values:
        raise InvalidArgumentError("pass either options or individual option values, not both")
    if isinstance(target, (str, Path)):
        source = BlockSource.open(target)
    else:
        source = BlockSource(target, owns_handle=False)
    return LineReaderEngine(source, options)
