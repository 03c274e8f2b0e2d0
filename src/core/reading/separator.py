"""Separator matching over a window buffer: literal bytes or a compiled pattern.

Both matchers work on buffer-relative offsets and return ``(start, end)``
spans. ``None`` means no conclusive match: the caller grows the window
unless ``final`` says the buffer edge being searched toward is a file edge.
"""
from __future__ import annotations

from typing import Optional, Pattern, Tuple, Union

Span = Tuple[int, int]


class LiteralSeparator:
    """Byte-exact separator. Any occurrence fully inside the buffer is conclusive."""

    def __init__(self, token: bytes) -> None:
        self.token = token
        # bytes a partially loaded occurrence can hide at a buffer edge
        self.overlap = len(token) - 1

    def find_forward(self, buf: bytearray, pos: int, *, final: bool) -> Optional[Span]:
        idx = buf.find(self.token, pos)
        if idx < 0:
            return None
        return idx, idx + len(self.token)

    def find_backward(self, buf: bytearray, limit: int, *, final: bool) -> Optional[Span]:
        idx = buf.rfind(self.token, 0, limit)
        if idx < 0:
            return None
        return idx, idx + len(self.token)

    def __repr__(self) -> str:
        return f"LiteralSeparator({self.token!r})"


class PatternSeparator:
    """Regular-expression separator over bytes.

    A match whose far side lies within ``horizon`` bytes of a non-final
    buffer edge is inconclusive, since more bytes could extend it or expose
    an earlier-starting match. Zero-length matches never delimit lines.
    """

    overlap = None

    def __init__(self, regex: Pattern[bytes], *, horizon: int = 256, tie_break: str = "longest") -> None:
        self.regex = regex
        self.horizon = horizon
        self.tie_break = tie_break

    def find_forward(self, buf: bytearray, pos: int, *, final: bool) -> Optional[Span]:
        match = self.regex.search(buf, pos)
        while match is not None and match.end() == match.start():
            if match.start() >= len(buf):
                return None
            match = self.regex.search(buf, match.start() + 1)
        if match is None:
            return None
        if not final and match.end() + self.horizon > len(buf):
            return None
        return match.start(), match.end()

    def find_backward(self, buf: bytearray, limit: int, *, final: bool) -> Optional[Span]:
        last = None
        for match in self.regex.finditer(buf, 0, limit):
            if match.end() > match.start():
                last = match
        if last is None:
            return None
        if not final and last.start() < self.horizon:
            return None
        return self._break_tie(buf, last.start(), last.end(), limit)

    def _break_tie(self, buf: bytearray, start: int, end: int, limit: int) -> Span:
        # finditer never starts a match inside [end, limit), so every competing
        # candidate starts inside the last match found.
        best_start, best_end = start, end
        prefer_later = self.tie_break == "shortest"
        for offset in range(start + 1, end):
            match = self.regex.match(buf, offset, limit)
            if match is None or match.end() == offset:
                continue
            if match.end() > best_end or (match.end() == best_end and prefer_later):
                best_start, best_end = offset, match.end()
        return best_start, best_end

    def __repr__(self) -> str:
        return f"PatternSeparator({self.regex.pattern!r})"


Separator = Union[LiteralSeparator, PatternSeparator]


def build_separator(
    value: Union[bytes, Pattern[bytes]], *, horizon: int = 256, tie_break: str = "longest"
) -> Separator:
    if isinstance(value, bytes):
        return LiteralSeparator(value)
    return PatternSeparator(value, horizon=horizon, tie_break=tie_break)
