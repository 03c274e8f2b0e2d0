"""Locates line boundaries around a cursor, growing the window on demand."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .separator import Separator
from .window import SlidingWindow


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Raw line content (separator stripped) and the cursor after consuming it."""

    line: bytes
    cursor: int


class LineBoundaryScanner:
    """Finds the line adjacent to a cursor in either direction.

    Cursor positions are line boundaries: offset 0, the file size, or the
    offset just past a separator. Reading forward from ``c`` yields the line
    starting at ``c``; reading backward yields the line whose terminator (if
    any) ends at ``c``. Both directions therefore agree on every boundary and
    re-reading after a direction switch returns the same line.
    """

    def __init__(self, window: SlidingWindow, separator: Separator) -> None:
        self.window = window
        self.separator = separator

    @property
    def block_size(self) -> int:
        return self.window.block_size

    def scan_forward(self, cursor: int) -> Optional[ScanResult]:
        window = self.window
        if cursor >= window.file_size:
            return None
        window.anchor(cursor)
        overlap = self.separator.overlap
        search_from = cursor - window.start
        while True:
            hit = self.separator.find_forward(window.buffer, search_from, final=window.at_tail)
            if hit is not None:
                start, end = hit[0] + window.start, hit[1] + window.start
                return ScanResult(window.slice(cursor, start), end)
            if window.at_tail:
                return ScanResult(window.slice(cursor, window.end), window.end)
            scanned = len(window.buffer)
            window.ensure_forward(window.end + self.block_size)
            if overlap is not None:
                search_from = max(cursor - window.start, scanned - overlap)

    def scan_backward(self, cursor: int) -> Optional[ScanResult]:
        window = self.window
        if cursor <= 0:
            return None
        window.anchor(cursor)
        content_end = cursor
        hit = self._find_boundary_before(cursor)
        if hit is not None and hit[1] == cursor:
            # terminator of the line ending at the cursor
            content_end = hit[0]
            hit = self._find_boundary_before(content_end) if content_end > 0 else None
        line_start = 0 if hit is None else hit[1]
        return ScanResult(window.slice(line_start, content_end), line_start)

    def _find_boundary_before(self, limit: int) -> Optional[Tuple[int, int]]:
        """Rightmost separator span ending at or before ``limit``; None at file head."""

        window = self.window
        window.ensure_backward(limit - self.block_size)
        overlap = self.separator.overlap
        search_limit = limit - window.start
        while True:
            hit = self.separator.find_backward(window.buffer, search_limit, final=window.at_head)
            if hit is not None:
                return hit[0] + window.start, hit[1] + window.start
            if window.at_head:
                return None
            previous_start = window.start
            window.ensure_backward(previous_start - self.block_size)
            search_limit = limit - window.start
            if overlap is not None:
                search_limit = min(search_limit, previous_start - window.start + overlap)
