"""Sliding byte window that grows toward either end of a file."""
from __future__ import annotations

import logging

from .block_source import BlockSource

logger = logging.getLogger(__name__)


class SlidingWindow:
    """Holds the file bytes ``[start, end)`` in a single contiguous buffer.

    Growth is block-by-block through the ``BlockSource``; eviction trims
    either side. Offsets in the public API are absolute file offsets.
    """

    def __init__(self, source: BlockSource, block_size: int, *, anchor: int = 0) -> None:
        self.source = source
        self.block_size = block_size
        self.buffer = bytearray()
        self.start = anchor
        self.end = anchor
        self.peak_bytes = 0

    @property
    def file_size(self) -> int:
        return self.source.file_size

    @property
    def resident_bytes(self) -> int:
        return len(self.buffer)

    @property
    def at_head(self) -> bool:
        return self.start == 0

    @property
    def at_tail(self) -> bool:
        return self.end >= self.file_size

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end

    def anchor(self, offset: int) -> None:
        """Re-seat an empty window at ``offset`` unless it already covers it."""

        if self.contains(offset):
            return
        logger.debug("window re-anchored at %d (was [%d, %d))", offset, self.start, self.end)
        self.buffer = bytearray()
        self.start = self.end = offset

    def ensure_forward(self, upto: int) -> bool:
        """Append blocks until ``end >= upto`` or the file end; True if anything was read."""

        upto = min(upto, self.file_size)
        grown = False
        while self.end < upto:
            chunk = self.source.read_block(self.end, self.block_size)
            if not chunk:
                raise OSError(f"unexpected end of {self.source.name} at offset {self.end}")
            self.buffer += chunk
            self.end += len(chunk)
            grown = True
        if grown:
            self._track()
            logger.debug("window grew forward to [%d, %d)", self.start, self.end)
        return grown

    def ensure_backward(self, downto: int) -> bool:
        """Prepend blocks ending at ``start`` until ``start <= downto`` or offset 0."""

        downto = max(0, downto)
        grown = False
        while self.start > downto:
            offset = max(0, self.start - self.block_size)
            expected = self.start - offset
            chunk = self.source.read_block(offset, expected)
            if len(chunk) != expected:
                raise OSError(
                    f"short read from {self.source.name}: wanted {expected} bytes at {offset}, got {len(chunk)}"
                )
            self.buffer[0:0] = chunk
            self.start = offset
            grown = True
        if grown:
            self._track()
            logger.debug("window grew backward to [%d, %d)", self.start, self.end)
        return grown

    def evict_before(self, offset: int) -> None:
        offset = min(max(offset, self.start), self.end)
        drop = offset - self.start
        if drop <= 0:
            return
        del self.buffer[:drop]
        self.start = offset
        logger.debug("evicted %d bytes, window now [%d, %d)", drop, self.start, self.end)

    def evict_after(self, offset: int) -> None:
        offset = max(min(offset, self.end), self.start)
        drop = self.end - offset
        if drop <= 0:
            return
        del self.buffer[len(self.buffer) - drop:]
        self.end = offset
        logger.debug("evicted %d bytes, window now [%d, %d)", drop, self.start, self.end)

    def slice(self, lo: int, hi: int) -> bytes:
        return bytes(self.buffer[lo - self.start:hi - self.start])

    def release(self) -> None:
        self.buffer = bytearray()
        self.end = self.start

    def _track(self) -> None:
        if len(self.buffer) > self.peak_bytes:
            self.peak_bytes = len(self.buffer)
