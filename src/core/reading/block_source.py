"""Offset-addressed block reads over a binary file handle."""
from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union


class BlockSource:
    """Reads blocks of up to ``max_len`` bytes at arbitrary offsets.

    ``file_size`` is captured once when the source is created; bytes appended
    to the file afterwards are never returned. No buffering is done here.
    """

    def __init__(self, handle: BinaryIO, *, owns_handle: bool = True, name: Optional[str] = None) -> None:
        self._handle = handle
        self._owns_handle = owns_handle
        self.name = name or getattr(handle, "name", "<stream>")
        self.file_size = _measure(handle)
        self.closed = False

    @classmethod
    def open(cls, path: Union[str, Path]) -> "BlockSource":
        path = Path(path)
        return cls(path.open("rb"), owns_handle=True, name=str(path))

    def read_block(self, offset: int, max_len: int) -> bytes:
        if offset >= self.file_size or max_len <= 0:
            return b""
        length = min(max_len, self.file_size - offset)
        self._handle.seek(offset)
        chunks = []
        remaining = length
        while remaining:
            chunk = self._handle.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def handle_at(self, offset: int) -> BinaryIO:
        """Return the raw handle positioned at ``offset``."""

        self._handle.seek(offset)
        return self._handle

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._owns_handle:
            self._handle.close()


def _measure(handle: BinaryIO) -> int:
    try:
        return os.fstat(handle.fileno()).st_size
    except (AttributeError, io.UnsupportedOperation):
        current = handle.tell()
        size = handle.seek(0, io.SEEK_END)
        handle.seek(current)
        return size
