"""Bidirectional, memory-bounded line reading over large files."""

from .block_source import BlockSource
from .engine import LineReaderEngine, open_reader
from .scanner import LineBoundaryScanner, ScanResult
from .separator import LiteralSeparator, PatternSeparator, build_separator
from .stream import LineStream
from .window import SlidingWindow

__all__ = [
    "BlockSource",
    "LineBoundaryScanner",
    "LineReaderEngine",
    "LineStream",
    "LiteralSeparator",
    "PatternSeparator",
    "ScanResult",
    "SlidingWindow",
    "build_separator",
    "open_reader",
]
