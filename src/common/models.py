"""Data models shared across the reader engine, configuration, and CLI."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Pattern, Union


class Direction(str, Enum):
    """Side of the cursor the next ``readline`` consumes."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def opposite(self) -> "Direction":
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD


class ReadMode(str, Enum):
    """Fixes the traversal direction or allows switching."""

    FORWARD = "forward"
    BACKWARD = "backward"
    BIDIRECTIONAL = "bidirectional"


class Origin(str, Enum):
    """File endpoint a traversal starts from and measures ``line_num`` against."""

    HEAD = "head"
    TAIL = "tail"


SeparatorKind = Literal["literal", "pattern"]
TieBreak = Literal["shortest", "longest"]


@dataclass(frozen=True, slots=True)
class ReaderOptions:
    """Validated, immutable construction options for one traversal."""

    mode: ReadMode = ReadMode.FORWARD
    origin: Origin = Origin.HEAD
    binmode: bool = False
    separator: Union[bytes, Pattern[bytes]] = b"\n"
    block_size: int = 8192
    pattern_horizon: int = 256
    backward_tie_break: TieBreak = "longest"

    @property
    def initial_direction(self) -> Direction:
        if self.mode is ReadMode.BACKWARD:
            return Direction.BACKWARD
        if self.mode is ReadMode.FORWARD:
            return Direction.FORWARD
        return Direction.FORWARD if self.origin is Origin.HEAD else Direction.BACKWARD

    @property
    def is_pattern(self) -> bool:
        return not isinstance(self.separator, bytes)


@dataclass(slots=True)
class GlobalSettings:
    """Global knobs that apply across profiles."""

    encoding: str = "utf-8"
    error_policy: str = "replace"  # fail-fast | replace


@dataclass(slots=True)
class ProfileSettings:
    """Profile-specific reader defaults."""

    description: str
    block_size: int
    separator: str = "\n"
    separator_kind: SeparatorKind = "literal"
    binmode: bool = False
    pattern_horizon: int = 256
    backward_tie_break: TieBreak = "longest"


@dataclass(slots=True)
class RuntimeConfig:
    """Resolved configuration for a single run."""

    global_settings: GlobalSettings
    profile: ProfileSettings


@dataclass(slots=True)
class TraversalProgress:
    """Summary of one traversal, appended to the progress log by the CLI."""

    file_path: Path
    mode: str
    direction: str
    lines_read: int
    cursor: int
    line_num: int
    file_size: int
    peak_window_bytes: int
    elapsed_seconds: Optional[float] = None
    extra: dict = field(default_factory=dict)
