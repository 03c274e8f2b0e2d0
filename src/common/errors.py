"""Shared error codes and exceptions for the reader engine and CLI."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_OPERATION = "INVALID_OPERATION"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    IO_ERROR = "IO_ERROR"


class BackendError(RuntimeError):
    """Exception carrying a structured error code for CLI/callers."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:  # pragma: no cover - formatting sugar
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class ConfigurationError(BackendError):
    """Invalid reader options or configuration document; raised before any file I/O."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.CONFIG_ERROR, message, context=context)


class InvalidOperationError(BackendError):
    """Operation not permitted in the reader's current mode or state."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.INVALID_OPERATION, message, context=context)


class InvalidArgumentError(BackendError, ValueError):
    """Argument outside the accepted domain (e.g. an unknown direction)."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.INVALID_ARGUMENT, message, context=context)
