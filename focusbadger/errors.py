"""Error taxonomy for the data core.

Everything derives from ValueError so callers that only care about "bad
input" can catch one thing. Only ParseError is expected to cross the core
boundary as an exception; the rest are turned into ok=False results.
"""

from __future__ import annotations

from typing import Any


class FocusBadgerError(ValueError):
    """Base class for data-core failures."""


class ParseError(FocusBadgerError):
    """Malformed JSON line or text."""

    def __init__(self, line_no: int, detail: str) -> None:
        self.line_no = int(line_no)
        self.detail = str(detail)
        super().__init__(f"Line {self.line_no}: {self.detail}")


class ValidationError(FocusBadgerError):
    """Shape or field-range violation."""


class ConflictError(FocusBadgerError):
    """Duplicate project name (case-insensitive)."""


class NotFoundError(FocusBadgerError):
    """Referenced task id or project name does not exist."""


class OperationError(FocusBadgerError):
    """Wraps a failure with the 1-based position and type tag of the operation."""

    def __init__(self, position: int, kind: str, cause: Any) -> None:
        self.position = int(position)
        self.kind = kind or ""
        self.cause = cause
        self.reason = str(cause)
        label = f" ({self.kind})" if self.kind else ""
        super().__init__(f"Operation {self.position}{label}: {self.reason}")


__all__ = [
    "ConflictError",
    "FocusBadgerError",
    "NotFoundError",
    "OperationError",
    "ParseError",
    "ValidationError",
]
