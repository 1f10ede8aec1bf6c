"""Recoverable error conditions raised by buffer operations."""

from __future__ import annotations

from typing import Optional


class EditError(RuntimeError):
    """Base class; a raised ``EditError`` means the buffer was left untouched."""


class InvalidRange(EditError):
    """Raised when ``pos``/``length`` do not select a span of current content."""

    def __init__(self, pos: int, length: int, size: int) -> None:
        super().__init__(
            f"Invalid position or length: pos={pos} len={length} (size {size})"
        )
        self.pos = pos
        self.length = length
        self.size = size


class InvalidPosition(EditError):
    """Raised when an insertion point lies beyond the end of the content."""

    def __init__(self, pos: int, size: int) -> None:
        super().__init__(f"Invalid position: {pos} (size {size})")
        self.pos = pos
        self.size = size


class HistoryEmpty(EditError):
    def __init__(self, direction: str) -> None:
        super().__init__(f"Cannot {direction} further.")
        self.direction = direction


class IOFailure(EditError):
    """Raised when a file collaborator cannot read or write its target."""

    def __init__(self, action: str, target: str, *, cause: Optional[str] = None) -> None:
        message = f"Failed to {action} {target}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.action = action
        self.target = target
