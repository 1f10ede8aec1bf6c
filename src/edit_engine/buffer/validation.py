"""Validation helpers shared across buffer operations."""

from __future__ import annotations

from .errors import InvalidPosition, InvalidRange


def ensure_span(size: int, pos: int, length: int) -> None:
    """Require ``[pos, pos + length)`` to start inside content of ``size`` bytes."""

    if pos < 0 or length < 0 or pos >= size or pos + length > size:
        raise InvalidRange(pos, length, size)


def ensure_position(size: int, pos: int) -> None:
    if pos < 0 or pos > size:
        raise InvalidPosition(pos, size)


def ensure_replacement(size: int, pos: int, replace_len: int) -> None:
    """Insertion point must be valid and the replaced span must fit before the end."""

    ensure_position(size, pos)
    if replace_len < 0 or pos + replace_len > size:
        raise InvalidRange(pos, replace_len, size)
