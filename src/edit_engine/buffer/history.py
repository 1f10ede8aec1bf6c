"""Snapshot-based undo/redo bookkeeping for text buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from edit_engine.runtime import telemetry


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Copy of a buffer's logical bytes plus the size/capacity it had."""

    data: bytes
    saved_size: int
    saved_capacity: int

    @classmethod
    def capture(cls, content: bytes | bytearray, size: int, capacity: int) -> "Snapshot":
        return cls(data=bytes(content[:size]), saved_size=size, saved_capacity=capacity)


@dataclass(frozen=True, slots=True)
class HistoryPolicy:
    """Switches between the collapsed history contract and the legacy one.

    ``collapse_paste`` records a single snapshot per paste; when off, paste
    records once itself and once more through the insert primitive, so two
    undos are needed to revert it.

    ``conditional_push`` only moves the current state onto the opposite stack
    when undo/redo actually found a snapshot; when off, the push happens first
    and survives a failed pop.
    """

    collapse_paste: bool = True
    conditional_push: bool = True


LEGACY_POLICY = HistoryPolicy(collapse_paste=False, conditional_push=False)


class HistoryStore:
    """Owns the undo and redo stacks; never touches buffer state."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._undo: List[Snapshot] = []
        self._redo: List[Snapshot] = []
        self._logger_name = logger_name

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def record_edit(self, content: bytes | bytearray, size: int, capacity: int) -> None:
        """Push the pre-edit state and invalidate every pending redo."""

        self._undo.append(Snapshot.capture(content, size, capacity))
        dropped = len(self._redo)
        self._redo.clear()
        self._trace("history.record", size=size, capacity=capacity, dropped=dropped)

    def push_undo(self, content: bytes | bytearray, size: int, capacity: int) -> None:
        self._undo.append(Snapshot.capture(content, size, capacity))
        self._trace("history.push_undo", size=size, capacity=capacity)

    def push_redo(self, content: bytes | bytearray, size: int, capacity: int) -> None:
        self._redo.append(Snapshot.capture(content, size, capacity))
        self._trace("history.push_redo", size=size, capacity=capacity)

    def pop_undo(self) -> Optional[Snapshot]:
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._trace("history.pop_undo", size=snapshot.saved_size)
        return snapshot

    def pop_redo(self) -> Optional[Snapshot]:
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._trace("history.pop_redo", size=snapshot.saved_size)
        return snapshot

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _trace(self, event: str, **data: object) -> None:
        payload = {**data, "undo": len(self._undo), "redo": len(self._redo)}
        telemetry.record_event(
            event, level="debug", data=payload, logger_name=self._logger_name
        )


__all__ = ["HistoryPolicy", "HistoryStore", "LEGACY_POLICY", "Snapshot"]
