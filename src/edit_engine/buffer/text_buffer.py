"""Growable byte buffer with positional edits, a clipboard, and undo/redo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional, Union

from edit_engine.runtime import telemetry

from .errors import HistoryEmpty
from .history import HistoryPolicy, HistoryStore, Snapshot
from .storage import StoreLike, as_store
from .validation import ensure_position, ensure_replacement, ensure_span

DEFAULT_CAPACITY = 10
TERMINATOR = 0

TextLike = Union[str, bytes, bytearray, memoryview]


@dataclass(slots=True)
class BufferView:
    """Read-only picture of a buffer for front ends."""

    name: str
    text: bytes
    length: int
    capacity: int
    can_undo: bool
    can_redo: bool

    def decoded(self) -> str:
        return self.text.decode("utf-8", errors="replace")


@dataclass(slots=True)
class BufferDelta:
    label: str
    length: int
    capacity: int


class TextBuffer:
    """Mutable text storage addressed by byte offsets.

    ``content`` always holds ``capacity`` slots, of which the first ``length``
    are meaningful and ``content[length]`` is the terminator. Every mutating
    call validates its arguments first, then records the pre-edit state in
    ``history`` and only then changes anything, so a rejected call leaves
    content, clipboard and history untouched.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        capacity: int = DEFAULT_CAPACITY,
        history: Optional[HistoryStore] = None,
        policy: Optional[HistoryPolicy] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must leave room for the terminator")
        self.name = name
        self.history = history or HistoryStore(logger_name=logger_name)
        self.policy = policy or HistoryPolicy()
        self._logger_name = logger_name
        self._data = bytearray(capacity)
        self._length = 0
        self._clipboard = b""

    @classmethod
    def from_text(cls, text: TextLike, **kwargs) -> "TextBuffer":
        """Build a buffer already holding ``text`` with an empty history."""

        data = _as_bytes(text)
        buffer = cls(**kwargs)
        buffer._install(data, max(buffer.capacity, len(data) + 1))
        return buffer

    @property
    def length(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def content(self) -> bytes:
        """All allocated slots, terminator and unused tail included."""

        return bytes(self._data)

    @property
    def clipboard(self) -> bytes:
        return self._clipboard

    def __len__(self) -> int:
        return self._length

    def get_text(self) -> bytes:
        return bytes(self._data[: self._length])

    def snapshot(self) -> BufferView:
        return BufferView(
            name=self.name,
            text=self.get_text(),
            length=self._length,
            capacity=self.capacity,
            can_undo=self.history.can_undo(),
            can_redo=self.history.can_redo(),
        )

    # -- edits -----------------------------------------------------------

    def append(self, text: TextLike) -> BufferDelta:
        data = _as_bytes(text)
        with Transaction(self, "append"):
            capacity = self.capacity
            while self._length + len(data) >= capacity:
                capacity *= 2
            self._resize(capacity)
            self._data[self._length : self._length + len(data)] = data
            self._length += len(data)
            self._terminate()
        return self._delta("append")

    def new_line(self) -> BufferDelta:
        return self.append(b"\n")

    def insert_and_replace(
        self, pos: int, substring: TextLike, replace_len: int = 0
    ) -> BufferDelta:
        """Write ``substring`` at ``pos`` over the next ``replace_len`` bytes.

        ``replace_len=0`` is a plain insert; ``replace_len=len(substring)`` an
        in-place overwrite; anything else a splice.
        """

        data = _as_bytes(substring)
        ensure_replacement(self._length, pos, replace_len)
        with Transaction(self, "insert_and_replace"):
            self._splice(pos, data, replace_len)
        return self._delta("insert_and_replace")

    def delete_text(self, pos: int, length: int) -> BufferDelta:
        ensure_span(self._length, pos, length)
        with Transaction(self, "delete_text"):
            self._remove(pos, length)
        return self._delta("delete_text")

    def cut_text(self, pos: int, length: int) -> BufferDelta:
        ensure_span(self._length, pos, length)
        with Transaction(self, "cut_text"):
            self.copy_text(pos, length)
            self._remove(pos, length)
        return self._delta("cut_text")

    def copy_text(self, pos: int, length: int) -> bytes:
        """Replace the clipboard with the span; neither content nor history change."""

        ensure_span(self._length, pos, length)
        self._clipboard = bytes(self._data[pos : pos + length])
        telemetry.record_event(
            "buffer.copy",
            level="debug",
            data={"buffer": self.name, "pos": pos, "len": length},
            logger_name=self._logger_name,
        )
        return self._clipboard

    def paste_text(self, pos: int) -> BufferDelta:
        ensure_position(self._length, pos)
        with Transaction(self, "paste_text"):
            if not self.policy.collapse_paste:
                self._record_edit()
            self._splice(pos, self._clipboard, 0)
        return self._delta("paste_text")

    def find_text(self, search: TextLike) -> Optional[int]:
        """Offset of the first match inside the logical content, else ``None``."""

        offset = self._data.find(_as_bytes(search), 0, self._length)
        return None if offset < 0 else offset

    # -- history ---------------------------------------------------------

    def undo(self) -> BufferDelta:
        self._travel(
            "undo", pop=self.history.pop_undo, push=self.history.push_redo
        )
        return self._delta("undo")

    def redo(self) -> BufferDelta:
        self._travel(
            "redo", pop=self.history.pop_redo, push=self.history.push_undo
        )
        return self._delta("redo")

    def _travel(self, direction: str, *, pop, push) -> None:
        with telemetry.span(
            f"buffer::{direction}",
            logger_name=self._logger_name,
            component="buffer",
            metadata={"buffer": self.name},
        ) as handle:
            if self.policy.conditional_push:
                snapshot = pop()
                if snapshot is not None:
                    push(self._data, self._length, self.capacity)
            else:
                push(self._data, self._length, self.capacity)
                snapshot = pop()
            if snapshot is None:
                handle.reject(f"nothing to {direction}")
            else:
                self._apply(snapshot)
        if snapshot is None:
            raise HistoryEmpty(direction)

    # -- files -----------------------------------------------------------

    def load_from_file(self, source: StoreLike) -> BufferDelta:
        """Replace the content with the whole file; history is not recorded."""

        data = as_store(source).read_all()
        self._install(data, len(data) + 1)
        telemetry.record_event(
            "buffer.load",
            data={"buffer": self.name, "size": len(data)},
            logger_name=self._logger_name,
        )
        return self._delta("load_from_file")

    def save_to_file(self, target: StoreLike) -> int:
        data = self.get_text()
        as_store(target).write_all(data)
        telemetry.record_event(
            "buffer.save",
            data={"buffer": self.name, "size": len(data)},
            logger_name=self._logger_name,
        )
        return len(data)

    # -- internals -------------------------------------------------------

    def _record_edit(self) -> None:
        self.history.record_edit(self._data, self._length, self.capacity)

    def _splice(self, pos: int, data: bytes, replace_len: int) -> None:
        new_length = self._length + len(data) - replace_len
        if new_length >= self.capacity:
            self._resize(2 * new_length)
        tail = bytes(self._data[pos + replace_len : self._length])
        self._data[pos : pos + len(data)] = data
        self._data[pos + len(data) : new_length] = tail
        self._length = new_length
        self._terminate()

    def _remove(self, pos: int, length: int) -> None:
        self._data[pos : self._length - length] = self._data[pos + length : self._length]
        self._length -= length
        self._terminate()

    def _resize(self, capacity: int) -> None:
        if capacity == self.capacity:
            return
        grown = bytearray(capacity)
        grown[: self._length] = self._data[: self._length]
        self._data = grown

    def _install(self, data: bytes, capacity: int) -> None:
        self._data = bytearray(capacity)
        self._data[: len(data)] = data
        self._length = len(data)
        self._terminate()

    def _apply(self, snapshot: Snapshot) -> None:
        self._install(snapshot.data, snapshot.saved_capacity)

    def _terminate(self) -> None:
        self._data[self._length] = TERMINATOR

    def _delta(self, label: str) -> BufferDelta:
        return BufferDelta(label=label, length=self._length, capacity=self.capacity)


class Transaction(AbstractContextManager["Transaction"]):
    """Records the buffer's pre-edit state and profiles the edit."""

    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            logger_name=self.buffer._logger_name,
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        self.buffer._record_edit()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _as_bytes(text: TextLike) -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


__all__ = [
    "BufferDelta",
    "BufferView",
    "DEFAULT_CAPACITY",
    "TERMINATOR",
    "TextBuffer",
    "TextLike",
    "Transaction",
]
