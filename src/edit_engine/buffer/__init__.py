"""Byte buffer, snapshot history, and file collaborators."""

from .errors import EditError, HistoryEmpty, InvalidPosition, InvalidRange, IOFailure
from .history import LEGACY_POLICY, HistoryPolicy, HistoryStore, Snapshot
from .storage import FileStore, PathStore
from .text_buffer import BufferDelta, BufferView, TextBuffer, Transaction

__all__ = [
    "TextBuffer",
    "BufferDelta",
    "BufferView",
    "Transaction",
    "HistoryStore",
    "HistoryPolicy",
    "LEGACY_POLICY",
    "Snapshot",
    "FileStore",
    "PathStore",
    "EditError",
    "InvalidRange",
    "InvalidPosition",
    "HistoryEmpty",
    "IOFailure",
]
