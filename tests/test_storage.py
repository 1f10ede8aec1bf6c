from __future__ import annotations

from pathlib import Path

import pytest

from edit_engine.buffer import IOFailure, PathStore, TextBuffer


class MemoryStore:
    def __init__(self, data: bytes = b"") -> None:
        self.data = data
        self.writes = 0

    def read_all(self) -> bytes:
        return self.data

    def write_all(self, data: bytes) -> None:
        self.data = data
        self.writes += 1


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    source = TextBuffer()
    source.append("hello world, this grows the buffer")
    source.delete_text(5, 6)

    written = source.save_to_file(target)
    loaded = TextBuffer()
    loaded.load_from_file(target)

    assert written == source.length
    assert target.read_bytes() == source.get_text()
    assert loaded.get_text() == source.get_text()


def test_save_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    target.write_bytes(b"previous much longer content")

    TextBuffer.from_text("short").save_to_file(str(target))

    assert target.read_bytes() == b"short"


def test_load_sets_capacity_to_size_plus_one_without_history() -> None:
    buffer = TextBuffer()
    buffer.append("x")

    buffer.load_from_file(MemoryStore(b"abc"))

    assert buffer.get_text() == b"abc"
    assert buffer.capacity == 4
    assert buffer.content[3] == 0
    assert buffer.history.undo_depth == 1
    assert buffer.history.redo_depth == 0


def test_save_uses_custom_store() -> None:
    store = MemoryStore()

    TextBuffer.from_text("payload").save_to_file(store)

    assert store.data == b"payload"
    assert store.writes == 1


def test_load_missing_file_reports_failure_and_keeps_content(tmp_path: Path) -> None:
    buffer = TextBuffer.from_text("keep me")

    with pytest.raises(IOFailure) as excinfo:
        buffer.load_from_file(tmp_path / "missing.txt")

    assert "missing.txt" in str(excinfo.value)
    assert buffer.get_text() == b"keep me"


def test_save_into_missing_directory_reports_failure(tmp_path: Path) -> None:
    store = PathStore(tmp_path / "nope" / "out.txt")

    with pytest.raises(IOFailure):
        store.write_all(b"data")
