from __future__ import annotations

from pathlib import Path
from typing import List

from edit_engine.buffer import LEGACY_POLICY, BufferView, TextBuffer
from edit_engine.commands import CommandSession, menu_lines


def make_session(text: str = "") -> CommandSession:
    return CommandSession(TextBuffer.from_text(text))


def test_append_keeps_leading_spaces_of_argument() -> None:
    session = make_session()

    assert session.submit("append hello").status == "ok"
    assert session.submit("1  world").status == "ok"

    assert session.buffer.get_text() == b"hello world"


def test_newline_appends_line_break() -> None:
    session = make_session("a")

    session.submit("2")

    assert session.buffer.get_text() == b"a\n"


def test_find_reports_offset_or_not_found() -> None:
    session = make_session("hello world")

    found = session.submit("find lo")
    missing = session.submit("f zz")

    assert found.message == "Found text at position 3"
    assert missing.status == "not_found"
    assert missing.message == "Text not found."


def test_insert_with_replace_length() -> None:
    session = make_session("hello")

    result = session.submit("insert 0 1 J")

    assert result.status == "ok"
    assert session.buffer.get_text() == b"Jello"


def test_copy_paste_cut_delete_by_menu_number() -> None:
    session = make_session("hello")

    assert session.submit("13 0 5").message == "Copied 5 bytes"
    session.submit("14 5")
    assert session.buffer.get_text() == b"hellohello"

    session.submit("12 0 5")
    assert session.buffer.get_text() == b"hello"
    assert session.buffer.clipboard == b"hello"

    session.submit("11 1 3")
    assert session.buffer.get_text() == b"ho"


def test_undo_redo_commands() -> None:
    session = make_session()
    session.submit("append abc")

    session.submit("u")
    assert session.buffer.get_text() == b""
    session.submit("redo")
    assert session.buffer.get_text() == b"abc"


def test_edit_errors_are_reported_not_raised() -> None:
    session = make_session("hello")

    bad_range = session.submit("delete 9 3")
    empty_history = session.submit("undo")

    assert bad_range.status == "edit_error"
    assert "Invalid position or length" in (bad_range.message or "")
    assert empty_history.status == "edit_error"
    assert empty_history.message == "Cannot undo further."
    assert session.buffer.get_text() == b"hello"


def test_malformed_and_unknown_commands() -> None:
    session = make_session("hello")

    assert session.submit("delete x 1").status == "command_error"
    assert session.submit("paste").status == "command_error"
    assert session.submit("save").status == "command_error"
    assert session.submit("bogus 1").status == "command_unknown"
    assert session.submit("   ").status == "command_empty"


def test_print_returns_current_text() -> None:
    session = make_session("line one\nline two")

    assert session.submit("print").message == "line one\nline two"


def test_save_and_load_commands(tmp_path: Path) -> None:
    target = tmp_path / "saved.txt"
    session = make_session("persist me")

    saved = session.submit(f"save {target}")
    other = make_session()
    loaded = other.submit(f"4 {target}")

    assert saved.message == f"Saved to {target}"
    assert loaded.message == f"Loaded from {target}"
    assert other.buffer.get_text() == b"persist me"


def test_load_failure_is_reported(tmp_path: Path) -> None:
    session = make_session()

    result = session.submit(f"load {tmp_path / 'missing.txt'}")

    assert result.status == "edit_error"
    assert result.message is not None and result.message.startswith("Failed to load")


def test_bus_events_for_changes_clear_and_exit() -> None:
    session = make_session()
    views: List[BufferView] = []
    events: List[str] = []
    session.bus.subscribe("buffer.changed", lambda payload: views.append(payload))
    session.bus.subscribe("command.clear", lambda _payload: events.append("clear"))
    session.bus.subscribe("command.exit", lambda _payload: events.append("exit"))

    session.submit("append hi")
    session.submit("8")
    result = session.submit("0")

    assert views[-1].text == b"hi"
    assert events == ["clear", "exit"]
    assert result.exit is True
    assert session.finished is True
    assert session.history == ["append hi", "8", "0"]


def test_menu_lists_exit_last() -> None:
    lines = menu_lines()

    assert lines[0].startswith("1. Append text")
    assert lines[-1].startswith("0. Exit")
    assert len(lines) == 15


def test_session_keeps_caller_buffer_even_when_empty() -> None:
    buffer = TextBuffer(name="notes", policy=LEGACY_POLICY)
    session = CommandSession(buffer)

    session.submit("append hi")

    assert session.buffer is buffer
    assert buffer.get_text() == b"hi"
    assert session.buffer.policy is LEGACY_POLICY


def test_numeric_arguments_accept_runs_of_spaces() -> None:
    session = make_session("hello")

    assert session.submit("delete 1  3").status == "ok"
    assert session.buffer.get_text() == b"ho"

    session.submit("insert  2   0  there")
    assert session.buffer.get_text() == b"ho there"
