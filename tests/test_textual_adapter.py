from __future__ import annotations

from typing import List

from edit_engine.adapters.textual import TextualEditAdapter, TextualUIHooks
from edit_engine.buffer import BufferView
from edit_engine.commands import CommandSession


def test_adapter_pushes_initial_and_updated_buffer() -> None:
    views: List[BufferView] = []
    hooks = TextualUIHooks(update_buffer=views.append)
    adapter = TextualEditAdapter(CommandSession(), hooks)

    adapter.submit_line("append hello")

    assert views[0].text == b""
    assert views[-1].text == b"hello"
    assert views[-1].can_undo is True


def test_adapter_surfaces_status_messages() -> None:
    statuses: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda view: None,
        update_status=statuses.append,
    )
    adapter = TextualEditAdapter(CommandSession(), hooks)

    adapter.submit_line("undo")
    adapter.submit_line("find x")
    adapter.submit_line("append x")

    assert statuses == ["Cannot undo further.", "Text not found."]


def test_adapter_relays_clear_and_exit() -> None:
    calls: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda view: None,
        clear_output=lambda: calls.append("clear"),
        request_exit=lambda: calls.append("exit"),
    )
    adapter = TextualEditAdapter(CommandSession(), hooks)

    adapter.submit_line("clear")
    result = adapter.submit_line("exit")

    assert calls == ["clear", "exit"]
    assert result.exit is True


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda view: None, log=logs.append)
    adapter = TextualEditAdapter(CommandSession(), hooks)

    adapter.submit_line("append abc")

    assert any(line.startswith("command ->") for line in logs)
    assert any("length=3" in line for line in logs if line.startswith("result <-"))
