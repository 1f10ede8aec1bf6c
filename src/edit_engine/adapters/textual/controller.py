"""Minimal Textual adapter that wires a CommandSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

from edit_engine.buffer import BufferView
from edit_engine.commands import CommandResult, CommandSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferView], None]
    update_status: Callable[[str], None] = _noop
    clear_output: Callable[[], None] = _noop
    request_exit: Callable[[], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualEditAdapter:
    """Bridges CommandSession + bus events to a Textual-friendly surface."""

    def __init__(self, session: CommandSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_buffer()

    def submit_line(self, line: str) -> CommandResult:
        """Run one command line and push the outcome to the UI."""

        self._log_state("command ->", line=line)
        result = self.session.submit(line)
        if result.message:
            self.hooks.update_status(result.message)
        elif result.status not in {"ok", "command_empty"}:
            self.hooks.update_status(result.status)
        self._log_state("result <-", status=result.status, message=result.message)
        return result

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        bus.subscribe("buffer.changed", lambda _payload: self._refresh_buffer())
        bus.subscribe("command.clear", lambda _payload: self.hooks.clear_output())
        bus.subscribe("command.exit", lambda _payload: self.hooks.request_exit())

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.session.buffer.snapshot())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.session.buffer
        return {
            "buffer": buffer.name,
            "length": buffer.length,
            "capacity": buffer.capacity,
            "undo": buffer.history.undo_depth,
            "redo": buffer.history.redo_depth,
        }


__all__ = ["TextualEditAdapter", "TextualUIHooks"]
