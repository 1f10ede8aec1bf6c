"""Executable Textual app that hosts the edit engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use edit_engine.adapters.textual.app"
    ) from exc

from edit_engine.buffer import BufferView, EditError, TextBuffer
from edit_engine.commands import CommandSession, menu_lines
from edit_engine.runtime import telemetry

from .controller import TextualEditAdapter, TextualUIHooks


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class EditEngineApp(App[int]):
    """Buffer view on top, status line and command prompt below."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, buffer: Optional[TextBuffer] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._buffer = buffer
        self.adapter: TextualEditAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        yield self._status_widget
        yield Input(placeholder="command (help lists them)", id="command-line")
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            clear_output=self._clear_output,
            request_exit=lambda: self.exit(0),
            log=self._log_line,
        )
        self.adapter = TextualEditAdapter(CommandSession(self._buffer), hooks)
        self.query_one("#command-line", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        line = event.value
        event.input.value = ""
        if not self.adapter:
            return
        if line.strip() in {"help", "?"}:
            self._update_status("  ".join(menu_lines()))
            return
        self.adapter.submit_line(line)

    def _update_buffer(self, view: BufferView) -> None:
        self._state.buffer_text = view.decoded()
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)
        self.sub_title = f"{view.length}/{view.capacity} bytes"

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _clear_output(self) -> None:
        self._update_status("")

    def _log_line(self, line: str) -> None:
        self.log(line)


def _env_preset(key: str) -> Optional[str]:
    value = (os.environ.get(key) or "").strip().lower()
    if value not in telemetry.PRESETS:
        return None
    return value


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the edit engine Textual app.")
    parser.add_argument(
        "--file",
        default=None,
        help="Load this file into the buffer before starting",
    )
    parser.add_argument(
        "--preset",
        choices=telemetry.PRESETS,
        default=_env_preset("EDIT_ENGINE_PRESET"),
        help="Telemetry preset (default: configured from EDIT_ENGINE_* variables)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.preset:
        telemetry.configure(preset=args.preset)
    buffer = TextBuffer()
    if args.file:
        try:
            buffer.load_from_file(args.file)
        except EditError as exc:
            raise SystemExit(str(exc)) from exc
    app = EditEngineApp(buffer=buffer)
    return app.run() or 0


if __name__ == "__main__":  # pragma: no cover - manual demo
    raise SystemExit(main())
