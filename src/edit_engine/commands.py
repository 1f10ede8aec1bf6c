"""Command-line surface over a ``TextBuffer``.

Each command mirrors one entry of the classic numbered editor menu and can be
invoked by name, by short alias, or by its menu number::

    append hello          1 hello
    insert 0 1 J          7 0 1 J
    undo                  9
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from edit_engine.buffer import EditError, TextBuffer
from edit_engine.runtime import telemetry


@dataclass(slots=True)
class CommandResult:
    status: str = "ok"
    message: Optional[str] = None
    exit: bool = False


class CommandBus:
    """Minimal event bus letting hosts observe what a session did."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class CommandSyntaxError(ValueError):
    """Raised by handlers when a command's arguments cannot be parsed."""


CommandHandler = Callable[["CommandSession", str], CommandResult]


class CommandSession:
    """Parses command lines and applies them to one buffer."""

    def __init__(
        self,
        buffer: Optional[TextBuffer] = None,
        *,
        bus: Optional[CommandBus] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.buffer = (
            buffer if buffer is not None else TextBuffer(logger_name=logger_name)
        )
        self.bus = bus or CommandBus()
        self.history: List[str] = []
        self.finished = False
        self._logger_name = logger_name

    def submit(self, line: str) -> CommandResult:
        text = line.lstrip()
        name, _, rest = text.partition(" ")
        self.history.append(line)
        self.bus.emit("command.submit", line)
        if not name:
            return CommandResult(status="command_empty")

        key = name.lower()
        handler = _COMMAND_HANDLERS.get(key)
        if handler is None:
            self.bus.emit("command.error", name)
            return CommandResult(
                status="command_unknown", message=f"Invalid command: {name}"
            )

        try:
            result = handler(self, rest)
        except CommandSyntaxError as exc:
            return CommandResult(status="command_error", message=str(exc))
        except EditError as exc:
            telemetry.record_event(
                "command.rejected",
                level="warning",
                data={"command": key, "reason": str(exc)},
                logger_name=self._logger_name,
            )
            return CommandResult(status="edit_error", message=str(exc))
        return result

    def _changed(self, message: Optional[str] = None) -> CommandResult:
        self.bus.emit("buffer.changed", self.buffer.snapshot())
        return CommandResult(status="ok", message=message)


def _ints(rest: str, names: Tuple[str, ...]) -> Tuple[List[int], str]:
    """Parse ``len(names)`` leading integers separated by any run of spaces.

    The remainder starts after the single space following the last integer, so
    leading spaces of trailing text survive.
    """

    values: List[int] = []
    remainder = rest
    for name in names:
        raw, _, remainder = remainder.lstrip().partition(" ")
        if not raw:
            raise CommandSyntaxError(
                f"Expected {' '.join(n.upper() for n in names)}"
            )
        try:
            values.append(int(raw))
        except ValueError as exc:
            raise CommandSyntaxError(f"{name} must be an integer, got {raw!r}") from exc
    return values, remainder


def _path(rest: str) -> str:
    path = rest.strip()
    if not path:
        raise CommandSyntaxError("Expected a file name")
    return path


def _handle_append(session: CommandSession, rest: str) -> CommandResult:
    session.buffer.append(rest)
    return session._changed()


def _handle_newline(session: CommandSession, rest: str) -> CommandResult:
    del rest
    session.buffer.new_line()
    return session._changed()


def _handle_save(session: CommandSession, rest: str) -> CommandResult:
    path = _path(rest)
    session.buffer.save_to_file(path)
    return CommandResult(status="ok", message=f"Saved to {path}")


def _handle_load(session: CommandSession, rest: str) -> CommandResult:
    path = _path(rest)
    session.buffer.load_from_file(path)
    return session._changed(f"Loaded from {path}")


def _handle_print(session: CommandSession, rest: str) -> CommandResult:
    del rest
    return CommandResult(status="ok", message=session.buffer.snapshot().decoded())


def _handle_find(session: CommandSession, rest: str) -> CommandResult:
    offset = session.buffer.find_text(rest)
    if offset is None:
        return CommandResult(status="not_found", message="Text not found.")
    return CommandResult(status="ok", message=f"Found text at position {offset}")


def _handle_insert(session: CommandSession, rest: str) -> CommandResult:
    (pos, replace_len), text = _ints(rest, ("pos", "replace_len"))
    session.buffer.insert_and_replace(pos, text, replace_len)
    return session._changed()


def _handle_clear(session: CommandSession, rest: str) -> CommandResult:
    del rest
    session.bus.emit("command.clear")
    return CommandResult(status="clear")


def _handle_undo(session: CommandSession, rest: str) -> CommandResult:
    del rest
    session.buffer.undo()
    return session._changed()


def _handle_redo(session: CommandSession, rest: str) -> CommandResult:
    del rest
    session.buffer.redo()
    return session._changed()


def _handle_delete(session: CommandSession, rest: str) -> CommandResult:
    (pos, length), _ = _ints(rest, ("pos", "len"))
    session.buffer.delete_text(pos, length)
    return session._changed()


def _handle_cut(session: CommandSession, rest: str) -> CommandResult:
    (pos, length), _ = _ints(rest, ("pos", "len"))
    session.buffer.cut_text(pos, length)
    return session._changed()


def _handle_copy(session: CommandSession, rest: str) -> CommandResult:
    (pos, length), _ = _ints(rest, ("pos", "len"))
    copied = session.buffer.copy_text(pos, length)
    return CommandResult(status="ok", message=f"Copied {len(copied)} bytes")


def _handle_paste(session: CommandSession, rest: str) -> CommandResult:
    (pos,), _ = _ints(rest, ("pos",))
    session.buffer.paste_text(pos)
    return session._changed()


def _handle_exit(session: CommandSession, rest: str) -> CommandResult:
    del rest
    session.finished = True
    session.bus.emit("command.exit")
    return CommandResult(status="exit", exit=True)


MENU: Tuple[Tuple[str, str, CommandHandler], ...] = (
    ("exit", "Exit", _handle_exit),
    ("append", "Append text", _handle_append),
    ("newline", "Start new line", _handle_newline),
    ("save", "Save as file", _handle_save),
    ("load", "Load file", _handle_load),
    ("print", "Print current saved text", _handle_print),
    ("find", "Find text", _handle_find),
    ("insert", "Insert text at position", _handle_insert),
    ("clear", "Clear console", _handle_clear),
    ("undo", "Undo", _handle_undo),
    ("redo", "Redo", _handle_redo),
    ("delete", "Delete text", _handle_delete),
    ("cut", "Cut text", _handle_cut),
    ("copy", "Copy text", _handle_copy),
    ("paste", "Paste text", _handle_paste),
)

_ALIASES: Dict[str, str] = {
    "quit": "exit",
    "q": "exit",
    "a": "append",
    "nl": "newline",
    "w": "save",
    "e": "load",
    "p": "print",
    "f": "find",
    "i": "insert",
    "u": "undo",
    "r": "redo",
    "d": "delete",
    "x": "cut",
    "y": "copy",
    "v": "paste",
}

_COMMAND_HANDLERS: Dict[str, CommandHandler] = {}
for _number, (_name, _title, _handler) in enumerate(MENU):
    _COMMAND_HANDLERS[_name] = _handler
    _COMMAND_HANDLERS[str(_number)] = _handler
for _alias, _target in _ALIASES.items():
    _COMMAND_HANDLERS[_alias] = _COMMAND_HANDLERS[_target]


def menu_lines() -> List[str]:
    """Numbered help text, exit listed last as in the classic menu."""

    lines = [f"{number}. {title} ({name})" for number, (name, title, _) in enumerate(MENU)]
    return lines[1:] + lines[:1]


__all__ = [
    "CommandBus",
    "CommandResult",
    "CommandSession",
    "CommandSyntaxError",
    "MENU",
    "menu_lines",
]
