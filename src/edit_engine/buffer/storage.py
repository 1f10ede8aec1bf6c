"""File collaborators used by ``TextBuffer.load_from_file``/``save_to_file``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from .errors import IOFailure


class FileStore(Protocol):
    """Anything that can hand over or accept a whole file's bytes."""

    def read_all(self) -> bytes:
        ...

    def write_all(self, data: bytes) -> None:
        ...


@dataclass(slots=True)
class PathStore:
    """``FileStore`` backed by a filesystem path; overwrites on write."""

    path: Path

    def read_all(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise IOFailure("load from", str(self.path), cause=exc.strerror) from exc

    def write_all(self, data: bytes) -> None:
        try:
            self.path.write_bytes(data)
        except OSError as exc:
            raise IOFailure("save to", str(self.path), cause=exc.strerror) from exc


StoreLike = Union[FileStore, str, "os.PathLike[str]"]


def as_store(target: StoreLike) -> FileStore:
    if isinstance(target, (str, os.PathLike)):
        return PathStore(Path(target))
    return target


__all__ = ["FileStore", "PathStore", "StoreLike", "as_store"]
