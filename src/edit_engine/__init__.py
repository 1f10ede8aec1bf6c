"""Snapshot-backed text buffer engine with undo/redo."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "runtime",
]

__version__ = "0.1.0"
