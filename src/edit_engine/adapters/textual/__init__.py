"""Textual host for the edit engine; ``app`` is imported lazily by the CLI."""

from .controller import TextualEditAdapter, TextualUIHooks

__all__ = ["TextualEditAdapter", "TextualUIHooks"]
