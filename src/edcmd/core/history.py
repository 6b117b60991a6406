"""
Input history for minibuffer reads.

Each input context (file names, function names, ...) has its own History.
Histories are append-only and are never truncated.
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

# Standard input contexts
FILES = "files"
FUNCTIONS = "functions"

PREVIOUS = "previous"
NEXT = "next"


class History:
    """Chronological list of accepted inputs with a recall cursor."""

    def __init__(self, entries: Iterable[str] = ()):
        self.entries: list[str] = list(entries)
        # None while not navigating
        self.cursor: int | None = None

    def append(self, text: str) -> None:
        """Append an accepted input. Empty strings are ignored."""
        if not text:
            return
        self.entries.append(text)

    def reset(self) -> None:
        """Leave navigation; the next previous() starts at the newest entry."""
        self.cursor = None

    def previous(self) -> str | None:
        """Move to the next older entry.

        Returns:
            The entry, or None when already at the oldest one.
        """
        if not self.entries:
            return None
        if self.cursor is None:
            self.cursor = len(self.entries) - 1
        elif self.cursor > 0:
            self.cursor -= 1
        else:
            return None
        return self.entries[self.cursor]

    def next(self) -> str | None:
        """Move to the next newer entry.

        Returns:
            The entry, or None when moving past the newest one (navigation
            ends) or when not navigating.
        """
        if self.cursor is None:
            return None
        if self.cursor + 1 >= len(self.entries):
            self.cursor = None
            return None
        self.cursor += 1
        return self.entries[self.cursor]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


class HistoryStore:
    """Independent histories keyed by input context."""

    def __init__(self, contexts: Iterable[str] = (FILES, FUNCTIONS)):
        self._histories: dict[str, History] = {name: History() for name in contexts}

    def add_context(self, context: str) -> History:
        """Create a history for a new context (existing ones are kept)."""
        return self._histories.setdefault(context, History())

    def get(self, context: str) -> History:
        """Get the history for a context. Raises KeyError if unknown."""
        return self._histories[context]

    __getitem__ = get

    def append(self, context: str, text: str) -> None:
        self.get(context).append(text)

    def navigate(self, context: str, direction: str) -> str | None:
        """Move the recall cursor of `context` and return the entry there."""
        history = self.get(context)
        if direction == PREVIOUS:
            return history.previous()
        if direction == NEXT:
            return history.next()
        raise ValueError(f"Unknown history direction: {direction}")

    def __contains__(self, context: str) -> bool:
        return context in self._histories
