"""
Key reading with pushback and timed waits.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from edcmd.interfaces import KeySource

logger = logging.getLogger(__name__)

# Keys with special meaning to the minibuffer line editor
RET = "RET"
TAB = "TAB"
SPC = "SPC"
KEYBOARD_QUIT = "C-g"


def is_printable(key: str) -> bool:
    """True for keys that insert themselves."""
    return len(key) == 1 and key.isprintable()


class KeyReader:
    """Wraps a KeySource with a pushback queue.

    The only places the command loop suspends are `next_key` and `wait`.
    """

    def __init__(self, source: "KeySource"):
        self.source = source
        self._pending: deque[str] = deque()
        self.last_key: str | None = None

    def next_key(self, timeout: float | None = None) -> str | None:
        """Next key, from the pushback queue first."""
        if self._pending:
            key = self._pending.popleft()
        else:
            key = self.source.next_key(timeout)
        if key is not None:
            self.last_key = key
        return key

    def unget(self, key: str) -> None:
        """Push a key back so the next read returns it."""
        self._pending.appendleft(key)

    def wait(self, delay: float) -> None:
        """Pause up to `delay` seconds; a key press ends the pause early.

        The key that ended the pause is pushed back, not consumed.
        """
        if delay <= 0 or self._pending:
            return
        key = self.source.next_key(delay)
        if key is not None:
            logger.debug(f"Wait interrupted by {key!r}")
            self.unget(key)

    def peek_last_key(self) -> str | None:
        return self.last_key
