"""
Terminal key source and renderer built on prompt_toolkit.

Keys are decoded with prompt_toolkit's VT100 parser and translated to Emacs
notation; ESC followed by a key becomes a meta key ("M-x").
"""

from __future__ import annotations

import logging
import select
from collections import deque
from typing import Optional

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import Output, create_output

from edcmd.keys import RET, SPC, TAB

logger = logging.getLogger(__name__)

# Seconds to wait for the key after ESC before treating ESC as a key
ESC_TIMEOUT = 0.05

SPECIAL_KEYS = {
    Keys.ControlM: RET,
    Keys.ControlJ: RET,
    Keys.ControlI: TAB,
    Keys.ControlH: "BACKSPACE",
    Keys.Left: "LEFT",
    Keys.Right: "RIGHT",
    Keys.Up: "UP",
    Keys.Down: "DOWN",
    Keys.Home: "HOME",
    Keys.End: "END",
    Keys.Delete: "DELETE",
    Keys.Escape: "ESC",
}


def translate_key(press: KeyPress) -> str | None:
    """Translate a prompt_toolkit key press to Emacs key notation."""
    key = press.key
    if key in SPECIAL_KEYS:
        return SPECIAL_KEYS[key]
    if isinstance(key, Keys):
        name = key.value
        if name.startswith("c-") and len(name) == 3:
            return "C-" + name[2:]
        # Mouse events, CPR responses and the like
        if name.startswith("<"):
            return None
        return name.upper()
    if key == " ":
        return SPC
    return key or None


def format_columns(candidates: list[str], width: int) -> list[str]:
    """Lay candidates out in left-aligned columns fitting `width`."""
    if not candidates:
        return []
    col = max(len(c) for c in candidates) + 2
    per_line = max(1, width // col)
    lines = []
    for i in range(0, len(candidates), per_line):
        row = candidates[i:i + per_line]
        lines.append("".join(c.ljust(col) for c in row).rstrip())
    return lines


class TerminalKeySource:
    """Reads keys from the terminal in raw mode.

    Use as a context manager; raw mode is active inside the `with` block.
    """

    def __init__(self, input: Optional[Input] = None):
        self._input = input or create_input()
        self._presses: deque[KeyPress] = deque()
        self._raw = None
        self._last: str | None = None

    def __enter__(self) -> "TerminalKeySource":
        self._raw = self._input.raw_mode()
        self._raw.__enter__()
        return self

    def __exit__(self, *exc) -> None:
        if self._raw is not None:
            self._raw.__exit__(*exc)
            self._raw = None

    def _read_press(self, timeout: float | None) -> KeyPress | None:
        if not self._presses:
            ready, _, _ = select.select([self._input.fileno()], [], [], timeout)
            if not ready:
                # A lone ESC stays in the parser until flushed
                self._presses.extend(self._input.flush_keys())
            else:
                self._presses.extend(self._input.read_keys())
                if not self._presses:
                    self._presses.extend(self._input.flush_keys())
        return self._presses.popleft() if self._presses else None

    def next_key(self, timeout: float | None = None) -> str | None:
        while True:
            press = self._read_press(timeout)
            if press is None:
                return None
            key = translate_key(press)
            if key is None:
                continue
            if key == "ESC":
                follow = self._read_press(ESC_TIMEOUT)
                if follow is not None:
                    meta = translate_key(follow)
                    if meta is not None:
                        key = "M-" + meta
            self._last = key
            return key

    def peek_last_key(self) -> str | None:
        return self._last


class TerminalRenderer:
    """Draws the minibuffer on the bottom terminal line."""

    def __init__(self, output: Optional[Output] = None):
        self._output = output or create_output()

    def render_minibuffer(self, text: str, cursor: int) -> None:
        out = self._output
        out.write_raw("\r")
        out.erase_end_of_line()
        out.write(text)
        back = len(text) - cursor
        if back > 0:
            out.cursor_backward(back)
        out.flush()

    def render_candidate_list(self, candidates: list[str]) -> None:
        out = self._output
        width = out.get_size().columns
        out.write_raw("\r\n")
        out.write("Possible completions are:")
        for line in format_columns(candidates, width):
            out.write_raw("\r\n")
            out.write(line)
        out.write_raw("\r\n")
        out.flush()

    def ding(self) -> None:
        self._output.bell()
        self._output.flush()
