"""
Demo key loop: binds a few keys to commands over a scratch buffer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from edcmd.keys import KEYBOARD_QUIT, SPC, is_printable

if TYPE_CHECKING:
    from edcmd.editor import Editor

logger = logging.getLogger(__name__)

DEFAULT_BINDINGS = {
    "M-x": "execute-extended-command",
    KEYBOARD_QUIT: "keyboard-quit",
    "C-f": "forward-char",
    "RIGHT": "forward-char",
    "C-b": "backward-char",
    "LEFT": "backward-char",
    "C-d": "delete-char",
    "DELETE": "delete-char",
    "BACKSPACE": "backward-delete-char",
}

UNIVERSAL_ARGUMENT = "C-u"
EXIT_PREFIX = "C-x"
EXIT_KEY = "C-c"


class Shell:
    """Reads keys and runs the bound commands until C-x C-c."""

    def __init__(self, editor: "Editor", bindings: dict[str, str] | None = None):
        self.editor = editor
        self.bindings = dict(DEFAULT_BINDINGS if bindings is None else bindings)

    def read_prefix_arg(self) -> tuple[int, bool, str | None]:
        """Read a C-u argument; C-u has already been typed.

        Each further C-u multiplies by 4; digits (with an optional leading
        `-`) give the count directly.

        Returns:
            (count, empty, key after the argument). `empty` is True when no
            digits were typed.
        """
        keys = self.editor.keys
        count = 4
        digits = ""
        while True:
            key = keys.next_key()
            if key == UNIVERSAL_ARGUMENT and not digits:
                count *= 4
            elif key is not None and (key.isdigit() or (key == "-" and not digits)):
                digits += key
            else:
                break
        if not digits:
            return count, True, key
        if digits == "-":
            return -1, False, key
        return int(digits), False, key

    def redisplay(self) -> None:
        """Show the buffer unless a message is on display."""
        if self.editor.minibuffer.no_error():
            buf = self.editor.buffer
            self.editor.renderer.render_minibuffer(buf.text, buf.point)

    def step(self) -> bool:
        """Handle one key sequence. Returns False when the shell should exit."""
        editor = self.editor
        key = editor.keys.next_key()
        if key is None:
            return False
        # Messages last until the next key
        editor.minibuffer.dismiss()

        count, explicit, empty = 1, False, False
        if key == UNIVERSAL_ARGUMENT:
            count, empty, key = self.read_prefix_arg()
            explicit = True
            if key is None:
                return False

        if key == EXIT_PREFIX:
            if editor.keys.next_key() == EXIT_KEY:
                return False
            editor.minibuffer.ding()
            return True

        editor.prefix_arg_empty = empty
        name = self.bindings.get(key)
        if name is not None:
            editor.run_command(name, count, explicit)
        elif key == SPC or is_printable(key):
            editor.buffer.insert((" " if key == SPC else key) * max(count, 0))
        else:
            logger.debug(f"Unbound key {key!r}")
            editor.minibuffer.error(f"{key} is undefined")
        editor.prefix_arg_empty = False

        self.redisplay()
        return True

    def run(self) -> None:
        self.redisplay()
        while self.step():
            pass
