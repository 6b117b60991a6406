"""
In-memory collaborators: a scratch buffer, scripted keys, a recording
renderer, a macro table and a literal-only evaluator.

The demo shell runs on these, and they make the command layer usable
without a real editor behind it.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Callable, Iterable

from edcmd.core.datamodels import Macro
from edcmd.core.exceptions import CommandError

logger = logging.getLogger(__name__)

UNDO_START = "start"
UNDO_END = "end"


class ScratchBuffer:
    """A single string with a point and a log of undo markers."""

    def __init__(self, text: str = "", point: int | None = None):
        self.text = text
        self.point = len(text) if point is None else point
        self.undo_log: list[tuple[str, int]] = []

    def undo_mark_start(self, position: int) -> None:
        self.undo_log.append((UNDO_START, position))

    def undo_mark_end(self, position: int) -> None:
        self.undo_log.append((UNDO_END, position))

    def forward_char(self) -> bool:
        if self.point >= len(self.text):
            return False
        self.point += 1
        return True

    def backward_char(self) -> bool:
        if self.point <= 0:
            return False
        self.point -= 1
        return True

    def delete_char(self) -> bool:
        if self.point >= len(self.text):
            return False
        self.text = self.text[:self.point] + self.text[self.point + 1:]
        return True

    def backward_delete_char(self) -> bool:
        if not self.backward_char():
            return False
        return self.delete_char()

    def insert(self, text: str) -> None:
        self.text = self.text[:self.point] + text + self.text[self.point:]
        self.point += len(text)


class ScriptedKeys:
    """Key source that replays a fixed key list, then reports no input."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys: deque[str] = deque(keys)
        self._last: str | None = None

    def feed(self, *keys: str) -> None:
        self._keys.extend(keys)

    def type_text(self, text: str) -> None:
        """Queue the keys for typing `text`."""
        self._keys.extend("SPC" if ch == " " else ch for ch in text)

    def next_key(self, timeout: float | None = None) -> str | None:
        if not self._keys:
            return None
        self._last = self._keys.popleft()
        return self._last

    def peek_last_key(self) -> str | None:
        return self._last

    def __len__(self) -> int:
        return len(self._keys)


class RecordingRenderer:
    """Renderer that keeps everything it is asked to show."""

    def __init__(self):
        self.lines: list[tuple[str, int]] = []
        self.candidate_lists: list[list[str]] = []
        self.bells = 0

    @property
    def last_line(self) -> str | None:
        return self.lines[-1][0] if self.lines else None

    def render_minibuffer(self, text: str, cursor: int) -> None:
        self.lines.append((text, cursor))

    def render_candidate_list(self, candidates: list[str]) -> None:
        self.candidate_lists.append(list(candidates))

    def ding(self) -> None:
        self.bells += 1


class MacroTable:
    """Named keyboard macros, each a list of command names."""

    def __init__(self, runner: Callable[[str], Any] | None = None):
        self._macros: dict[str, Macro] = {}
        # Names of macros currently being played
        self._playing: set[str] = set()
        # Runs one command by name; set by the Editor
        self.runner = runner

    def define(self, name: str, commands: Iterable[str]) -> Macro:
        macro = Macro(name=name, commands=list(commands))
        self._macros[name] = macro
        return macro

    def macro_lookup(self, name: str) -> Macro | None:
        return self._macros.get(name)

    def macro_names(self) -> list[str]:
        return sorted(self._macros)

    def macro_play(self, macro: Macro) -> None:
        """Run each command of `macro`.

        Raises:
            CommandError: No runner is set, or the macro is already playing.
        """
        if self.runner is None:
            raise CommandError(f"No command runner to play macro {macro.name}")
        if macro.name in self._playing:
            raise CommandError(f"Macro {macro.name} calls itself")
        self._playing.add(macro.name)
        try:
            for command in macro.commands:
                self.runner(command)
        finally:
            self._playing.discard(macro.name)


class LiteralEvaluator:
    """Evaluates atoms only: integers, quoted strings, t, nil and variables.

    Each non-blank line that is not a `;` comment is one atom; the value of
    the last one is returned.
    """

    def __init__(self):
        self.variables: dict[str, Any] = {}

    def _atom(self, text: str) -> Any:
        if text == "t":
            return True
        if text == "nil":
            return None
        if text.startswith('"'):
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise CommandError(f"Invalid string: {text}") from e
        try:
            return int(text)
        except ValueError:
            pass
        if text in self.variables:
            return self.variables[text]
        raise CommandError(f"Symbol's value as variable is void: {text}")

    def evaluate(self, expression: str) -> Any:
        value = None
        for line in expression.splitlines():
            line = line.strip()
            if not line or line.startswith(";"):
                continue
            value = self._atom(line)
        return value

    def set_variable(self, name: str, value: Any) -> None:
        logger.debug(f"Set variable {name} = {value!r}")
        self.variables[name] = value
