"""
Protocols for the collaborators the command layer talks to.

The buffer, the terminal, the key decoder, the macro store and the
expression evaluator live outside this package; these are the narrow
interfaces it consumes.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable

from edcmd.core.datamodels import Macro


@runtime_checkable
class UndoBuffer(Protocol):
    """The current buffer: point, char motion/deletion and undo markers."""

    @property
    def point(self) -> int: ...

    def undo_mark_start(self, position: int) -> None: ...

    def undo_mark_end(self, position: int) -> None: ...

    def forward_char(self) -> bool: ...

    def backward_char(self) -> bool: ...

    def delete_char(self) -> bool: ...

    def backward_delete_char(self) -> bool: ...


@runtime_checkable
class KeySource(Protocol):
    """Decoded keystrokes, in Emacs notation ("a", "RET", "C-g", "M-x")."""

    def next_key(self, timeout: float | None = None) -> str | None:
        """Block for the next key; None if `timeout` seconds pass first."""
        ...

    def peek_last_key(self) -> str | None: ...


@runtime_checkable
class Renderer(Protocol):
    """Echo-area output."""

    def render_minibuffer(self, text: str, cursor: int) -> None: ...

    def render_candidate_list(self, candidates: list[str]) -> None: ...

    def ding(self) -> None: ...


@runtime_checkable
class MacroStore(Protocol):
    """User-defined keyboard macros."""

    def macro_lookup(self, name: str) -> Macro | None: ...

    def macro_names(self) -> Iterable[str]: ...

    def macro_play(self, macro: Macro) -> None: ...


@runtime_checkable
class Evaluator(Protocol):
    """Extension-language evaluator."""

    def evaluate(self, expression: str) -> Any: ...

    def set_variable(self, name: str, value: Any) -> None: ...
