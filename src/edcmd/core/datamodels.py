"""
Data models for the command registry and the minibuffer.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from edcmd.core.completion import Completion
    from edcmd.core.history import History


class CommandResult(str, Enum):
    """Outcome of running an action."""

    SUCCESS = "success"
    FAILURE = "failure"
    ABORT = "abort"

    def __bool__(self) -> bool:
        return self is CommandResult.SUCCESS


class CompletionStatus(str, Enum):
    """Outcome of a completion attempt."""

    NOTMATCHED = "notmatched"
    MATCHED = "matched"
    MATCHED_NONUNIQUE = "matched_nonunique"
    NONUNIQUE = "nonunique"


def as_result(value: Any) -> CommandResult:
    """Normalize an action's return value to a CommandResult.

    None and True count as success, False as failure.
    """
    if isinstance(value, CommandResult):
        return value
    if value is None:
        return CommandResult.SUCCESS
    return CommandResult.SUCCESS if value else CommandResult.FAILURE


class CommandEntry(BaseModel):
    """Registry entry for a single command."""

    name: str
    action: Callable = Field(exclude=True)
    interactive: bool = True
    doc: str | None = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    def get_doc(self) -> str:
        """Get documentation from override or docstring."""
        if self.doc:
            return self.doc
        return (inspect.getdoc(self.action) or "").strip()


class Macro(BaseModel):
    """A named sequence of command invocations."""

    name: str
    commands: list[str] = Field(default_factory=list)


@dataclass
class InputRequest:
    """One active minibuffer read.

    Requests are stacked by the minibuffer; only the top one receives keys.
    """

    prompt: str
    value: str = ""
    cursor: int = -1
    completion: "Completion | None" = None
    history: "History | None" = None

    def __post_init__(self):
        if self.cursor < 0 or self.cursor > len(self.value):
            self.cursor = len(self.value)
