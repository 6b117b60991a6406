"""
Core module for the edcmd package.

Provides the function registry, completion engine and input history used by
the command dispatcher and the minibuffer.
"""

from edcmd.core.completion import Completion, is_member, try_complete
from edcmd.core.datamodels import (
    CommandEntry,
    CommandResult,
    CompletionStatus,
    InputRequest,
    Macro,
    as_result,
)
from edcmd.core.exceptions import (
    CommandError,
    CommandNotFoundError,
    EmptyInputError,
    InputError,
    InvalidInputError,
    RegistryFrozenError,
)
from edcmd.core.history import History, HistoryStore
from edcmd.core.registry import FunctionRegistry

__all__ = [
    # Registry
    "FunctionRegistry",
    # Completion
    "Completion",
    "try_complete",
    "is_member",
    # History
    "History",
    "HistoryStore",
    # Models
    "CommandEntry",
    "CommandResult",
    "CompletionStatus",
    "InputRequest",
    "Macro",
    "as_result",
    # Exceptions
    "CommandError",
    "CommandNotFoundError",
    "RegistryFrozenError",
    "InputError",
    "EmptyInputError",
    "InvalidInputError",
]
