"""
edcmd - interactive command layer for a modal text editor

Resolves command names to actions, repeats them under a numeric argument
inside undo brackets, and reads minibuffer input with completion, validation
and history.

Example usage:
    from edcmd import Editor
    from edcmd.scratch import RecordingRenderer, ScratchBuffer, ScriptedKeys

    keys = ScriptedKeys()
    editor = Editor(ScratchBuffer("hello"), keys, RecordingRenderer())

    keys.type_text("backward-char")
    keys.feed("RET")
    editor.run_command("execute-extended-command", count=3, explicit=True)
    assert editor.buffer.point == 2
"""

__version__ = "0.1.0"

from edcmd.core import (
    CommandEntry,
    CommandError,
    CommandNotFoundError,
    CommandResult,
    Completion,
    CompletionStatus,
    FunctionRegistry,
    History,
    HistoryStore,
    InputRequest,
    Macro,
)


# Lazy imports to avoid circular imports with the command modules
def __getattr__(name):
    if name == "Editor":
        from edcmd.editor import Editor
        return Editor
    if name == "Dispatcher":
        from edcmd.dispatcher import Dispatcher
        return Dispatcher
    if name == "Minibuffer":
        from edcmd.minibuffer import Minibuffer
        return Minibuffer
    if name == "function_registry":
        from edcmd.commands import function_registry
        return function_registry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core
    "FunctionRegistry",
    "CommandEntry",
    "CommandResult",
    "Completion",
    "CompletionStatus",
    "History",
    "HistoryStore",
    "InputRequest",
    "Macro",
    "CommandError",
    "CommandNotFoundError",
    # Lazy loaded
    "Editor",
    "Dispatcher",
    "Minibuffer",
    "function_registry",
]
