"""Extended commands: M-x, keyboard-quit and describe-function."""
from __future__ import annotations

from typing import TYPE_CHECKING

from edcmd.commands import function_registry
from edcmd.core.datamodels import CommandResult

if TYPE_CHECKING:
    from edcmd.editor import Editor


@function_registry.register("execute-extended-command")
def execute_extended_command(editor: "Editor", count: int, explicit: bool, args: list):
    """Read function name, then read its arguments and call it."""
    return editor.dispatcher.execute_extended_command(count, explicit)


@function_registry.register("keyboard-quit")
def keyboard_quit(editor: "Editor", count: int, explicit: bool, args: list):
    """Cancel current command."""
    editor.minibuffer.keyboard_quit()
    return CommandResult.ABORT


@function_registry.register("describe-function")
def describe_function(editor: "Editor", count: int, explicit: bool, args: list):
    """Display the full documentation of a function."""
    name = args[0] if args else editor.dispatcher.read_function_name("Describe function: ")
    if name is None:
        return CommandResult.FAILURE

    doc = editor.registry.get_doc(name)
    if doc is None:
        if editor.macros is not None and editor.macros.macro_lookup(name) is not None:
            editor.minibuffer.write(f"{name} is a keyboard macro.")
            return CommandResult.SUCCESS
        editor.minibuffer.error(f"Undefined function name `{name}'")
        return CommandResult.FAILURE

    summary = doc.split("\n", 1)[0] if doc else "Not documented."
    editor.minibuffer.write(f"{name}: {summary}")
    return CommandResult.SUCCESS
