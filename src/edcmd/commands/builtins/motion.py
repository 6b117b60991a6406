"""Character motion and deletion."""
from __future__ import annotations

from typing import TYPE_CHECKING

from edcmd.commands import function_registry
from edcmd.core.datamodels import CommandResult

if TYPE_CHECKING:
    from edcmd.editor import Editor


def _boundary_error(editor: "Editor", forward: bool) -> None:
    editor.minibuffer.error("End of buffer" if forward else "Beginning of buffer")


@function_registry.register("forward-char")
def forward_char(editor: "Editor", count: int, explicit: bool, args: list):
    """Move point right N characters (left if N is negative).
    On attempt to pass end of buffer, stop and signal error.
    """
    buf = editor.buffer
    result = editor.dispatcher.execute_with_repetition(
        count, explicit, buf.forward_char, buf.backward_char
    )
    if result is CommandResult.FAILURE:
        _boundary_error(editor, count >= 0)
    return result


@function_registry.register("backward-char")
def backward_char(editor: "Editor", count: int, explicit: bool, args: list):
    """Move point left N characters (right if N is negative).
    On attempt to pass beginning of buffer, stop and signal error.
    """
    buf = editor.buffer
    result = editor.dispatcher.execute_with_repetition(
        count, explicit, buf.backward_char, buf.forward_char
    )
    if result is CommandResult.FAILURE:
        _boundary_error(editor, count < 0)
    return result


@function_registry.register("delete-char")
def delete_char(editor: "Editor", count: int, explicit: bool, args: list):
    """Delete the following N characters (previous if N is negative)."""
    buf = editor.buffer
    result = editor.dispatcher.execute_with_repetition(
        count, explicit, buf.delete_char, buf.backward_delete_char, undo=True
    )
    if result is CommandResult.FAILURE:
        _boundary_error(editor, count >= 0)
    return result


@function_registry.register("backward-delete-char")
def backward_delete_char(editor: "Editor", count: int, explicit: bool, args: list):
    """Delete the previous N characters (following if N is negative)."""
    buf = editor.buffer
    result = editor.dispatcher.execute_with_repetition(
        count, explicit, buf.backward_delete_char, buf.delete_char, undo=True
    )
    if result is CommandResult.FAILURE:
        _boundary_error(editor, count < 0)
    return result
