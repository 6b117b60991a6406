"""
Command dispatcher: name resolution, repetition and undo brackets.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Sequence

from edcmd.core.completion import Completion
from edcmd.core.datamodels import CommandResult, as_result
from edcmd.core.exceptions import CommandError, CommandNotFoundError
from edcmd.core.history import FUNCTIONS

if TYPE_CHECKING:
    from edcmd.editor import Editor

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs commands for an Editor."""

    def __init__(self, editor: "Editor"):
        self.editor = editor

    def execute_with_repetition(
        self,
        count: int,
        explicit: bool,
        forward: Callable[[], Any],
        backward: Callable[[], Any] | None = None,
        undo: bool = False,
    ) -> CommandResult:
        """Call an action `count` times, stopping at the first failure.

        A negative count runs `backward` instead, if given. With `undo` the
        repetitions are bracketed by undo start/end markers; the end marker
        is written however the loop ends.

        Returns:
            SUCCESS if every repetition succeeded, else the first
            non-success result.
        """
        action = forward
        if backward is not None and count < 0:
            action = backward
            count = -count

        buffer = self.editor.buffer
        if undo:
            buffer.undo_mark_start(buffer.point)
        result = CommandResult.SUCCESS
        try:
            for _ in range(count):
                result = as_result(action())
                if result is not CommandResult.SUCCESS:
                    break
        finally:
            if undo:
                buffer.undo_mark_end(buffer.point)
        return result

    def call(
        self,
        name: str,
        action: Callable,
        count: int = 1,
        explicit: bool = False,
        args: Sequence[Any] | None = None,
    ) -> CommandResult:
        """Invoke a resolved action, turning CommandError into FAILURE."""
        logger.debug(f"Calling {name} (count={count}, explicit={explicit})")
        try:
            result = as_result(action(self.editor, count, explicit, list(args or [])))
        except CommandError as e:
            logger.warning(f"Command {name} failed: {e}")
            self.editor.minibuffer.error(str(e))
            return CommandResult.FAILURE
        except Exception as e:
            logger.exception(f"Command {name} raised {type(e).__name__}")
            self.editor.minibuffer.error(f"{name}: {type(e).__name__}: {e}")
            return CommandResult.FAILURE
        if result is not CommandResult.SUCCESS:
            logger.debug(f"Command {name} returned {result.value}")
        return result

    def execute_named(
        self,
        name: str,
        count: int = 1,
        explicit: bool = False,
        args: Sequence[Any] | None = None,
    ) -> CommandResult:
        """Run a command by name, falling back to a keyboard macro.

        Raises:
            CommandNotFoundError: Neither a command nor a macro has this name.
        """
        action = self.editor.registry.resolve(name)
        if action is not None:
            return self.call(name, action, count, explicit, args)

        macros = self.editor.macros
        macro = macros.macro_lookup(name) if macros is not None else None
        if macro is not None:
            logger.debug(f"Playing macro {name}")
            # Playback counts as success even when a step fails
            try:
                macros.macro_play(macro)
            except CommandError as e:
                logger.warning(f"Macro {name} stopped: {e}")
                self.editor.minibuffer.error(str(e))
            except Exception as e:
                logger.exception(f"Macro {name} raised {type(e).__name__}")
                self.editor.minibuffer.error(f"{name}: {type(e).__name__}: {e}")
            return CommandResult.SUCCESS

        raise CommandNotFoundError(f"No such command: {name}")

    def read_function_name(self, prompt: str) -> str | None:
        """Read a command or macro name with completion."""
        editor = self.editor
        completion = Completion(editor.registry.list_interactive_names(editor.macros))
        histories = editor.minibuffer.histories
        history = histories.get(FUNCTIONS) if FUNCTIONS in histories else None
        return editor.minibuffer.read_completion(
            prompt,
            completion,
            history=history,
            empty_error="No function name given",
            invalid_error="Undefined function name `%s'",
        )

    def execute_extended_command(self, count: int = 1, explicit: bool = False) -> CommandResult:
        """Read a function name and run it with the current argument."""
        prompt = ""
        if explicit:
            prompt = "C-u " if self.editor.prefix_arg_empty else f"{count} "
        prompt += "M-x "

        name = self.read_function_name(prompt)
        if name is None:
            return CommandResult.FAILURE

        try:
            return self.execute_named(name, count, explicit)
        except CommandNotFoundError:
            self.editor.minibuffer.error(f"Undefined function name `{name}'")
            return CommandResult.FAILURE
