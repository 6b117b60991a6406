"""
Editor: wires the registry, minibuffer and dispatcher to the collaborators.

Commands receive the Editor as their first argument.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from edcmd.config import Config
from edcmd.core.datamodels import CommandResult
from edcmd.core.exceptions import CommandNotFoundError
from edcmd.core.history import HistoryStore
from edcmd.dispatcher import Dispatcher
from edcmd.keys import KeyReader
from edcmd.minibuffer import Minibuffer
from edcmd.scratch import LiteralEvaluator, MacroTable

if TYPE_CHECKING:
    from edcmd.core.registry import FunctionRegistry
    from edcmd.interfaces import Evaluator, KeySource, MacroStore, Renderer, UndoBuffer

logger = logging.getLogger(__name__)


class Editor:
    """One editing session."""

    def __init__(
        self,
        buffer: "UndoBuffer",
        keys: "KeySource",
        renderer: "Renderer",
        registry: "FunctionRegistry | None" = None,
        macros: "MacroStore | None" = None,
        evaluator: "Evaluator | None" = None,
        config: Config | None = None,
    ):
        if registry is None:
            from edcmd.commands import load_builtins
            registry = load_builtins()

        self.config = config or Config()
        self.buffer = buffer
        self.renderer = renderer
        self.keys = KeyReader(keys)
        self.registry = registry
        self.evaluator = evaluator or LiteralEvaluator()
        self.histories = HistoryStore()
        self.minibuffer = Minibuffer(
            self.keys,
            renderer,
            self.histories,
            invalid_input_delay=self.config.get("invalid_input_delay"),
            ring_bell=self.config.get("ring_bell"),
        )
        self.dispatcher = Dispatcher(self)

        if macros is None:
            macros = MacroTable()
        if isinstance(macros, MacroTable) and macros.runner is None:
            macros.runner = self.dispatcher.execute_named
        self.macros = macros

        # Set by the key loop when the argument was a bare C-u
        self.prefix_arg_empty = False

    def run_command(
        self,
        name: str,
        count: int = 1,
        explicit: bool = False,
        args: Sequence[Any] | None = None,
    ) -> CommandResult:
        """Run a command by name, reporting unknown names in the minibuffer."""
        try:
            return self.dispatcher.execute_named(name, count, explicit, args)
        except CommandNotFoundError:
            logger.debug(f"No such command: {name}")
            self.minibuffer.error(f"No such command `{name}'")
            return CommandResult.FAILURE
