"""Commands that hand work to the extension-language evaluator."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from edcmd.commands import function_registry
from edcmd.core.datamodels import CommandResult

if TYPE_CHECKING:
    from edcmd.editor import Editor

logger = logging.getLogger(__name__)


@function_registry.register("load")
def load(editor: "Editor", count: int, explicit: bool, args: list):
    """Execute a file of Lisp code named FILE."""
    if args:
        path = str(args[0])
    else:
        path = editor.minibuffer.read_filename("Load file: ", os.getcwd() + "/")
        if path is None:
            return CommandResult.FAILURE

    try:
        source = Path(path).expanduser().read_text()
    except OSError as e:
        logger.warning(f"Cannot open load file {path}: {e}")
        editor.minibuffer.error(f"Cannot open load file: {path}")
        return CommandResult.FAILURE

    editor.evaluator.evaluate(source)
    return CommandResult.SUCCESS


@function_registry.register("setq", interactive=False)
def setq(editor: "Editor", count: int, explicit: bool, args: list):
    """(setq [sym val]...)

    Set each sym to the value of its val.
    The symbols sym are variables; they are literal (not evaluated).
    The values val are expressions; they are evaluated.
    """
    # An odd trailing symbol is ignored
    for symbol, expression in zip(args[::2], args[1::2]):
        value = editor.evaluator.evaluate(expression)
        editor.evaluator.set_variable(symbol, value)
    return CommandResult.SUCCESS
