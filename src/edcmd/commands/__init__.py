"""
Command set for edcmd.

Commands are registered on the global `function_registry` with its
`register` decorator. They are loaded from:
1. Package builtins
2. ~/.edcmd/commands/ (user commands)

after which the registry is frozen.
"""

from __future__ import annotations

from edcmd.core.registry import FunctionRegistry

# Global function registry
function_registry = FunctionRegistry()

from edcmd.commands.loader import load_builtins, load_user_commands  # noqa: E402

__all__ = ["FunctionRegistry", "function_registry", "load_builtins", "load_user_commands"]
