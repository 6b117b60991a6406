"""
CLI module for the edcmd package.

Provides the demo shell that drives the command layer from the terminal.
"""

from edcmd.cli.shell import DEFAULT_BINDINGS, Shell

__all__ = [
    "DEFAULT_BINDINGS",
    "Shell",
]
