"""
Exception classes for the command layer.
"""


class CommandError(Exception):
    """Base exception for command-related errors."""


class CommandNotFoundError(CommandError):
    """Command or macro name not found."""


class RegistryFrozenError(CommandError):
    """Registration attempted after the registry was frozen."""


class InputError(CommandError):
    """Minibuffer input was rejected."""


class EmptyInputError(InputError):
    """Empty input submitted where a value is required."""


class InvalidInputError(InputError):
    """Input failed the caller's acceptance test."""
