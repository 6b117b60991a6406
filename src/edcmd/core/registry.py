"""
Function registry mapping command names to actions.

Entries are registered once at startup and the registry is then frozen;
after that it is a read-only lookup table.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterator, Mapping

from edcmd.core.datamodels import CommandEntry
from edcmd.core.exceptions import CommandError, RegistryFrozenError

if TYPE_CHECKING:
    from edcmd.interfaces import MacroStore

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """Registry for editor commands."""

    def __init__(self):
        self._entries: Mapping[str, CommandEntry] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        interactive: bool = True,
        doc: str | None = None,
    ) -> Callable:
        """Decorator to register a command.

        Args:
            name: Command name (e.g., "forward-char")
            interactive: True if the command may be invoked by name with M-x
            doc: Documentation; defaults to the function's docstring

        Returns:
            Decorator function

        Example:
            @function_registry.register("forward-char")
            def forward_char(editor, count, explicit, args):
                \"\"\"Move point right N characters.\"\"\"
                ...
        """
        def decorator(func: Callable) -> Callable:
            if self._frozen:
                raise RegistryFrozenError(f"Registry is frozen, cannot add: {name}")
            if name in self._entries:
                raise CommandError(f"Command name collision: {name}")

            self._entries[name] = CommandEntry(
                name=name,
                action=func,
                interactive=interactive,
                doc=doc,
            )
            func.__command_name__ = name
            return func
        return decorator

    def freeze(self) -> None:
        """Make the registry read-only."""
        if not self._frozen:
            self._entries = MappingProxyType(dict(self._entries))
            self._frozen = True
            logger.debug(f"Function registry frozen with {len(self._entries)} entries")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> CommandEntry | None:
        """Get an entry by exact name."""
        return self._entries.get(name)

    def resolve(self, name: str) -> Callable | None:
        """Resolve a command name to its action."""
        entry = self._entries.get(name)
        return entry.action if entry else None

    def get_doc(self, name: str) -> str | None:
        """Get the documentation string for a command."""
        entry = self._entries.get(name)
        return entry.get_doc() if entry else None

    def get_name(self, action: Callable) -> str | None:
        """Reverse lookup: the name an action is registered under."""
        for entry in self._entries.values():
            if entry.action is action:
                return entry.name
        return None

    def list_interactive_names(self, macros: "MacroStore | None" = None) -> list[str]:
        """Names usable from M-x: interactive commands, then macro names.

        A macro sharing a name with a command appears twice.
        """
        names = [e.name for e in self._entries.values() if e.interactive]
        if macros is not None:
            names.extend(macros.macro_names())
        return names

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
