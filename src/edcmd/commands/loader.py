"""
Command loader - imports the built-in commands and user commands, then
freezes the function registry.

User commands live in ~/.edcmd/commands/, each in its own subdirectory with
an __init__.py that registers itself:

    # ~/.edcmd/commands/hello/__init__.py
    from edcmd.commands import function_registry

    @function_registry.register("hello")
    def hello(editor, count, explicit, args):
        \"\"\"Say hello in the minibuffer.\"\"\"
        editor.minibuffer.write("Hello!")
"""

from __future__ import annotations

import importlib
import logging
import sys
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from edcmd.core.registry import FunctionRegistry

logger = logging.getLogger(__name__)

# Default user commands directory
USER_COMMANDS_DIR = Path.home() / ".edcmd" / "commands"

# Package builtins directory
PACKAGE_BUILTINS_DIR = Path(__file__).parent / "builtins"


def discover_builtins() -> list[str]:
    """Module names of the package's built-in command modules."""
    return sorted(
        p.stem for p in PACKAGE_BUILTINS_DIR.glob("*.py") if not p.stem.startswith("_")
    )


def discover_commands(commands_dir: Path) -> list[Path]:
    """
    Discover command directories in the given path.

    Each command must be in its own subdirectory with an __init__.py file.

    Returns:
        List of __init__.py paths for valid commands.
    """
    if not commands_dir.exists():
        return []

    if not commands_dir.is_dir():
        logger.warning(f"Commands path is not a directory: {commands_dir}")
        return []

    cmd_paths = []
    for subdir in sorted(commands_dir.iterdir()):
        if not subdir.is_dir() or subdir.name.startswith((".", "_")):
            continue
        init_file = subdir / "__init__.py"
        if init_file.exists():
            cmd_paths.append(init_file)
        else:
            logger.debug(f"Skipping {subdir.name}: no __init__.py")

    return cmd_paths


def load_command(cmd_path: Path, prefix: str = "edcmd_user") -> tuple[str, bool, str]:
    """
    Load a single user command module.

    Returns:
        Tuple of (cmd_name, success, error_message)
    """
    cmd_name = cmd_path.parent.name
    module_name = f"{prefix}.{cmd_name}"

    try:
        spec = spec_from_file_location(module_name, cmd_path)
        if spec is None or spec.loader is None:
            return (cmd_name, False, "Could not create module spec")

        module = module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

        return (cmd_name, True, "")

    except SyntaxError as e:
        return (cmd_name, False, f"Syntax error: {e}")
    except ImportError as e:
        return (cmd_name, False, f"Import error: {e}")
    except Exception as e:
        return (cmd_name, False, f"Error: {e}")


def load_user_commands(user_dir: Path | None = None) -> int:
    """
    Load user commands. Must run before the registry is frozen.

    Returns:
        Number of successfully loaded commands.
    """
    user_dir = user_dir or USER_COMMANDS_DIR
    total_loaded = 0

    for cmd_path in discover_commands(user_dir):
        cmd_name, success, error = load_command(cmd_path)
        if success:
            total_loaded += 1
            logger.info(f"Loaded command: {cmd_name}")
        else:
            logger.warning(f"Failed to load command '{cmd_name}': {error}")

    return total_loaded


def load_builtins(user_dir: Path | None = None, user_commands: bool = True) -> FunctionRegistry:
    """
    Populate and freeze the global function registry.

    Safe to call more than once; only the first call loads anything.

    Returns:
        The frozen global registry.
    """
    from edcmd.commands import function_registry

    if function_registry.frozen:
        return function_registry

    for name in discover_builtins():
        importlib.import_module(f"edcmd.commands.builtins.{name}")
    if user_commands:
        load_user_commands(user_dir)

    function_registry.freeze()
    return function_registry
