"""
File name helpers for minibuffer file reads.
"""

from __future__ import annotations

import os
from pathlib import Path


def expand_path(text: str, cwd: str | None = None) -> str | None:
    """Expand a typed file name to an absolute path.

    A `//` restarts the path at the root and a `/~` restarts it at the home
    directory, so a user can type over a prefilled directory. Relative names
    are taken from `cwd` (default: the process working directory).

    Returns:
        Absolute path, or None if a `~user` component cannot be resolved.
    """
    text = text or ""
    # Restart at the last `//` or `/~`
    restart = max(text.rfind("//"), text.rfind("/~"))
    if restart >= 0:
        text = text[restart + 1:]

    if text.startswith("~"):
        expanded = os.path.expanduser(text)
        if expanded.startswith("~"):
            return None
        text = expanded

    if not text.startswith("/"):
        text = os.path.join(cwd or os.getcwd(), text)

    trailing = text.endswith("/") and len(text) > 1
    result = os.path.normpath(text)
    if trailing and not result.endswith("/"):
        result += "/"
    return result


def compact_path(text: str) -> str:
    """Replace the home directory prefix with `~`."""
    home = str(Path.home())
    if text == home:
        return "~"
    if text.startswith(home.rstrip("/") + "/"):
        return "~" + text[len(home.rstrip("/")):]
    return text


def split_path(text: str) -> tuple[str, str]:
    """Split a typed path into (directory part, basename part).

    The directory part keeps its trailing slash so it can be rejoined as-is.
    """
    idx = text.rfind("/")
    if idx < 0:
        return "", text
    return text[:idx + 1], text[idx + 1:]
