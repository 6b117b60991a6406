"""Logging configuration for edcmd.

Everything logs under the `edcmd` logger. The shell installs one handler,
either on stderr or on a log file, since the terminal itself is owned by the
minibuffer.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level state
_handler: Optional[logging.Handler] = None


def configure_logging(
    level: int | str = logging.WARNING,
    log_file: str | Path | None = None,
) -> logging.Handler:
    """Install a handler on the `edcmd` logger.

    Replaces the handler from a previous call.

    Args:
        level: Logging level (number or name)
        log_file: Append to this file instead of writing to stderr

    Returns:
        The installed handler
    """
    global _handler

    close_logging()

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("edcmd")
    logger.addHandler(handler)
    logger.setLevel(level)

    _handler = handler
    return handler


def close_logging() -> None:
    """Remove the handler installed by configure_logging, if any."""
    global _handler

    if _handler is not None:
        logging.getLogger("edcmd").removeHandler(_handler)
        _handler.close()
        _handler = None
