#!/usr/bin/env python3
"""
CLI entry point for the demo shell (edcmd command).
"""

from __future__ import annotations

import argparse
import sys

from edcmd.config import get_config_manager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Interactive command layer demo: a one-line scratch buffer with M-x",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
    M-x            Run a command by name (TAB completes, M-p/M-n recall)
    C-u [N]        Repeat the next command N times (4 without digits)
    C-f / C-b      Move point
    C-d / DEL      Delete characters
    C-g            Quit the current command
    C-x C-c        Exit
        """,
    )
    parser.add_argument("text", nargs="?", default="", help="Initial buffer text")
    parser.add_argument("--log-file", help="Write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to show invalid-input errors (overrides config)",
    )
    parser.add_argument(
        "--no-user-commands",
        action="store_true",
        help="Do not load commands from ~/.edcmd/commands",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the demo shell."""
    args = build_parser().parse_args(argv)

    from edcmd.commands import load_builtins
    from edcmd.editor import Editor
    from edcmd.log import close_logging, configure_logging
    from edcmd.scratch import ScratchBuffer
    from edcmd.terminal import TerminalKeySource, TerminalRenderer
    from edcmd.cli.shell import Shell

    config = get_config_manager().config
    if args.delay is not None:
        config = config.model_copy(update={"invalid_input_delay": args.delay})

    level = "DEBUG" if args.verbose else config.get("log_level")
    configure_logging(level, args.log_file or config.get("log_file"))

    registry = load_builtins(user_commands=not args.no_user_commands)
    try:
        with TerminalKeySource() as keys:
            editor = Editor(
                ScratchBuffer(args.text),
                keys,
                TerminalRenderer(),
                registry=registry,
                config=config,
            )
            Shell(editor).run()
    except KeyboardInterrupt:
        pass
    finally:
        close_logging()
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
