# Filename: cli.py
# Author: Rich Lewis @RichLewis007
# Description: Command-line argument parser for the trash tool. Declares the list, put,
#              restore and empty subcommands and their options.

from __future__ import annotations

import argparse
from enum import StrEnum
from pathlib import Path

from . import __version__
from .services.config import LOG_LEVELS


class Command(StrEnum):
    # The closed set of operations the tool performs.

    LIST = "list"
    PUT = "put"
    RESTORE = "restore"
    EMPTY = "empty"


class SortOrder(StrEnum):
    PATH = "path"  # original path, ascending
    DATE = "date"  # deletion time, most recent first


def build_parser() -> argparse.ArgumentParser:
    # Create and configure the command-line argument parser.
    parser = argparse.ArgumentParser(
        prog="trash",
        description="Move files to the desktop trash, list, restore or purge them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Console log level (default: $IRON_BIN_LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command_name", metavar="COMMAND", required=True)

    list_parser = subparsers.add_parser(
        Command.LIST.value, aliases=["ls"], help="List the files in the trash."
    )
    list_parser.set_defaults(command=Command.LIST)
    list_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")
    list_parser.add_argument(
        "-H",
        "--human-readable",
        action="store_true",
        help="Print human-readable sizes (useful with --verbose).",
    )
    list_parser.add_argument(
        "-s",
        "--sort",
        dest="sort_order",
        type=SortOrder,
        choices=list(SortOrder),
        default=SortOrder.PATH,
        metavar="ORDER",
        help="Sort order: path (ascending) or date (most recent first). Default: %(default)s.",
    )
    list_parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Only list original paths matching these glob patterns (quote them).",
    )

    put_parser = subparsers.add_parser(Command.PUT.value, help="Put files in the trash.")
    put_parser.set_defaults(command=Command.PUT)
    put_parser.add_argument(
        "-i", "--interactive", action="store_true", help="Prompt before every path."
    )
    put_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")
    put_parser.add_argument("paths", nargs="+", type=Path, metavar="PATH", help="Paths to trash.")

    restore_parser = subparsers.add_parser(
        Command.RESTORE.value, help="Restore files from the trash."
    )
    restore_parser.set_defaults(command=Command.RESTORE)
    restore_parser.add_argument(
        "-i", "--interactive", action="store_true", help="Prompt before every path."
    )
    restore_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")
    restore_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        metavar="PATH",
        help="Original paths to restore (default: the most recently trashed file).",
    )

    empty_parser = subparsers.add_parser(Command.EMPTY.value, help="Empty the trash.")
    empty_parser.set_defaults(command=Command.EMPTY)
    empty_parser.add_argument(
        "-f", "--force", action="store_true", help="Do not prompt before emptying the trash."
    )
    empty_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")

    return parser
