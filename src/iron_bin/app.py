# Filename: app.py
# Author: Rich Lewis @RichLewis007
# Description: Application entry point for the trash tool. Configures logging, dispatches
#              the parsed command to the trash engine and renders results and exit codes.

from __future__ import annotations

import argparse
import fnmatch
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from .cli import Command, SortOrder, build_parser
from .models.trash_engine import TrashEngine
from .models.trash_item import BrokenEntry, TrashedItem
from .services import config as config_service
from .services import logger as logger_service
from .services.codec import is_utf8_path
from .services.errors import NoSuchTrashedFile, TrashError
from .services.formatting import format_datetime, format_path, format_size
from .services.prompt import confirm
from .workers.batch_worker import BatchResult, BatchWorker

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class App:
    # Renders trash operations for the terminal.

    def __init__(
        self,
        engine: TrashEngine,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._engine = engine
        self._out = stdout if stdout is not None else sys.stdout
        self._err = stderr if stderr is not None else sys.stderr

    def run(self, args: argparse.Namespace) -> int:
        handlers: dict[Command, Callable[[argparse.Namespace], int]] = {
            Command.LIST: self.list_trash,
            Command.PUT: self.put,
            Command.RESTORE: self.restore,
            Command.EMPTY: self.empty,
        }
        try:
            return handlers[args.command](args)
        except TrashError as exc:
            logger.debug("Aborting %s: %s", args.command, exc, exc_info=True)
            self._error(str(exc))
            return EXIT_FAILURE

    # ------------------------------------------------------------------
    # Commands

    def list_trash(self, args: argparse.Namespace) -> int:
        items: list[TrashedItem] = []
        for entry in self._engine.list():
            if isinstance(entry, BrokenEntry):
                self._error(f"cannot read trash entry {entry.trash_name}: {entry.error}")
                continue
            items.append(entry)

        patterns: Sequence[str] = args.patterns
        if patterns:
            items = [item for item in items if _matches(item.original_path, patterns)]
        _sort(items, args.sort_order)

        quote = self._is_terminal()
        if not args.verbose:
            for item in items:
                self._print(format_path(item.original_path, quote=quote))
            return EXIT_OK

        sizes = [format_size(item.size, human_readable=args.human_readable) for item in items]
        width = max((len(size) for size in sizes), default=0)
        self._print(f"total {len(items)}")
        for item, size in zip(items, sizes, strict=True):
            self._print(
                f"{size:>{width}}  {format_datetime(item.deletion_time)}  "
                f"{format_path(item.original_path, quote=quote)}"
            )
        return EXIT_OK

    def put(self, args: argparse.Namespace) -> int:
        paths, invalid = self._utf8_paths(args.paths)
        result = self._worker(args.interactive).put_paths(paths)

        if args.verbose:
            for item in result.succeeded:
                self._print(
                    f"trashed {item.original_path} on {format_datetime(item.deletion_time)}"
                )
        return self._summarize(result, invalid, args.verbose, "trashed")

    def restore(self, args: argparse.Namespace) -> int:
        paths, invalid = self._utf8_paths(args.paths)
        worker = self._worker(args.interactive)

        if args.paths:
            result = worker.restore_paths(Path.cwd() / path for path in paths)
        else:
            try:
                latest = self._engine.latest()
            except NoSuchTrashedFile as exc:
                self._error(str(exc))
                return EXIT_FAILURE
            result = worker.restore_items([latest])

        if args.verbose:
            for item in result.succeeded:
                self._print(
                    f"restored {item.original_path} trashed on "
                    f"{format_datetime(item.deletion_time)}"
                )
        return self._summarize(result, invalid, args.verbose, "restored")

    def empty(self, args: argparse.Namespace) -> int:
        if not args.force and self._is_terminal() and not confirm("empty trash?"):
            return EXIT_OK

        report = self._engine.empty()
        for failure in report.failures:
            self._error(str(failure))
        if args.verbose:
            self._print(f"total {report.removed} removed")
        if report.failures:
            self._error(f"{len(report.failures)} not removed")
            return EXIT_FAILURE
        return EXIT_OK

    # ------------------------------------------------------------------
    # Helpers

    def _worker(self, interactive: bool) -> BatchWorker:
        should_prompt = interactive and self._is_terminal()
        return BatchWorker(self._engine, confirm=confirm if should_prompt else None)

    def _utf8_paths(self, paths: Sequence[Path]) -> tuple[list[Path], int]:
        # Drop paths that cannot be stored in a .trashinfo file.
        valid: list[Path] = []
        invalid = 0
        for path in paths:
            if is_utf8_path(path):
                valid.append(path)
            else:
                self._error(f"invalid UTF-8 path: {str(path).encode('utf-8', 'replace').decode()}")
                invalid += 1
        return valid, invalid

    def _summarize(self, result: BatchResult, invalid: int, verbose: bool, verb: str) -> int:
        for path, exc in result.failed:
            logger.debug("Failed on %s", path, exc_info=exc)
            self._error(str(exc))
        if verbose:
            self._print(f"total {len(result.succeeded)} {verb}")
        errors = len(result.failed) + invalid
        if errors:
            self._error(f"{errors} not {verb}")
            return EXIT_FAILURE
        return EXIT_OK

    def _is_terminal(self) -> bool:
        return self._out.isatty()

    def _print(self, line: str) -> None:
        print(line, file=self._out)

    def _error(self, message: str) -> None:
        print(f"trash: {message}", file=self._err)


def _matches(path: Path, patterns: Sequence[str]) -> bool:
    # Shell-style match of the whole original path against any pattern.
    return any(fnmatch.fnmatchcase(str(path), pattern) for pattern in patterns)


def _sort(items: list[TrashedItem], order: SortOrder) -> None:
    if order is SortOrder.DATE:
        items.sort(key=TrashedItem.sort_key, reverse=True)
    else:
        items.sort(key=lambda item: (str(item.original_path), item.deletion_time))


def main(argv: list[str] | None = None) -> int:
    # Entry point for console scripts.
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = config_service.Settings.from_env()
    logger_service.configure(log_level=args.log_level or settings.log_level)
    logger.debug("Starting trash with argv=%s", argv)

    return App(TrashEngine()).run(args)


if __name__ == "__main__":
    sys.exit(main())
