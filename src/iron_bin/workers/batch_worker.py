# Filename: batch_worker.py
# Author: Rich Lewis @RichLewis007
# Description: Batch worker for trashing and restoring several paths. Processes each path
#              in turn and records its outcome so one failure never stops the rest.

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from iron_bin.models.trash_engine import TrashEngine
from iron_bin.models.trash_item import TrashedItem
from iron_bin.services.errors import TrashError
from iron_bin.services.formatting import format_datetime

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]
ProgressCallback = Callable[[int, int, Path], None]

T = TypeVar("T")


@dataclass(slots=True)
class BatchResult:
    # Summary of a batch request, split into successes, failures and skipped paths.

    succeeded: list[TrashedItem] = field(default_factory=list)
    failed: list[tuple[Path, TrashError]] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class BatchWorker:
    # Runs put/restore over many paths, one at a time.

    def __init__(
        self,
        engine: TrashEngine,
        *,
        confirm: ConfirmCallback | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self._engine = engine
        self._confirm = confirm
        self._progress = progress

    def put_paths(self, paths: Iterable[Path]) -> BatchResult:
        # Move each path to the trash.
        return self._run(
            list(paths),
            self._engine.put,
            label=lambda path: path,
            question=lambda path: f"trash {path}?",
        )

    def restore_paths(self, paths: Iterable[Path]) -> BatchResult:
        # Restore the most recent version of each path.
        return self._run(
            list(paths),
            self._engine.restore,
            label=lambda path: path,
            question=lambda path: f"restore {path}?",
        )

    def restore_items(self, items: Iterable[TrashedItem]) -> BatchResult:
        # Restore specific trashed items, e.g. the most recent one.
        return self._run(
            list(items),
            self._engine.restore_item,
            label=lambda item: item.original_path,
            question=lambda item: (
                f"restore {item.original_path} trashed on {format_datetime(item.deletion_time)}?"
            ),
        )

    def _run(
        self,
        targets: list[T],
        action: Callable[[T], TrashedItem],
        *,
        label: Callable[[T], Path],
        question: Callable[[T], str],
    ) -> BatchResult:
        result = BatchResult()
        total = len(targets)

        for index, target in enumerate(targets, start=1):
            path = label(target)
            if self._progress is not None:
                self._progress(index, total, path)
            if self._confirm is not None and not self._confirm(question(target)):
                result.skipped.append(path)
                continue
            try:
                result.succeeded.append(action(target))
            except TrashError as exc:
                logger.debug("Batch item %s failed: %s", path, exc)
                result.failed.append((path, exc))

        return result


__all__ = ["BatchResult", "BatchWorker"]
