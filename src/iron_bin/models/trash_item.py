# Filename: trash_item.py
# Author: Rich Lewis @RichLewis007
# Description: Data structures describing trash contents. Defines trashed items, unreadable
#              entries, and the report returned when the trash is emptied.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from iron_bin.services.errors import EmptyPartialFailure, TrashError


@dataclass(slots=True, frozen=True)
class TrashedItem:
    # A file or directory in the trash, identified by its trash name.

    trash_name: str
    original_path: Path
    deletion_time: datetime
    size: int | None = None

    @property
    def content_missing(self) -> bool:
        # True when the metadata record has no matching content in files/.
        return self.size is None

    def sort_key(self) -> tuple[datetime, str]:
        # Ordering used to pick the most recent version of a path.
        return (self.deletion_time, self.trash_name)


@dataclass(slots=True, frozen=True)
class BrokenEntry:
    # A metadata record that could not be read; listed instead of raising.

    trash_name: str
    error: TrashError


@dataclass(slots=True)
class EmptyReport:
    # Outcome of emptying the trash.

    removed: int = 0
    failures: list[EmptyPartialFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


TrashEntry = TrashedItem | BrokenEntry

__all__ = ["BrokenEntry", "EmptyReport", "TrashEntry", "TrashedItem"]
