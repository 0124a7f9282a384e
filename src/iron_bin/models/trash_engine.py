# Filename: trash_engine.py
# Author: Rich Lewis @RichLewis007
# Description: Trash engine implementing put, list, restore and empty on the home trash.
#              Keeps files/ and info/ in lock-step and picks the most recent version on restore.

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from collections.abc import Iterator, Sequence
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from iron_bin.services import dir_sizes, trashinfo
from iron_bin.services.codec import is_utf8_path
from iron_bin.services.errors import (
    EmptyPartialFailure,
    MetadataRemoveFailed,
    NoSuchTrashedFile,
    PutFailed,
    RestoreFailed,
    RestoreTargetExists,
    RestoreTargetUnavailable,
    TrashError,
    TrashNameTaken,
)
from iron_bin.services.location import TrashLocation, resolve

from .trash_item import BrokenEntry, EmptyReport, TrashedItem, TrashEntry

logger = logging.getLogger(__name__)


class TrashEngine:
    """Operations on one trash directory (the home trash by default).

    The location is resolved again for every operation; the directories on
    disk are the only shared state, and exclusive creation of the metadata
    record is what keeps concurrent puts from picking the same trash name.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root

    def location(self, *, create: bool = False) -> TrashLocation:
        return resolve(self._root, create=create)

    # ------------------------------------------------------------------
    # Put

    def put(self, source_path: Path | str) -> TrashedItem:
        """Move ``source_path`` into the trash and return the new item.

        The metadata record is written before the content is moved, so an
        interruption can only leave a record without content, never content
        without a record.
        """
        source = _absolute(Path(source_path))
        if not is_utf8_path(source):
            display = str(source).encode("utf-8", "replace").decode()
            raise PutFailed(f"cannot trash {display}: path is not valid UTF-8", path=source)
        if source.name in ("", ".", ".."):
            raise PutFailed(f"cannot trash {source}: path has no file name", path=source)
        try:
            source_info = source.lstat()
        except OSError as exc:
            raise PutFailed(f"cannot trash {source}: {_reason(exc)}", path=source) from exc

        location = resolve(self._root, create=True)
        self._check_source(source, source_info, location)

        item = TrashedItem(
            trash_name=source.name,
            original_path=source,
            deletion_time=datetime.now().replace(microsecond=0),
        )
        trash_name = self._claim_name(location, item)
        item = replace(item, trash_name=trash_name)

        content = location.files_dir / trash_name
        try:
            os.rename(source, content)
        except OSError as exc:
            self._rollback(location, trash_name, exc)
            raise PutFailed(f"cannot trash {source}: {_reason(exc)}", path=source) from exc

        logger.info("Trashed %s as %s", source, trash_name)
        return replace(item, size=_ContentSizer(location).size(trash_name))

    def _check_source(
        self, source: Path, source_info: os.stat_result, location: TrashLocation
    ) -> None:
        # Refuse sources that overlap the trash or live on another filesystem.
        root = location.root.resolve()
        if source == root or root in source.parents or source in root.parents:
            raise PutFailed(
                f"cannot trash {source}: it contains or is inside the trash", path=source
            )
        if location.device is not None and source_info.st_dev != location.device:
            cause = OSError(errno.EXDEV, os.strerror(errno.EXDEV), str(source))
            raise PutFailed(
                f"cannot trash {source}: not on the same filesystem as {location.root}",
                path=source,
            ) from cause

    def _claim_name(self, location: TrashLocation, item: TrashedItem) -> str:
        # Create the metadata record under the first free candidate name.
        for candidate in _candidate_names(location, item.trash_name):
            try:
                trashinfo.write(location, candidate, item)
            except TrashNameTaken:
                # Lost a race with another process; try the next name.
                logger.debug("Trash name %s taken, trying the next one", candidate)
                continue
            return candidate
        raise AssertionError("unreachable")  # pragma: no cover

    def _rollback(self, location: TrashLocation, trash_name: str, cause: OSError) -> None:
        try:
            trashinfo.remove(location, trash_name)
        except MetadataRemoveFailed as exc:
            logger.error(
                "Move into trash failed (%s) and record %s could not be removed: %s",
                cause,
                trash_name,
                exc,
            )

    # ------------------------------------------------------------------
    # List

    def list(self) -> Iterator[TrashEntry]:
        """Yield every entry of the trash, in no particular order.

        Records that cannot be read are yielded as BrokenEntry; items whose
        content is missing have ``size`` set to None.
        """
        location = resolve(self._root, create=False)
        sizer = _ContentSizer(location)
        for trash_name in trashinfo.list(location):
            try:
                item = trashinfo.read(location, trash_name)
            except TrashError as exc:
                logger.warning("Unreadable trash entry %s: %s", trash_name, exc)
                yield BrokenEntry(trash_name=trash_name, error=exc)
                continue
            size = sizer.size(trash_name)
            if size is None:
                logger.warning("Content of trash entry %s is missing", trash_name)
            yield replace(item, size=size)

    def items(self) -> Sequence[TrashedItem]:
        # Return the readable entries of the trash.
        return [entry for entry in self.list() if isinstance(entry, TrashedItem)]

    def find(self, original_path: Path | str) -> Sequence[TrashedItem]:
        # Return the items that were trashed from ``original_path``.
        target = _absolute(Path(original_path))
        return [item for item in self.items() if item.original_path == target]

    def latest(self) -> TrashedItem:
        # Return the most recently trashed item that still has content.
        candidates = [item for item in self.items() if not item.content_missing]
        if not candidates:
            raise NoSuchTrashedFile("empty trash")
        return max(candidates, key=TrashedItem.sort_key)

    # ------------------------------------------------------------------
    # Restore

    def restore(self, original_path: Path | str) -> TrashedItem:
        """Restore the most recent version of ``original_path``.

        Ties on deletion time go to the greatest trash name.
        """
        target = _absolute(Path(original_path))
        candidates = [item for item in self.find(target) if not item.content_missing]
        if not candidates:
            raise NoSuchTrashedFile(f"file {target} not found in trash", path=target)
        return self.restore_item(max(candidates, key=TrashedItem.sort_key))

    def restore_item(self, item: TrashedItem) -> TrashedItem:
        """Move ``item`` back to its original path, then drop its record.

        The content is moved first so that a crash in between leaves a
        duplicate rather than losing the file.
        """
        location = resolve(self._root, create=False)
        target = item.original_path
        content = location.files_dir / item.trash_name

        if os.path.lexists(target):
            raise RestoreTargetExists(f"file {target} already exists", path=target)
        if not target.parent.is_dir():
            raise RestoreTargetUnavailable(
                f"cannot restore {target}: directory {target.parent} does not exist",
                path=target,
            )
        if not os.path.lexists(content):
            raise NoSuchTrashedFile(
                f"content of {target} is missing from the trash ({item.trash_name})",
                path=target,
            )

        try:
            os.rename(content, target)
        except OSError as exc:
            raise RestoreFailed(
                f"cannot move {content} to {target}: {_reason(exc)}", path=target
            ) from exc

        try:
            trashinfo.remove(location, item.trash_name)
        except MetadataRemoveFailed:
            logger.error("Restored %s but its trash record %s remains", target, item.trash_name)
            raise

        logger.info("Restored %s from %s", target, item.trash_name)
        return item

    # ------------------------------------------------------------------
    # Empty

    def empty(self) -> EmptyReport:
        """Permanently delete everything in the trash.

        Per-item failures are collected in the report and never stop the
        remaining items from being removed.
        """
        location = resolve(self._root, create=False)
        report = EmptyReport()

        for trash_name in sorted(trashinfo.list(location)):
            content = location.files_dir / trash_name
            try:
                _remove_content(content)
            except OSError as exc:
                report.failures.append(_partial_failure(trash_name, content, exc))
                continue
            try:
                trashinfo.remove(location, trash_name)
            except MetadataRemoveFailed as exc:
                report.failures.append(
                    _partial_failure(trash_name, trashinfo.record_path(location, trash_name), exc)
                )
                continue
            report.removed += 1

        self._sweep_orphans(location, report)

        try:
            location.directorysizes.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Cannot remove %s: %s", location.directorysizes, exc)

        logger.info("Emptied trash: %d removed, %d failed", report.removed, len(report.failures))
        return report

    def _sweep_orphans(self, location: TrashLocation, report: EmptyReport) -> None:
        # Remove content left in files/ without a record.
        try:
            names = sorted(os.listdir(location.files_dir))
        except FileNotFoundError:
            return
        except OSError as exc:
            report.failures.append(_partial_failure("", location.files_dir, exc))
            return

        for name in names:
            if trashinfo.record_path(location, name).exists():
                continue
            content = location.files_dir / name
            logger.warning("Removing orphaned trash content %s", content)
            try:
                _remove_content(content)
            except OSError as exc:
                report.failures.append(_partial_failure(name, content, exc))


class _ContentSizer:
    # Measures trashed content, consulting the directorysizes cache for directories.

    def __init__(self, location: TrashLocation) -> None:
        self._location = location
        self._cache: dict[str, dir_sizes.DirSize] | None = None

    def size(self, trash_name: str) -> int | None:
        path = self._location.files_dir / trash_name
        try:
            info = path.lstat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot stat trashed content %s: %s", path, exc)
            return None

        if not stat.S_ISDIR(info.st_mode):
            return info.st_size

        cached = self._dir_sizes().get(trash_name)
        if cached is not None and cached.mtime == trashinfo.mtime(self._location, trash_name):
            return cached.size
        return dir_sizes.directory_size(path)

    def _dir_sizes(self) -> dict[str, dir_sizes.DirSize]:
        if self._cache is None:
            self._cache = dir_sizes.load(self._location.directorysizes)
        return self._cache


def _candidate_names(location: TrashLocation, base: str) -> Iterator[str]:
    # Yield base, base.1, base.2, ... skipping names already used in files/ or info/.
    number = 0
    while True:
        name = base if number == 0 else f"{base}.{number}"
        number += 1
        if os.path.lexists(location.files_dir / name):
            continue
        if os.path.lexists(trashinfo.record_path(location, name)):
            continue
        yield name


def _absolute(path: Path) -> Path:
    # Absolute, normalised path with symlinks resolved in the parent only.
    absolute = Path(os.path.abspath(path))
    if not absolute.name:
        return absolute
    return absolute.parent.resolve() / absolute.name


def _remove_content(path: Path) -> None:
    # Delete a trashed file or directory tree; missing content counts as removed.
    try:
        info = path.lstat()
    except FileNotFoundError:
        return
    if stat.S_ISDIR(info.st_mode):
        shutil.rmtree(path)
    else:
        path.unlink()


def _partial_failure(trash_name: str, path: Path, exc: Exception) -> EmptyPartialFailure:
    logger.warning("Cannot remove %s: %s", path, exc)
    failure = EmptyPartialFailure(f"cannot remove {path}: {exc}", trash_name=trash_name, path=path)
    failure.__cause__ = exc
    return failure


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


__all__ = ["TrashEngine"]
