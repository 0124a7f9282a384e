# Filename: trashinfo.py
# Author: Rich Lewis @RichLewis007
# Description: Metadata store for the trash. Reads, writes, enumerates and removes the
#              .trashinfo records that map a trash name to its original path and deletion date.

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Final

from iron_bin.models.trash_item import TrashedItem

from .codec import decode_path, encode_path, format_time, parse_time
from .errors import (
    MalformedMetadata,
    MetadataReadFailed,
    MetadataRemoveFailed,
    MetadataWriteFailed,
    TrashNameTaken,
)
from .location import TrashLocation

logger = logging.getLogger(__name__)

TRASHINFO_SUFFIX: Final[str] = ".trashinfo"
HEADER: Final[str] = "[Trash Info]"
_PATH_KEY: Final[str] = "Path"
_DELETION_DATE_KEY: Final[str] = "DeletionDate"


def record_path(location: TrashLocation, trash_name: str) -> Path:
    # Return the path of the record for ``trash_name``.
    return location.info_dir / f"{trash_name}{TRASHINFO_SUFFIX}"


def render(original_path: Path, deletion_time: datetime) -> str:
    # Return the text of a .trashinfo record.
    return (
        f"{HEADER}\n"
        f"{_PATH_KEY}={encode_path(original_path)}\n"
        f"{_DELETION_DATE_KEY}={format_time(deletion_time)}\n"
    )


def parse(text: str) -> tuple[Path, datetime]:
    """Parse the text of a .trashinfo record.

    The first line that is not blank or a comment must be the ``[Trash Info]``
    header. Only keys inside that group are considered, and when a key repeats
    the first occurrence wins.
    """
    values: dict[str, str] = {}
    in_group = False
    seen_header = False

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and line.endswith("]"):
            if not seen_header and line != HEADER:
                raise MalformedMetadata(f"missing {HEADER} header")
            seen_header = True
            in_group = line == HEADER
            continue
        if not seen_header:
            raise MalformedMetadata(f"missing {HEADER} header")
        if not in_group or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values.setdefault(key.strip(), value.strip())

    if not seen_header:
        raise MalformedMetadata(f"missing {HEADER} header")
    for key in (_PATH_KEY, _DELETION_DATE_KEY):
        if key not in values:
            raise MalformedMetadata(f"missing entry: {key}")

    original_path = decode_path(values[_PATH_KEY])
    if not original_path.is_absolute():
        raise MalformedMetadata(f"path is not absolute: {original_path}")
    return original_path, parse_time(values[_DELETION_DATE_KEY])


def write(location: TrashLocation, trash_name: str, item: TrashedItem) -> Path:
    """Create the record for ``trash_name`` and return its path.

    The record is created exclusively: if one already exists, TrashNameTaken
    is raised and the existing record is left alone.
    """
    path = record_path(location, trash_name)
    content = render(item.original_path, item.deletion_time)
    try:
        handle = path.open("x", encoding="utf-8")
    except FileExistsError as exc:
        raise TrashNameTaken(f"trash name already in use: {trash_name}", path=path) from exc
    except OSError as exc:
        raise MetadataWriteFailed(f"cannot create trashinfo file {path}", path=path) from exc

    try:
        with handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as exc:
        _discard(path)
        raise MetadataWriteFailed(f"cannot write trashinfo file {path}", path=path) from exc

    logger.debug("Wrote trashinfo record %s", path)
    return path


def read(location: TrashLocation, trash_name: str) -> TrashedItem:
    # Load the record for ``trash_name``; the returned item carries no size.
    path = record_path(location, trash_name)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedMetadata(f"trashinfo file is not UTF-8: {path}", path=path) from exc
    except OSError as exc:
        raise MetadataReadFailed(f"cannot read trashinfo file {path}", path=path) from exc

    try:
        original_path, deletion_time = parse(text)
    except MalformedMetadata as exc:
        exc.path = path
        raise
    return TrashedItem(
        trash_name=trash_name,
        original_path=original_path,
        deletion_time=deletion_time,
    )


def list(location: TrashLocation) -> Iterator[str]:  # noqa: A001
    """Yield the trash names of the records present in the info directory.

    The directory is scanned once when iteration starts; an absent directory
    yields nothing.
    """
    try:
        scanner = os.scandir(location.info_dir)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise MetadataReadFailed(
            f"cannot read trash info directory {location.info_dir}",
            path=location.info_dir,
        ) from exc

    with scanner:
        for entry in scanner:
            name = entry.name
            if not name.endswith(TRASHINFO_SUFFIX) or len(name) == len(TRASHINFO_SUFFIX):
                continue
            try:
                is_file = entry.is_file(follow_symlinks=False)
            except OSError:
                is_file = False
            if not is_file:
                logger.debug("Skipping non-file entry %s in info directory", name)
                continue
            yield name[: -len(TRASHINFO_SUFFIX)]


def remove(location: TrashLocation, trash_name: str) -> None:
    # Delete the record for ``trash_name``.
    path = record_path(location, trash_name)
    try:
        path.unlink()
    except FileNotFoundError as exc:
        raise MetadataRemoveFailed(f"no trashinfo file {path}", path=path) from exc
    except OSError as exc:
        raise MetadataRemoveFailed(f"cannot remove trashinfo file {path}", path=path) from exc
    logger.debug("Removed trashinfo record %s", path)


def mtime(location: TrashLocation, trash_name: str) -> int | None:
    # Return the whole-second mtime of the record, or None if it cannot be read.
    try:
        return int(record_path(location, trash_name).stat().st_mtime)
    except OSError:
        return None


def _discard(path: Path) -> None:
    # Remove a partially written record.
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Cannot remove partial trashinfo file %s: %s", path, exc)


__all__ = [
    "HEADER",
    "TRASHINFO_SUFFIX",
    "list",
    "mtime",
    "parse",
    "read",
    "record_path",
    "remove",
    "render",
    "write",
]
