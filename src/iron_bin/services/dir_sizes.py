# Filename: dir_sizes.py
# Author: Rich Lewis @RichLewis007
# Description: Reader for the trash "directorysizes" cache. Provides cached sizes of trashed
#              directories and a fallback that measures a directory tree on disk.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final
from urllib.parse import unquote

logger = logging.getLogger(__name__)

# Roughly 2100-01-01; larger mtimes were written in milliseconds by some file managers.
_MAX_SECONDS_MTIME: Final[int] = 4_200_000_000


@dataclass(slots=True, frozen=True)
class DirSize:
    # One cached entry: size in bytes and mtime of the matching .trashinfo file.

    name: str
    size: int
    mtime: int


def parse_line(line: str) -> DirSize | None:
    # Parse ``<size> <mtime> <percent-encoded name>``; return None for bad lines.
    fields = line.split()
    if len(fields) < 3:
        return None
    try:
        size = int(fields[0])
        mtime = int(fields[1])
        name = unquote(fields[2], errors="strict")
    except (ValueError, UnicodeDecodeError):
        return None
    if size < 0 or mtime < 0:
        return None
    if mtime > _MAX_SECONDS_MTIME:
        mtime //= 1000
    return DirSize(name=name, size=size, mtime=mtime)


def load(path: Path) -> dict[str, DirSize]:
    # Load the cache at ``path``; a missing or unreadable file gives an empty cache.
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable directorysizes file %s: %s", path, exc)
        return {}

    sizes: dict[str, DirSize] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        entry = parse_line(line)
        if entry is None:
            logger.debug("Skipping malformed directorysizes line %d: %r", lineno, raw_line)
            continue
        sizes[entry.name] = entry
    return sizes


def directory_size(path: Path) -> int:
    # Sum the sizes of every entry below ``path`` without following symlinks.
    total = 0
    for dirpath, dirnames, filenames in os.walk(path, followlinks=False):
        current = Path(dirpath)
        # Symlinks to directories show up in dirnames but are never descended into.
        links = [name for name in dirnames if (current / name).is_symlink()]
        for name in filenames + links:
            try:
                total += (current / name).lstat().st_size
            except OSError:
                logger.debug("Cannot stat %s while sizing %s", current / name, path)
    return total


__all__ = ["DirSize", "directory_size", "load", "parse_line"]
