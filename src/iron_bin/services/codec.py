# Filename: codec.py
# Author: Rich Lewis @RichLewis007
# Description: Encoding helpers for .trashinfo values. Percent-encodes original paths and
#              renders/parses deletion dates in the fixed YYYY-MM-DDThh:mm:ss form.

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Final
from urllib.parse import quote, unquote

from .errors import MalformedMetadata, MalformedTimestamp

TIME_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S"
_TIME_LENGTH: Final[int] = len("YYYY-MM-DDThh:mm:ss")


def encode_path(path: Path | str) -> str:
    """Return ``path`` percent-encoded for a ``Path=`` entry.

    Only ASCII letters, digits and ``-._~`` are kept literal; every other byte of
    the UTF-8 encoding (including ``/`` and ``%``) is written as ``%XX``.
    """
    return quote(str(path), safe="", encoding="utf-8", errors="strict")


def decode_path(text: str) -> Path:
    # Inverse of encode_path.
    try:
        return Path(unquote(text, encoding="utf-8", errors="strict"))
    except UnicodeDecodeError as exc:
        raise MalformedMetadata(f"invalid path: {text}") from exc


def format_time(instant: datetime) -> str:
    # Render a deletion instant with second precision.
    return instant.strftime(TIME_FORMAT)


def parse_time(text: str) -> datetime:
    # Parse a DeletionDate value, rejecting anything but the exact fixed-width form.
    value = text.strip()
    if len(value) != _TIME_LENGTH:
        raise MalformedTimestamp(f"invalid deletion date: {text}")
    try:
        return datetime.strptime(value, TIME_FORMAT)
    except ValueError as exc:
        raise MalformedTimestamp(f"invalid deletion date: {text}") from exc


def is_utf8_path(path: Path | str) -> bool:
    # Return whether ``path`` can be represented as UTF-8 text.
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


__all__ = ["TIME_FORMAT", "decode_path", "encode_path", "format_time", "is_utf8_path", "parse_time"]
