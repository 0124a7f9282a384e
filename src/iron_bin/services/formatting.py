# Filename: formatting.py
# Author: Rich Lewis @RichLewis007
# Description: Formatting helpers for user-facing values. Renders byte counts, deletion
#              times and shell-safe paths for the ls-like trash listing.

from __future__ import annotations

import shlex
from datetime import datetime
from pathlib import Path
from typing import Final

_SIZE_UNITS: Final[tuple[str, ...]] = ("B", "kB", "MB", "GB", "TB", "PB", "EB")


def format_bytes(
    num_bytes: int | float | None,
    *,
    empty: str = "?",
    decimals: int = 1,
    space: bool = False,
) -> str:
    """Return a human-friendly string for a byte count.

    Uses decimal multiples (powers of 1000), like ``ls -lh --si``. Whole bytes
    are printed without decimals, e.g. ``512B``, ``1.5kB``.
    """
    if num_bytes is None:
        return empty

    value = float(max(num_bytes, 0))
    decimals = max(decimals, 0)
    sep = " " if space else ""

    if value < 1000:
        return f"{int(value)}{sep}{_SIZE_UNITS[0]}"

    for unit in _SIZE_UNITS[1:]:
        value /= 1000
        if value < 1000 or unit == _SIZE_UNITS[-1]:
            return f"{value:.{decimals}f}{sep}{unit}"

    # Fallback; loop always returns before reaching this line.
    return f"{value:.{decimals}f}{sep}{_SIZE_UNITS[-1]}"


def format_size(num_bytes: int | None, *, human_readable: bool = False) -> str:
    # Return the size column of a listing; unknown sizes are shown as "?".
    if num_bytes is None:
        return "?"
    if human_readable:
        return format_bytes(num_bytes)
    return str(num_bytes)


def format_datetime(instant: datetime) -> str:
    # Locale-style date and time, like ``date``.
    return instant.strftime("%c")


def format_path(path: Path, *, quote: bool) -> str:
    # Shell-quote ``path`` when writing to a terminal.
    text = str(path)
    return shlex.quote(text) if quote else text


__all__ = ["format_bytes", "format_datetime", "format_path", "format_size"]
