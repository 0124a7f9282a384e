# Filename: logger.py
# Author: Rich Lewis @RichLewis007
# Description: Logging configuration utilities. Sets up rotating file and console handlers
#              so trash operations are recorded while the terminal output stays clean.

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .config import ensure_app_dirs


def _get_log_path() -> Path:
    # Return the path to the rotating log file, creating folders as needed.
    return ensure_app_dirs() / "trash.log"


def configure(*, log_level: str = "WARNING", log_file: bool = True) -> None:
    # Configure root logger with rotating file and console handlers.
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []
    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                _get_log_path(),
                maxBytes=2 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        except OSError as exc:
            # The log directory may live on a read-only home; keep console logging.
            logging.getLogger(__name__).debug("File logging disabled: %s", exc)
        else:
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.DEBUG)
            handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("trash: %(levelname)s: %(message)s"))
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    handlers.append(console_handler)

    # Avoid duplicate handlers when reconfiguring.
    for handler in _installed:
        handler.close()
    _installed[:] = handlers
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)


_installed: list[logging.Handler] = []
