# Filename: config.py
# Author: Rich Lewis @RichLewis007
# Description: Configuration helpers for the trash tool. Holds application constants and
#              reads environment-driven settings such as the console log level.

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "iron-bin"
ORG_NAME = "Rich Lewis"

# Name of the home trash directory inside the XDG data home.
TRASH_DIR_NAME = "Trash"

ENV_LOG_LEVEL = "IRON_BIN_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DEFAULT_LOG_LEVEL = "WARNING"


def ensure_app_dirs() -> Path:
    # Ensure the log directory exists and return it.
    dirs = PlatformDirs(appname=APP_NAME, appauthor=ORG_NAME)
    log_path = Path(dirs.user_log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    return log_path


@dataclass(slots=True, frozen=True)
class Settings:
    # Runtime settings resolved from the environment.

    log_level: str = _DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        # Build settings from ``environ`` (defaults to os.environ).
        env = os.environ if environ is None else environ
        level = env.get(ENV_LOG_LEVEL, "").strip().upper()
        if level not in LOG_LEVELS:
            level = _DEFAULT_LOG_LEVEL
        return cls(log_level=level)
