# Filename: location.py
# Author: Rich Lewis @RichLewis007
# Description: Home trash location resolver. Computes the files/ and info/ directories of
#              the Freedesktop home trash and creates them with owner-only permissions.

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from platformdirs.unix import Unix

from .config import TRASH_DIR_NAME
from .errors import DirectoryCreateFailed, UnresolvableHome

logger = logging.getLogger(__name__)

FILES_DIR_NAME = "files"
INFO_DIR_NAME = "info"
DIRECTORYSIZES_NAME = "directorysizes"

_DIR_MODE = 0o700


@dataclass(slots=True, frozen=True)
class TrashLocation:
    # Resolved directories of one trash, plus the filesystem they live on.

    root: Path
    files_dir: Path
    info_dir: Path
    directorysizes: Path
    device: int | None = None

    @classmethod
    def at(cls, root: Path, *, device: int | None = None) -> TrashLocation:
        # Derive the trash layout below ``root``.
        return cls(
            root=root,
            files_dir=root / FILES_DIR_NAME,
            info_dir=root / INFO_DIR_NAME,
            directorysizes=root / DIRECTORYSIZES_NAME,
            device=device,
        )

    def exists(self) -> bool:
        return self.files_dir.is_dir() and self.info_dir.is_dir()


def default_trash_root() -> Path:
    """Return the home trash directory, ``$XDG_DATA_HOME/Trash``.

    Falls back to ``~/.local/share/Trash`` when ``XDG_DATA_HOME`` is unset.
    Raises UnresolvableHome if neither can be determined.
    """
    if not os.environ.get("XDG_DATA_HOME", "").strip():
        try:
            Path.home()
        except RuntimeError as exc:
            raise UnresolvableHome("cannot determine the home directory") from exc
    data_home = Path(Unix().user_data_dir)
    if not data_home.is_absolute():
        raise UnresolvableHome(f"data directory is not absolute: {data_home}", path=data_home)
    return data_home / TRASH_DIR_NAME


def resolve(root: Path | None = None, *, create: bool = True) -> TrashLocation:
    """Resolve the trash at ``root`` (the home trash by default).

    With ``create`` the root and its ``files``/``info`` subdirectories are
    created when missing. Existing directories are checked, never modified.
    """
    base = root if root is not None else default_trash_root()
    base = Path(os.path.abspath(base))
    location = TrashLocation.at(base)

    if not create:
        return location

    _ensure_dir(location.root, parents=True)
    for directory in (location.files_dir, location.info_dir):
        _ensure_dir(directory)

    try:
        device = location.root.stat().st_dev
    except OSError as exc:
        raise DirectoryCreateFailed(f"cannot stat trash directory {base}", path=base) from exc
    return TrashLocation.at(base, device=device)


def _ensure_dir(directory: Path, *, parents: bool = False) -> None:
    # Create ``directory`` with owner-only permissions, or check an existing one.
    try:
        directory.mkdir(mode=_DIR_MODE, parents=parents)
    except FileExistsError:
        _check_existing(directory)
    except OSError as exc:
        raise DirectoryCreateFailed(
            f"cannot create trash directory at {directory}", path=directory
        ) from exc
    else:
        logger.info("Created trash directory %s", directory)


def _check_existing(directory: Path) -> None:
    try:
        info = directory.stat()
    except OSError as exc:
        raise DirectoryCreateFailed(
            f"cannot access trash directory {directory}", path=directory
        ) from exc
    if not stat.S_ISDIR(info.st_mode):
        raise DirectoryCreateFailed(f"not a directory: {directory}", path=directory)
    if not os.access(directory, os.W_OK | os.X_OK):
        raise DirectoryCreateFailed(f"trash directory is not writable: {directory}", path=directory)
    if stat.S_IMODE(info.st_mode) & 0o077:
        logger.warning(
            "Trash directory %s is accessible to other users (mode %o)",
            directory,
            stat.S_IMODE(info.st_mode),
        )


__all__ = ["TrashLocation", "default_trash_root", "resolve"]
