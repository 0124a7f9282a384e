# Filename: errors.py
# Author: Rich Lewis @RichLewis007
# Description: Exception hierarchy for trash operations. Every failure raised by the trash
#              core derives from TrashError so callers can report it per item.

from __future__ import annotations

from pathlib import Path


class TrashError(Exception):
    """Base class for all trash failures."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


# ----------------------------------------------------------------------
# Setup failures: nothing can proceed without a trash location.


class UnresolvableHome(TrashError):
    pass


class DirectoryCreateFailed(TrashError):
    pass


# ----------------------------------------------------------------------
# Metadata store


class MetadataWriteFailed(TrashError):
    pass


class TrashNameTaken(MetadataWriteFailed):
    # Another record already uses the requested trash name.
    pass


class MetadataReadFailed(TrashError):
    pass


class MalformedMetadata(TrashError):
    pass


class MalformedTimestamp(MalformedMetadata):
    pass


class MetadataRemoveFailed(TrashError):
    pass


# ----------------------------------------------------------------------
# Engine operations


class PutFailed(TrashError):
    pass


class NoSuchTrashedFile(TrashError):
    pass


class RestoreTargetExists(TrashError):
    pass


class RestoreTargetUnavailable(TrashError):
    pass


class RestoreFailed(TrashError):
    pass


class EmptyPartialFailure(TrashError):
    """Failure to fully remove one trashed item while emptying the trash."""

    def __init__(self, message: str, *, trash_name: str, path: Path | None = None) -> None:
        super().__init__(message, path=path)
        self.trash_name = trash_name


__all__ = [
    "DirectoryCreateFailed",
    "EmptyPartialFailure",
    "MalformedMetadata",
    "MalformedTimestamp",
    "MetadataReadFailed",
    "MetadataRemoveFailed",
    "MetadataWriteFailed",
    "NoSuchTrashedFile",
    "PutFailed",
    "RestoreFailed",
    "RestoreTargetExists",
    "RestoreTargetUnavailable",
    "TrashError",
    "TrashNameTaken",
    "UnresolvableHome",
]
