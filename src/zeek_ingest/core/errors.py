"""Exception types raised by the walk and the record decoders."""

from __future__ import annotations

from collections.abc import Sequence

from .models import WalkError, WalkErrorKind


class ZeekIngestError(Exception):
    """Base class for errors raised by this package."""


class FileClassificationError(ZeekIngestError):
    """A filename could not be classified. Recorded as a WalkError, never fatal."""

    kind: WalkErrorKind

    def __init__(self, name: str, detail: str | None = None) -> None:
        self.name = name
        msg = f"{self.kind.value}: {name}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class IncompatibleFileExtension(FileClassificationError):
    kind = WalkErrorKind.INCOMPATIBLE_FILE_EXTENSION


class InvalidLogType(FileClassificationError):
    kind = WalkErrorKind.INVALID_LOG_TYPE


class InvalidLogHourFormat(FileClassificationError):
    kind = WalkErrorKind.INVALID_LOG_HOUR_FORMAT


class InvalidLogHourRange(FileClassificationError):
    kind = WalkErrorKind.INVALID_LOG_HOUR_RANGE


class WalkFailed(ZeekIngestError):
    """The walk produced no usable manifest."""

    def __init__(self, message: str, walk_errors: Sequence[WalkError] = ()) -> None:
        super().__init__(message)
        self.walk_errors = list(walk_errors)


class DirIsEmpty(WalkFailed):
    """The root holds no regular files at all."""


class NoValidFilesFound(WalkFailed):
    """Files exist under the root but none could be placed in the manifest."""


class InvalidZeekTimestamp(ZeekIngestError):
    """A timestamp value is not an epoch number or an RFC-3339 string."""


class InvalidZeekRecord(ZeekIngestError):
    """A log line could not be decoded into a record."""


class InvalidDatabaseName(ZeekIngestError, ValueError):
    """Destination database name is not allowed."""
