"""Collapse logical duplicates (same rotation, before and after compression)."""

from __future__ import annotations

import logging

from .classifier import split_extension
from .errors import IncompatibleFileExtension
from .models import LogExtension, LogFile, WalkError, WalkErrorKind

logger = logging.getLogger(__name__)


def base_path(path: str, extensions: tuple[LogExtension, ...] = (LogExtension.GZIP, LogExtension.PLAIN)) -> str:
    """Path with the final .log / .log.gz extension removed."""
    try:
        stem, _ = split_extension(path, extensions)
    except IncompatibleFileExtension:
        return path
    return stem


class DuplicateResolver:
    """Keep the most recently modified file per base path.

    Scoped to a single walk; files must be offered in walk order. A strictly
    newer file replaces the kept one. On equal modification times the file
    offered first stays.
    """

    def __init__(self, extensions: tuple[LogExtension, ...] = (LogExtension.GZIP, LogExtension.PLAIN)) -> None:
        self._extensions = extensions
        self._offered = 0
        # base path -> (offer position, kept file)
        self._kept: dict[str, tuple[int, LogFile]] = {}

    def offer(self, log_file: LogFile) -> WalkError | None:
        """Register a file; return a WalkError for whichever file lost, if any."""
        idx = self._offered
        self._offered += 1

        key = base_path(log_file.path, self._extensions)
        prev = self._kept.get(key)
        if prev is None:
            self._kept[key] = (idx, log_file)
            return None

        current = prev[1]
        if log_file.mtime > current.mtime:
            self._kept[key] = (idx, log_file)
            loser = current
        else:
            loser = log_file

        logger.debug("Skipping duplicate log %s", loser.path)
        return WalkError(path=loser.path, error=WalkErrorKind.SKIPPED_DUPLICATE_LOG)

    def survivors(self) -> list[LogFile]:
        """Kept files, in the order they were offered."""
        return [f for _, f in sorted(self._kept.values(), key=lambda kept: kept[0])]
