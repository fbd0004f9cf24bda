"""Assemble classified files into the day x hour manifest."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .config import ClassifierConfig, default_classifier_config
from .errors import NoValidFilesFound
from .models import Classification, DayBucket, LogKind, Manifest, WalkError, WalkErrorKind, empty_day

logger = logging.getLogger(__name__)

_MISSING_LOG_ERRORS = {
    LogKind.CONN: WalkErrorKind.MISSING_CONN_LOG,
    LogKind.OPEN_CONN: WalkErrorKind.MISSING_OPEN_CONN_LOG,
}


class ManifestBuilder:
    """Place (path, classification) pairs into day and hour buckets.

    The day grouping of a file is its parent lineage relative to the walk root,
    cut after the deepest day directory. Sensor and hour subdirectories below
    a day directory (or with no day directory above them) do not start a new
    grouping. Day indices are handed out in first-seen order.
    """

    def __init__(self, base_dir: str | Path, config: ClassifierConfig | None = None) -> None:
        self._base_dir = Path(base_dir)
        self._config = config or default_classifier_config()
        self._day_index: dict[tuple[str, ...], int] = {}
        self._days: list[DayBucket] = []
        self.pruned: list[WalkError] = []

    def day_key(self, path: str | Path) -> tuple[str, ...]:
        try:
            parts = Path(path).parent.relative_to(self._base_dir).parts
        except ValueError:
            return ()

        last_day = -1
        for i, part in enumerate(parts):
            if self._config.is_day_dir(part):
                last_day = i
        return tuple(parts[: last_day + 1])

    def add(self, path: str, classification: Classification) -> None:
        key = self.day_key(path)
        idx = self._day_index.get(key)
        if idx is None:
            idx = len(self._days)
            self._day_index[key] = idx
            self._days.append(empty_day())
            logger.debug("Day grouping %d: %s", idx, "/".join(key) or ".")

        day = self._days[idx]
        bucket = day[classification.hour]
        if bucket is None:
            bucket = {}
            day[classification.hour] = bucket
        bucket.setdefault(classification.kind, []).append(path)

    def prune_orphans(self) -> list[WalkError]:
        """Drop kinds whose required log is missing from the same hour bucket.

        http and ssl need a conn log, open_http and open_ssl an open_conn log.
        Returns one WalkError per dropped file. Calling it again is a no-op.
        """
        pruned: list[WalkError] = []
        for day in self._days:
            for hour, bucket in enumerate(day):
                if not bucket:
                    continue
                for kind in list(bucket):
                    required = self._config.dependencies.get(kind)
                    if required is None or required in bucket:
                        continue
                    error = _MISSING_LOG_ERRORS.get(required, WalkErrorKind.MISSING_CONN_LOG)
                    for path in bucket.pop(kind):
                        logger.debug("Dropping %s: no %s log in its hour", path, required.value)
                        pruned.append(WalkError(path=path, error=error))
                if not bucket:
                    day[hour] = None
        return pruned

    def build(self, walk_errors: Sequence[WalkError] = ()) -> Manifest:
        """Return the manifest or raise NoValidFilesFound if it holds nothing.

        Orphaned kinds are pruned first; the dropped files are kept in
        ``self.pruned`` and reported with the other walk errors on failure.
        """
        self.pruned.extend(self.prune_orphans())
        manifest = Manifest(days=self._days)
        if next(manifest.non_empty_hours(), None) is None:
            raise NoValidFilesFound("no valid log files found", [*walk_errors, *self.pruned])
        return manifest
