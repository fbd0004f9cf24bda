"""Core data models for log discovery."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

HOURS_PER_DAY = 24


class LogKind(str, Enum):
    """Log kinds accepted for import."""

    CONN = "conn"
    OPEN_CONN = "open_conn"
    DNS = "dns"
    HTTP = "http"
    OPEN_HTTP = "open_http"
    SSL = "ssl"
    OPEN_SSL = "open_ssl"


class LogExtension(str, Enum):
    """Plain or gzip-compressed log file."""

    PLAIN = ".log"
    GZIP = ".log.gz"


class WalkErrorKind(str, Enum):
    """Reasons a file was left out of the manifest."""

    INCOMPATIBLE_FILE_EXTENSION = "incompatible_file_extension"
    INVALID_LOG_TYPE = "invalid_log_type"
    INVALID_LOG_HOUR_FORMAT = "invalid_log_hour_format"
    INVALID_LOG_HOUR_RANGE = "invalid_log_hour_range"
    INSUFFICIENT_READ_PERMISSIONS = "insufficient_read_permissions"
    SKIPPED_DUPLICATE_LOG = "skipped_duplicate_log"
    MISSING_CONN_LOG = "missing_conn_log"
    MISSING_OPEN_CONN_LOG = "missing_open_conn_log"
    UNREADABLE_FILE = "unreadable_file"


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of parsing one log filename."""

    kind: LogKind
    hour: int
    extension: LogExtension
    color: str | None = None  # sensor tag, not used for grouping


@dataclass(frozen=True, slots=True)
class LogFile:
    """A regular file seen during a walk."""

    path: str
    name: str
    mtime: float
    size: int


@dataclass(frozen=True, slots=True)
class WalkError:
    """Per-file diagnostic; the walk continues after one is recorded."""

    path: str
    error: WalkErrorKind


HourBucket = dict[LogKind, list[str]]
DayBucket = list[HourBucket | None]


def empty_day() -> DayBucket:
    return [None] * HOURS_PER_DAY


@dataclass(slots=True)
class Manifest:
    """Ordered day buckets, each holding 24 hour buckets.

    Day indices follow the order day groupings were first seen during the walk.
    They are correlation keys, not calendar dates.
    """

    days: list[DayBucket] = field(default_factory=list)

    def non_empty_hours(self) -> Iterator[tuple[int, int, HourBucket]]:
        """Yield (day, hour, bucket) for every populated hour, in order."""
        for day_idx, day in enumerate(self.days):
            for hour, bucket in enumerate(day):
                if bucket:
                    yield day_idx, hour, bucket

    def paths(self) -> list[str]:
        return [p for _, _, bucket in self.non_empty_hours() for paths in bucket.values() for p in paths]

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view (only populated hours are listed)."""
        days: list[dict[str, Any]] = []
        for day_idx, day in enumerate(self.days):
            hours = {
                str(hour): {kind.value: list(paths) for kind, paths in bucket.items()}
                for hour, bucket in enumerate(day)
                if bucket
            }
            days.append({"day": day_idx, "hours": hours})
        return {"days": days}


@dataclass(frozen=True, slots=True)
class WalkResult:
    """Manifest plus the diagnostics for every file left out of it."""

    manifest: Manifest
    walk_errors: list[WalkError]
