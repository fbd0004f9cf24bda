"""Classifier tables and runtime settings."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from .models import LogExtension, LogKind

MAX_WORKERS_ENV = "ZEEK_INGEST_MAX_WORKERS"
LOG_LEVEL_ENV = "ZEEK_INGEST_LOG_LEVEL"


@dataclass(frozen=True)
class ClassifierConfig:
    """Lookup tables used to classify filenames and group directories."""

    kinds: Mapping[str, LogKind]
    extensions: tuple[LogExtension, ...]
    # Zeek logs whose names start with a known kind but are a different log.
    excluded_tokens: frozenset[str] = frozenset()
    day_dir_pattern: re.Pattern[str] = re.compile(r"^\d{4}-\d{2}-\d{2}$")
    # kind -> kind that must share its hour bucket
    dependencies: Mapping[LogKind, LogKind] = field(default_factory=dict)

    def kind_tokens(self) -> list[str]:
        """Kind tokens, longest first so open_conn is tried before conn."""
        return sorted(self.kinds, key=len, reverse=True)

    def is_day_dir(self, name: str) -> bool:
        return bool(self.day_dir_pattern.match(name))


def default_classifier_config() -> ClassifierConfig:
    """Default kind and extension tables."""
    return ClassifierConfig(
        kinds={kind.value: kind for kind in LogKind},
        extensions=(LogExtension.GZIP, LogExtension.PLAIN),
        excluded_tokens=frozenset({"conn_summary", "conn-summary"}),
        dependencies={
            LogKind.HTTP: LogKind.CONN,
            LogKind.SSL: LogKind.CONN,
            LogKind.OPEN_HTTP: LogKind.OPEN_CONN,
            LogKind.OPEN_SSL: LogKind.OPEN_CONN,
        },
    )


def resolve_max_workers(max_workers: int | None) -> int:
    """Worker count for import runs.

    An explicit value wins, then ZEEK_INGEST_MAX_WORKERS, then min(32, CPUs).
    Raises ValueError for values below 1 or a non-integer env value.
    """
    if max_workers is not None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        return max_workers

    env = os.getenv(MAX_WORKERS_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_WORKERS_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_WORKERS_ENV} must be >= 1")
        return value

    cpu_count = os.cpu_count() or 1
    return min(32, cpu_count)


def configure_logging() -> None:
    """Configure a reasonable default logging setup on stderr."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
