"""Import metadata: which files went into which import, per database."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable

from .errors import InvalidDatabaseName

logger = logging.getLogger(__name__)

METADATABASE = "metadatabase"
RESERVED_DATABASE_NAMES = frozenset({"default", "system", "information_schema", METADATABASE})

_DB_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def validate_database_name(name: str) -> None:
    """Raise InvalidDatabaseName unless name is usable as a destination."""
    if name in RESERVED_DATABASE_NAMES:
        raise InvalidDatabaseName(f"database name is reserved: {name!r}")
    if "-" in name:
        raise InvalidDatabaseName(f"database name must not contain a hyphen: {name!r}")
    if name.endswith("_"):
        raise InvalidDatabaseName(f"database name must not end with an underscore: {name!r}")
    if not _DB_NAME_RE.match(name):
        raise InvalidDatabaseName(
            "database name must be lowercase letters, digits and underscores, "
            f"starting with a letter: {name!r}"
        )


class MetadataStore:
    """In-memory import metadata.

    Keeps the files recorded under each (import id, database) pair and the
    rolling flag of each database. The flag is set once, when the database
    is created, and only read afterwards.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files: dict[tuple[bytes, str], list[str]] = {}
        self._rolling: dict[str, bool] = {}

    def set_rolling(self, database: str, rolling: bool) -> None:
        validate_database_name(database)
        with self._lock:
            current = self._rolling.get(database)
            if current is not None and current != rolling:
                raise ValueError(f"rolling flag of {database!r} is already set to {current}")
            self._rolling[database] = rolling

    def is_rolling(self, database: str) -> bool:
        with self._lock:
            try:
                return self._rolling[database]
            except KeyError:
                raise KeyError(f"unknown database: {database!r}") from None

    def record_files(self, import_id: bytes, database: str, paths: Iterable[str]) -> None:
        with self._lock:
            self._files.setdefault((import_id, database), []).extend(paths)
        logger.debug("Recorded files for import %s in %s", import_id.hex(), database)

    def paths_for_import(self, import_id_hex: str, database: str) -> set[str]:
        """Paths recorded under a hex-encoded import id for one database."""
        import_id = bytes.fromhex(import_id_hex)
        with self._lock:
            return set(self._files.get((import_id, database), ()))
