"""Filename classification.

A log filename follows::

    kind ["_" color] ["." HH:MM:SS "-" HH:MM:SS] "." ("log" | "log.gz")

Parsing runs in three stages (extension, hour segment, kind token) and each
stage has its own failure type so diagnostics point at the part that is wrong.
"""

from __future__ import annotations

import re

from .config import ClassifierConfig, default_classifier_config
from .errors import IncompatibleFileExtension, InvalidLogHourFormat, InvalidLogHourRange, InvalidLogType
from .models import Classification, LogExtension, LogKind

_HOUR_SEGMENT_RE = re.compile(
    r"^(?P<h1>[0-9]{2}):(?P<m1>[0-9]{2}):(?P<s1>[0-9]{2})"
    r"-(?P<h2>[0-9]{2}):(?P<m2>[0-9]{2}):(?P<s2>[0-9]{2})$"
)


def split_extension(
    name: str,
    extensions: tuple[LogExtension, ...] = (LogExtension.GZIP, LogExtension.PLAIN),
) -> tuple[str, LogExtension]:
    """Return (stem, extension) or raise IncompatibleFileExtension."""
    # Longest suffix first: ".log.gz" must not be read as a ".gz" file.
    for ext in sorted(extensions, key=lambda e: len(e.value), reverse=True):
        if name.endswith(ext.value):
            return name[: -len(ext.value)], ext
    raise IncompatibleFileExtension(name)


def parse_hour_segment(segment: str, *, name: str | None = None) -> int:
    """Parse an HH:MM:SS-HH:MM:SS range and return the starting hour."""
    name = name or segment
    m = _HOUR_SEGMENT_RE.match(segment)
    if not m:
        raise InvalidLogHourFormat(name, f"bad hour segment {segment!r}")

    if int(m.group("m1")) > 59 or int(m.group("s1")) > 59 or int(m.group("m2")) > 59 or int(m.group("s2")) > 59:
        raise InvalidLogHourFormat(name, f"bad minutes or seconds in {segment!r}")

    start = int(m.group("h1"))
    end = int(m.group("h2"))
    if start > 23 or end > 23:
        raise InvalidLogHourRange(name, f"hour out of range in {segment!r}")
    return start


class FilenameClassifier:
    """Classify log filenames against a kind/extension table."""

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self.config = config or default_classifier_config()
        self._tokens = self.config.kind_tokens()

    def classify(self, name: str) -> Classification:
        """Classify a bare filename (no directories).

        Raises a FileClassificationError subclass when the name is rejected.
        """
        stem, extension = split_extension(name, self.config.extensions)
        token, hour = self._split_hour(name, stem)
        kind, color = self._match_kind(name, token)
        return Classification(kind=kind, hour=hour, extension=extension, color=color)

    def _split_hour(self, name: str, stem: str) -> tuple[str, int]:
        token, sep, segment = stem.partition(".")
        if not sep:
            return token, 0
        return token, parse_hour_segment(segment, name=name)

    def _match_kind(self, name: str, token: str) -> tuple[LogKind, str | None]:
        for excluded in self.config.excluded_tokens:
            if token == excluded or token.startswith(excluded + "_"):
                raise InvalidLogType(name)

        for candidate in self._tokens:
            if token == candidate:
                return self.config.kinds[candidate], None
            prefix = candidate + "_"
            if token.startswith(prefix) and len(token) > len(prefix):
                return self.config.kinds[candidate], token[len(prefix):]

        raise InvalidLogType(name)
