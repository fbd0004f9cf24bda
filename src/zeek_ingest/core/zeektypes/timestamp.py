"""Zeek timestamp decoding.

Zeek writes `ts` as an epoch number (int or float with fractional seconds),
and some pipelines rewrite it as an RFC-3339 string or a quoted epoch. All of
them decode to whole seconds since the epoch.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator

from ..errors import InvalidZeekTimestamp

_RFC3339_RE = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}[T ][0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})$"
)


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC-3339 timestamp into an aware UTC datetime, or None."""
    s = value.strip().upper()
    if not _RFC3339_RE.match(s):
        return None
    try:
        ts = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ts.astimezone(UTC)


def _from_float(value: float) -> int:
    if not math.isfinite(value):
        raise InvalidZeekTimestamp(f"non-finite timestamp: {value!r}")
    return int(value)


def decode_timestamp(value: Any) -> int:
    """Decode a wire timestamp into integer epoch seconds."""
    # bool is an int subclass; a JSON true/false is never a timestamp.
    if isinstance(value, bool):
        raise InvalidZeekTimestamp(f"invalid timestamp: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _from_float(value)
    if isinstance(value, str):
        ts = parse_rfc3339(value)
        if ts is not None:
            return int(ts.timestamp())
        try:
            epoch = float(value.strip())
        except ValueError as exc:
            raise InvalidZeekTimestamp(
                f"timestamp is neither RFC-3339 nor an epoch number: {value!r}"
            ) from exc
        return _from_float(epoch)

    raise InvalidZeekTimestamp(f"unsupported timestamp type: {type(value).__name__}")


Timestamp = Annotated[int, BeforeValidator(decode_timestamp)]
