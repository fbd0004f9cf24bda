"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from contextlib import aclosing
from pathlib import Path
from typing import Any

from zeek_ingest.core.classifier import FilenameClassifier
from zeek_ingest.core.errors import FileClassificationError, WalkFailed
from zeek_ingest.core.models import WalkError
from zeek_ingest.core.reader import iter_conn_records
from zeek_ingest.core.walker import walk_files
from zeek_ingest.core.zeektypes import CONN_KINDS

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000


def _walk_error_to_dict(err: WalkError) -> dict[str, str]:
    return {"path": err.path, "error": err.error.value}


def scan_logs_impl(*, root: str) -> dict[str, Any]:
    """Implementation for the `scan_logs` MCP tool.

    Fatal walk failures are reported in the payload rather than raised so the
    client still sees the per-file diagnostics.
    """
    try:
        result = walk_files(root)
    except WalkFailed as exc:
        return {
            "ok": False,
            "error": type(exc).__name__,
            "message": str(exc),
            "walk_errors": [_walk_error_to_dict(e) for e in exc.walk_errors],
        }

    manifest = result.manifest
    return {
        "ok": True,
        "hour_buckets": sum(1 for _ in manifest.non_empty_hours()),
        "manifest": manifest.to_dict(),
        "walk_errors": [_walk_error_to_dict(e) for e in result.walk_errors],
    }


async def decode_conn_impl(*, log_path: str, limit: int | None = None) -> dict[str, Any]:
    """Implementation for the `decode_conn_log` MCP tool."""
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, HARD_LIMIT)

    try:
        classification = FilenameClassifier().classify(Path(log_path).name)
    except FileClassificationError as exc:
        raise ValueError(f"Not a conn log: {exc}") from exc
    if classification.kind not in CONN_KINDS:
        raise ValueError(f"Not a conn log: {log_path} is a {classification.kind.value} log")

    records: list[dict[str, Any]] = []
    async with aclosing(iter_conn_records(log_path)) as stream:
        async for record in stream:
            records.append(record.model_dump(by_alias=True))
            if len(records) >= limit:
                break

    return {"count": len(records), "records": records}
