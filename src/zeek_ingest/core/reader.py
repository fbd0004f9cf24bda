"""Read conn records from plain or gzip-compressed Zeek logs."""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .errors import ZeekIngestError
from .models import LogExtension
from .zeektypes import ZeekConn, ZeekTsvHeader, decode_conn_json, decode_conn_tsv

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.name.endswith(LogExtension.GZIP.value) or path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


async def iter_conn_records(
    log_path: str | Path,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[ZeekConn]:
    """Yield conn records from a JSON or TSV Zeek log.

    Each record is stamped with the file it came from. Decoding errors are
    raised to the caller with the file and line number attached as a note.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    header = ZeekTsvHeader()
    source = str(path)
    line_no = 0

    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for raw in f:
            line_no += 1
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            if header.consume(line):
                continue
            try:
                if line.lstrip().startswith("{"):
                    record = decode_conn_json(line, log_path=source)
                else:
                    record = decode_conn_tsv(line, header, log_path=source)
            except ZeekIngestError as exc:
                exc.add_note(f"{source}:{line_no}")
                raise
            yield record

    logger.debug("Read %d lines from %s", line_no, source)
