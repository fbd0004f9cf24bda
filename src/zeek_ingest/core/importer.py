"""Plan and run one import transaction per non-empty hour bucket.

The manifest must be complete before planning: a late duplicate could
otherwise change the file set of a bucket that is already being written.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from .config import resolve_max_workers
from .metadata import validate_database_name
from .models import HourBucket, Manifest

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ImportJob:
    """Files of one hour bucket and the id their rows are labelled with."""

    import_id: bytes
    database: str
    day: int
    hour: int
    files: HourBucket

    @property
    def import_id_hex(self) -> str:
        return self.import_id.hex()

    def paths(self) -> list[str]:
        return [p for paths in self.files.values() for p in paths]


def new_import_id() -> bytes:
    return uuid.uuid4().bytes


def plan_imports(
    manifest: Manifest,
    database: str,
    *,
    id_factory: Callable[[], bytes] = new_import_id,
) -> list[ImportJob]:
    """Issue one import id per populated hour bucket, in manifest order."""
    validate_database_name(database)
    jobs = [
        ImportJob(
            import_id=id_factory(),
            database=database,
            day=day,
            hour=hour,
            files={kind: list(paths) for kind, paths in bucket.items()},
        )
        for day, hour, bucket in manifest.non_empty_hours()
    ]
    logger.info("Planned %d import jobs for database %s", len(jobs), database)
    return jobs


async def run_imports(
    jobs: Sequence[ImportJob],
    ingest: Callable[[ImportJob], Awaitable[T]],
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> list[T]:
    """Run ingest for every job on a bounded worker pool.

    Results are returned in job order. A failing job or an expired timeout
    cancels every job that is still running or waiting; the first error
    (or TimeoutError) is re-raised.
    """
    worker_count = min(resolve_max_workers(max_workers), max(1, len(jobs)))
    results: list = [None] * len(jobs)
    queue: asyncio.Queue[int] = asyncio.Queue()
    for i in range(len(jobs)):
        queue.put_nowait(i)

    async def worker() -> None:
        while True:
            try:
                i = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            job = jobs[i]
            logger.debug("Importing day %d hour %d as %s", job.day, job.hour, job.import_id_hex)
            results[i] = await ingest(job)

    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as tg:
                for _ in range(worker_count):
                    tg.create_task(worker())
    except ExceptionGroup as eg:
        logger.error("Import run aborted: %s", eg.exceptions[0])
        raise eg.exceptions[0] from None

    return results
