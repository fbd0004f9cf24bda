"""Walk a log root and build the import manifest.

Pipeline, in walk order:
    enumerate files -> read check -> extension check -> duplicate resolution
    -> hour/kind classification -> day/hour bucketing
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Iterator
from pathlib import Path

from .bucketer import ManifestBuilder
from .classifier import FilenameClassifier, split_extension
from .config import ClassifierConfig, default_classifier_config
from .duplicates import DuplicateResolver
from .errors import DirIsEmpty, FileClassificationError
from .models import LogFile, WalkError, WalkErrorKind, WalkResult

logger = logging.getLogger(__name__)


def _log_walk_oserror(exc: OSError) -> None:
    logger.warning("Cannot list %s: %s", exc.filename, exc)


def _log_file(path: str, st: os.stat_result) -> LogFile:
    return LogFile(path=path, name=os.path.basename(path), mtime=st.st_mtime, size=st.st_size)


def iter_log_files(
    root: Path,
    *,
    on_error: Callable[[str, OSError], None] | None = None,
) -> Iterator[LogFile]:
    """Yield regular files under root in a stable order.

    Each directory yields its own files (sorted by name) before descending
    into its subdirectories (sorted by name). A file root yields itself.
    Files that vanish or cannot be stat'ed after listing are passed to
    on_error instead.
    """
    if root.is_file():
        yield _log_file(str(root), root.stat())
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_oserror):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            try:
                st = os.stat(path)
            except OSError as exc:
                logger.debug("Cannot stat %s: %s", path, exc)
                if on_error is not None:
                    on_error(path, exc)
                continue
            if stat.S_ISREG(st.st_mode):
                yield _log_file(path, st)


def _oserror_kind(exc: OSError) -> WalkErrorKind:
    if isinstance(exc, PermissionError):
        return WalkErrorKind.INSUFFICIENT_READ_PERMISSIONS
    return WalkErrorKind.UNREADABLE_FILE


def _read_error(path: str) -> WalkErrorKind | None:
    """Open the file once; return why it cannot be read, if it cannot."""
    try:
        with open(path, "rb"):
            return None
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return _oserror_kind(exc)


def walk_files(
    root: str | Path,
    *,
    config: ClassifierConfig | None = None,
) -> WalkResult:
    """Discover and classify every log file under root.

    Raises FileNotFoundError when root does not exist, DirIsEmpty when it holds
    no regular files and NoValidFilesFound when none of them could be placed.
    """
    config = config or default_classifier_config()
    classifier = FilenameClassifier(config)

    root_path = Path(os.path.abspath(root))
    if not root_path.exists():
        raise FileNotFoundError(f"Log root not found: {root_path}")

    walk_errors: list[WalkError] = []

    def record_oserror(path: str, exc: OSError) -> None:
        walk_errors.append(WalkError(path, _oserror_kind(exc)))

    files = list(iter_log_files(root_path, on_error=record_oserror))
    if not files and not walk_errors:
        raise DirIsEmpty(f"no files found under {root_path}")

    resolver = DuplicateResolver(config.extensions)

    for f in files:
        read_error = _read_error(f.path)
        if read_error is not None:
            walk_errors.append(WalkError(f.path, read_error))
            continue
        try:
            split_extension(f.name, config.extensions)
        except FileClassificationError as exc:
            walk_errors.append(WalkError(f.path, exc.kind))
            continue

        skipped = resolver.offer(f)
        if skipped is not None:
            walk_errors.append(skipped)

    base_dir = root_path if root_path.is_dir() else root_path.parent
    builder = ManifestBuilder(base_dir, config)
    for f in resolver.survivors():
        try:
            classification = classifier.classify(f.name)
        except FileClassificationError as exc:
            walk_errors.append(WalkError(f.path, exc.kind))
            continue
        builder.add(f.path, classification)

    for err in walk_errors:
        logger.debug("Walk error %s: %s", err.error.value, err.path)

    manifest = builder.build(walk_errors)
    walk_errors.extend(builder.pruned)
    logger.info(
        "Walked %s: %d files, %d day groupings, %d hour buckets, %d walk errors",
        root_path,
        len(files),
        len(manifest.days),
        sum(1 for _ in manifest.non_empty_hours()),
        len(walk_errors),
    )
    return WalkResult(manifest=manifest, walk_errors=walk_errors)
