from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from zeek_ingest.core.config import configure_logging
from zeek_ingest.core.errors import DirIsEmpty, NoValidFilesFound, ZeekIngestError
from zeek_ingest.core.models import WalkResult
from zeek_ingest.core.reader import iter_conn_records
from zeek_ingest.core.walker import walk_files


def _print_summary(result: WalkResult) -> None:
    for day, hour, bucket in result.manifest.non_empty_hours():
        kinds = ", ".join(f"{kind.value}={len(paths)}" for kind, paths in bucket.items())
        print(f"day {day} hour {hour:02d}: {kinds}")
    for err in result.walk_errors:
        print(f"skipped {err.path}: {err.error.value}", file=sys.stderr)


def _cmd_scan(args: argparse.Namespace) -> int:
    try:
        result = walk_files(args.root)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2
    except DirIsEmpty as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except NoValidFilesFound as e:
        print(f"Error: {e}", file=sys.stderr)
        for err in e.walk_errors:
            print(f"  {err.path}: {err.error.value}", file=sys.stderr)
        return 2

    if args.json:
        payload = {
            "manifest": result.manifest.to_dict(),
            "walk_errors": [{"path": e.path, "error": e.error.value} for e in result.walk_errors],
        }
        print(json.dumps(payload, indent=2))
    else:
        _print_summary(result)
        print(f"\nFound {len(result.manifest.paths())} files in {len(result.manifest.days)} day groupings.")
    return 0


async def _decode(path: str) -> None:
    async for record in iter_conn_records(path):
        print(record.model_dump_json(by_alias=True))


def _cmd_decode(args: argparse.Namespace) -> int:
    try:
        asyncio.run(_decode(args.log_path))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2
    except ZeekIngestError as e:
        notes = " ".join(getattr(e, "__notes__", []))
        print(f"Error: {e} {notes}".rstrip(), file=sys.stderr)
        return 2
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Discover and classify Zeek sensor logs for import.")
    sub = p.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Walk a log root and print the import manifest")
    scan.add_argument("root", help="Log directory or single log file")
    scan.add_argument("--json", action="store_true", help="Print the manifest as JSON")
    scan.set_defaults(func=_cmd_scan)

    decode = sub.add_parser("decode", help="Decode conn records from a conn/open_conn log")
    decode.add_argument("log_path")
    decode.set_defaults(func=_cmd_decode)

    args = p.parse_args(argv)
    configure_logging()
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
