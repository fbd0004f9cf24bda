from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pytest

from zeek_ingest.core.models import HOURS_PER_DAY, DayBucket, LogKind

CONN_TSV = (
    "#separator \\x09\n"
    "#set_separator\t,\n"
    "#empty_field\t(empty)\n"
    "#unset_field\t-\n"
    "#path\tconn\n"
    "#open\t2019-02-28-12-07-01\n"
    "#fields\tts\tuid\tid.orig_h\tid.orig_p\tid.resp_h\tid.resp_p\tproto\tservice\tduration\tlocal_orig\ttunnel_parents\n"
    "#types\ttime\tstring\taddr\tport\taddr\tport\tenum\tstring\tinterval\tbool\tset[string]\n"
    "1715640994.367201\tCxT121\t10.0.0.1\t52100\t52.12.0.1\t443\ttcp\tssl\t1.5\tT\t(empty)\n"
    "1715641054.367201\tCxT122\t10.0.0.2\t52101\t52.12.0.2\t53\tudp\t-\t-\tF\tCa1,Cb2\n"
)

CONN_JSON = (
    '{"ts":1715640994.367201,"uid":"CxT121","id.orig_h":"10.0.0.1","id.orig_p":52100,'
    '"id.resp_h":"52.12.0.1","id.resp_p":443,"proto":"tcp","conn_state":"SF"}\n'
    '{"ts":"2019-11-13T09:00:01.932360Z","uid":"CxT122","id.orig_h":"10.0.0.2",'
    '"id.resp_h":"52.12.0.2","proto":"udp","agent_hostname":"sensor-a"}\n'
)


@pytest.fixture
def make_logs() -> Callable[..., list[Path]]:
    """Create files under root; mtimes maps relative name -> epoch seconds."""

    def _make(
        root: Path,
        files: Iterable[str],
        *,
        content: str = "testytesttestboop",
        mtimes: Mapping[str, float] | None = None,
    ) -> list[Path]:
        root.mkdir(parents=True, exist_ok=True)
        out: list[Path] = []
        for name in files:
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            if mtimes and name in mtimes:
                os.utime(path, (mtimes[name], mtimes[name]))
            out.append(path)
        return out

    return _make


@pytest.fixture
def expected_days() -> Callable[..., list[DayBucket]]:
    """Build manifest days from {day: {hour: {kind: [relative paths]}}}."""

    def _build(root: Path, layout: Mapping[int, Mapping[int, Mapping[LogKind, list[str]]]]) -> list[DayBucket]:
        days: list[DayBucket] = [[None] * HOURS_PER_DAY for _ in range(len(layout))]
        for day, hours in layout.items():
            for hour, kinds in hours.items():
                days[day][hour] = {kind: [str(root / p) for p in paths] for kind, paths in kinds.items()}
        return days

    return _build


@pytest.fixture
def conn_tsv() -> str:
    return CONN_TSV


@pytest.fixture
def conn_json() -> str:
    return CONN_JSON
