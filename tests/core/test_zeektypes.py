from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from zeek_ingest.core.errors import InvalidZeekRecord, InvalidZeekTimestamp
from zeek_ingest.core.zeektypes import (
    ZeekConn,
    ZeekTsvHeader,
    decode_conn_json,
    decode_conn_tsv,
    decode_timestamp,
    parse_rfc3339,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1715640994, 1715640994),
        (1715640994.367201, 1715640994),
        ("1715640994", 1715640994),
        (" 1715640994.9 ", 1715640994),
        ("2019-11-13T09:00:01.932360Z", 1573635601),
        ("2019-11-13T10:00:01+01:00", 1573635601),
    ],
)
def test_decode_timestamp(value: object, expected: int) -> None:
    assert decode_timestamp(value) == expected


@pytest.mark.parametrize("value", [None, True, [1], {"ts": 1}, float("nan"), float("inf"), "nan"])
def test_decode_timestamp_rejects(value: object) -> None:
    with pytest.raises(InvalidZeekTimestamp):
        decode_timestamp(value)


def test_bad_string_chains_parse_error() -> None:
    with pytest.raises(InvalidZeekTimestamp) as exc_info:
        decode_timestamp("not-a-time")
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_parse_rfc3339() -> None:
    assert parse_rfc3339("2019-11-13T09:00:01Z") == datetime(2019, 11, 13, 9, 0, 1, tzinfo=UTC)
    assert parse_rfc3339("2019-11-13") is None
    assert parse_rfc3339("2019-11-13T09:00:01") is None


def test_decode_conn_json() -> None:
    line = (
        '{"ts":1715640994.367201,"uid":"CxT121","id.orig_h":"10.0.0.1","id.orig_p":52100,'
        '"id.resp_h":"52.12.0.1","id.resp_p":443,"proto":"tcp","service":"ssl",'
        '"duration":1.25,"orig_bytes":10,"resp_bytes":20,"conn_state":"SF","local_orig":true,'
        '"local_resp":false,"missed_bytes":0,"history":"ShADad","orig_pkts":3,"orig_ip_bytes":200,'
        '"resp_pkts":4,"resp_ip_bytes":300,"tunnel_parents":["Ca1"],"agent_uuid":"u-1"}'
    )

    record = decode_conn_json(line, log_path="/logs/conn.log")

    assert record.timestamp == 1715640994
    assert record.source == "10.0.0.1"
    assert record.destination_port == 443
    assert record.local_orig is True
    assert record.orig_packets == 3
    assert record.resp_packets == 4
    assert record.tunnel_parents == ["Ca1"]
    assert record.agent_uuid == "u-1"
    assert record.agent_hostname == ""
    assert record.log_path == "/logs/conn.log"


def test_log_path_is_set_by_caller() -> None:
    record = decode_conn_json('{"ts":1,"uid":"C1","log_path":"/from-line"}')
    assert record.log_path is None

    stamped = record.with_log_path("/logs/open_conn.log")
    assert stamped.log_path == "/logs/open_conn.log"
    assert stamped.uid == "C1"


def test_decode_conn_json_bad_timestamp() -> None:
    with pytest.raises(InvalidZeekTimestamp):
        decode_conn_json('{"ts":"yesterday","uid":"C1"}')


@pytest.mark.parametrize("line", ['{"uid":"C1"}', "{not json", '{"ts":1,"id.orig_p":"http"}'])
def test_decode_conn_json_invalid_record(line: str) -> None:
    with pytest.raises(InvalidZeekRecord):
        decode_conn_json(line)


def test_records_are_immutable() -> None:
    record = decode_conn_json('{"ts":1}')
    with pytest.raises(ValidationError):
        record.uid = "changed"  # type: ignore[misc]


def _header() -> ZeekTsvHeader:
    header = ZeekTsvHeader()
    for line in [
        "#separator \\x09",
        "#set_separator\t,",
        "#empty_field\t(empty)",
        "#unset_field\t-",
        "#path\tconn",
        "#fields\tts\tuid\tid.orig_h\tid.orig_p\tservice\tduration\tlocal_orig\ttunnel_parents",
        "#types\ttime\tstring\taddr\tport\tstring\tinterval\tbool\tset[string]",
    ]:
        assert header.consume(line)
    return header


def test_tsv_header() -> None:
    header = _header()
    assert header.separator == "\t"
    assert header.path == "conn"
    assert header.fields[0] == "ts"
    assert not header.consume("1715640994.367201\tC1")


def test_decode_conn_tsv() -> None:
    header = _header()

    record = decode_conn_tsv("1715640994.367201\tC1\t10.0.0.1\t5353\t-\t-\tT\tCa1,Cb2", header, "/l/conn.log")

    assert record.timestamp == 1715640994
    assert record.source_port == 5353
    assert record.service == ""
    assert record.duration == 0.0
    assert record.local_orig is True
    assert record.tunnel_parents == ["Ca1", "Cb2"]
    assert record.log_path == "/l/conn.log"


def test_decode_conn_tsv_empty_set() -> None:
    record = decode_conn_tsv("1\tC1\t10.0.0.1\t1\t(empty)\t0.5\tF\t(empty)", _header())
    assert record.tunnel_parents == []
    assert record.service == ""


def test_decode_conn_tsv_wrong_field_count() -> None:
    with pytest.raises(InvalidZeekRecord):
        decode_conn_tsv("1\tC1", _header())


def test_tsv_row_before_fields() -> None:
    with pytest.raises(InvalidZeekRecord):
        decode_conn_tsv("1\tC1", ZeekTsvHeader())


def test_model_accepts_field_names() -> None:
    record = ZeekConn(timestamp=5, source="10.0.0.9")
    assert record.timestamp == 5
    assert record.model_dump(by_alias=True)["id.orig_h"] == "10.0.0.9"
