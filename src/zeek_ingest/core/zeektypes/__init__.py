"""Typed Zeek log records."""

from __future__ import annotations

from .conn import CONN_KINDS, ZeekConn, decode_conn_json, decode_conn_tsv
from .timestamp import Timestamp, decode_timestamp, parse_rfc3339
from .tsv import ZeekTsvHeader

__all__ = [
    "CONN_KINDS",
    "Timestamp",
    "ZeekConn",
    "ZeekTsvHeader",
    "decode_conn_json",
    "decode_conn_tsv",
    "decode_timestamp",
    "parse_rfc3339",
]
