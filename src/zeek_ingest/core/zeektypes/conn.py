"""Connection log records (conn and open_conn share one layout)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InvalidZeekRecord
from ..models import LogKind
from .timestamp import Timestamp
from .tsv import ZeekTsvHeader

CONN_KINDS = frozenset({LogKind.CONN, LogKind.OPEN_CONN})


class ZeekConn(BaseModel):
    """One Zeek connection record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    timestamp: Timestamp = Field(alias="ts")
    uid: str = Field(default="", description="Connection id generated by Zeek.")
    source: str = Field(default="", alias="id.orig_h")
    source_port: int = Field(default=0, alias="id.orig_p")
    destination: str = Field(default="", alias="id.resp_h")
    destination_port: int = Field(default=0, alias="id.resp_p")
    proto: str = ""
    service: str = ""
    duration: float = 0.0
    orig_bytes: int = 0
    resp_bytes: int = 0
    conn_state: str = ""
    local_orig: bool = False
    local_resp: bool = False
    missed_bytes: int = 0
    history: str = ""
    orig_packets: int = Field(default=0, alias="orig_pkts")
    orig_ip_bytes: int = 0
    resp_packets: int = Field(default=0, alias="resp_pkts")
    resp_ip_bytes: int = 0
    tunnel_parents: list[str] = Field(default_factory=list)
    # Only present when logs from several sensors were combined.
    agent_hostname: str = ""
    agent_uuid: str = ""
    log_path: str | None = Field(default=None, description="File the record was read from.")

    def with_log_path(self, path: str | None) -> ZeekConn:
        return self.model_copy(update={"log_path": path})


def decode_conn_json(line: str, log_path: str | None = None) -> ZeekConn:
    """Decode one JSON-formatted conn log line.

    Raises InvalidZeekTimestamp for a bad `ts` and InvalidZeekRecord for any
    other malformed content.
    """
    try:
        record = ZeekConn.model_validate_json(line)
    except ValidationError as exc:
        raise InvalidZeekRecord(f"invalid conn record: {exc}") from exc
    return record.with_log_path(log_path)


def decode_conn_tsv(line: str, header: ZeekTsvHeader, log_path: str | None = None) -> ZeekConn:
    """Decode one tab-separated conn log row using the file's header."""
    try:
        record = ZeekConn.model_validate(header.row(line))
    except ValidationError as exc:
        raise InvalidZeekRecord(f"invalid conn record: {exc}") from exc
    return record.with_log_path(log_path)
