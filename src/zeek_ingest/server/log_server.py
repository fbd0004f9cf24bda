"""MCP server entrypoint (stdio transport).

Exposes the log-discovery walk and the conn record decoder as tools.

Run locally (stdio):
    python -m zeek_ingest.server.log_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from zeek_ingest.core.config import configure_logging
from zeek_ingest.tools.scan import decode_conn_impl, scan_logs_impl

LOGGER = logging.getLogger(__name__)

mcp = FastMCP("zeek-ingest", json_response=True)


@mcp.tool()
def scan_logs(root: str) -> dict[str, Any]:
    """Walk a sensor log directory and return its import manifest.

    Parameters
    ----------
    root:
        A directory of Zeek logs (flat, per-day, per-sensor or nested) or a
        single log file.

    Returns
    -------
    dict:
        {"ok": bool, "manifest": {...}, "walk_errors": [{"path", "error"}]}
    """
    return scan_logs_impl(root=root)


@mcp.tool()
async def decode_conn_log(log_path: str, limit: int | None = None) -> dict[str, Any]:
    """Decode connection records from a conn or open_conn log (.log or .log.gz)."""
    return await decode_conn_impl(log_path=log_path, limit=limit)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
