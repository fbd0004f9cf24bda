"""Module entrypoint.

Allows:
    python -m zeek_ingest
"""

from __future__ import annotations

from zeek_ingest.server.log_server import main

if __name__ == "__main__":
    main()
