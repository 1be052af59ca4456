"""
Launch the proxy server.
Usage: market-proxy serve [--host 0.0.0.0] [--port 3000]
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from .. import config
from ..api import ROUTES

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="market-proxy serve", description="Run the market proxy HTTP server")
    parser.add_argument("--host", default=None, help="Bind address (default: server.host / HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: server.port / PORT, 3000)")
    args = parser.parse_args(argv)

    host = args.host or config.server_host()
    port = args.port or config.server_port()

    logger.info("Market proxy with fallback running on port %d", port)
    logger.info("Available endpoints:")
    for route in ROUTES:
        logger.info("- %s", route)

    uvicorn.run("market_proxy.api:create_app", factory=True, host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
