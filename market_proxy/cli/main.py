"""
Top-level CLI dispatcher: market-proxy <command> [args...].
All commands dispatch to package CLI modules.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__


def _add_log_level(parser: argparse.ArgumentParser, default: str) -> None:
    parser.add_argument(
        "--log-level",
        default=default,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="market-proxy",
        description="Caching spot market-data proxy with upstream fallback",
    )
    parser.add_argument("--version", action="version", version=f"market-proxy {__version__}")
    _add_log_level(parser, default="INFO")
    # accepted after the command too; SUPPRESS keeps the top-level value unless given
    common = argparse.ArgumentParser(add_help=False)
    _add_log_level(common, default=argparse.SUPPRESS)
    subparsers = parser.add_subparsers(dest="command", help="command")
    subparsers.add_parser("serve", help="Run the HTTP proxy server", add_help=False, parents=[common])
    subparsers.add_parser(
        "fetch", help="Fetch one resource and print its envelope", add_help=False, parents=[common]
    )

    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        from . import serve as mod

        return mod.main(rest)
    if args.command == "fetch":
        from . import fetch as mod

        return mod.main(rest)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
