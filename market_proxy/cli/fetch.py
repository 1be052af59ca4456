"""
One-shot fetch through the full cache/primary/fallback path.
Usage: market-proxy fetch {prices,price,pairs,exchange-info} [SYMBOL]

Prints the response envelope as JSON; exit code 0 on success, 1 on failure.
"""

from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal
from typing import Any, List, Optional

from ..core.types import ResourceKind
from ..envelope import http_status, to_envelope
from ..providers.defaults import create_fetcher

_RESOURCES = {
    "prices": ResourceKind.FULL_PRICE_TABLE,
    "price": ResourceKind.SINGLE_PRICE,
    "pairs": ResourceKind.TRADING_PAIR_LIST,
    "exchange-info": ResourceKind.EXCHANGE_METADATA,
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="market-proxy fetch", description="Fetch one resource")
    parser.add_argument("resource", choices=sorted(_RESOURCES), help="Resource to fetch")
    parser.add_argument("symbol", nargs="?", default=None, help="Symbol, required for 'price' (e.g. BTCUSDT)")
    args = parser.parse_args(argv)

    kind = _RESOURCES[args.resource]
    if kind is ResourceKind.SINGLE_PRICE and not args.symbol:
        parser.error("'price' requires a SYMBOL")

    outcome = create_fetcher().fetch(kind, args.symbol)
    print(json.dumps(to_envelope(outcome), indent=2, default=_json_default))
    if http_status(outcome) != 200:
        print(f"fetch failed: {outcome.detail}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
