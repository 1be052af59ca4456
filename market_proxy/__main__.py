"""Allow python -m market_proxy to run the CLI dispatcher."""
from __future__ import annotations

from .cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
