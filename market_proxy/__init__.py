"""
Top-level public API surface.
Read-through caching proxy for spot market data: Binance hosts first, CoinGecko as fallback.
Does not import cli or api (FastAPI is only needed to serve HTTP).
"""

from __future__ import annotations

from ._version import __version__
from .cache import ResourceCache
from .core.types import Failed, FetchOutcome, ResourceKind, Served, SourceTag
from .orchestrator import ResourceFetcher

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "Failed",
    "FetchOutcome",
    "ResourceCache",
    "ResourceFetcher",
    "ResourceKind",
    "Served",
    "SourceTag",
]
