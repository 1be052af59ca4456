"""
Upstream providers for the market proxy.

The primary tier is a list of equivalent Binance hosts tried in fixed order;
the secondary tier is CoinGecko, reshaped into the same canonical formats.
"""

from __future__ import annotations

from .base import FallbackProvider, ProviderHealth, ProviderStatus, UpstreamClient
from .coingecko import CoinGeckoFallbackProvider
from .failover import PrimaryFailoverResolver
from .http import RequestsUpstreamClient

__all__ = [
    "CoinGeckoFallbackProvider",
    "FallbackProvider",
    "PrimaryFailoverResolver",
    "ProviderHealth",
    "ProviderStatus",
    "RequestsUpstreamClient",
    "UpstreamClient",
]
