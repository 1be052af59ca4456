"""
Default wiring: build the resolver, fallback provider, cache and fetcher from config.

Everything is constructed per call; nothing here is a module-level singleton,
so tests and the API factory can each hold their own cache.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..cache import Clock, ResourceCache, epoch_millis
from .base import UpstreamClient
from .coingecko import CoinGeckoFallbackProvider
from .failover import PrimaryFailoverResolver
from .http import RequestsUpstreamClient

logger = logging.getLogger(__name__)


def create_upstream_client(cfg: dict) -> RequestsUpstreamClient:
    return RequestsUpstreamClient(timeout_ms=int(cfg["http"]["timeout_ms"]))


def create_primary_resolver(
    cfg: dict, client: Optional[UpstreamClient] = None
) -> PrimaryFailoverResolver:
    """Primary resolver over the configured host list, in configured order."""
    primary = cfg["primary"]
    return PrimaryFailoverResolver(
        client or create_upstream_client(cfg),
        primary["base_urls"],
        api_prefix=primary.get("api_prefix", "/api/v3"),
    )


def create_fallback_provider(
    cfg: dict, client: Optional[UpstreamClient] = None
) -> CoinGeckoFallbackProvider:
    fb = cfg["fallback"]
    return CoinGeckoFallbackProvider(
        client or create_upstream_client(cfg),
        base_url=fb["base_url"],
        exchange_id=fb.get("exchange_id", "binance"),
        vs_currency=fb.get("vs_currency", "usd"),
    )


def create_fetcher(
    cfg: Optional[dict] = None,
    *,
    client: Optional[UpstreamClient] = None,
    clock: Clock = epoch_millis,
):
    """Build a ResourceFetcher with a fresh cache. cfg defaults to config.get_config()."""
    from ..config import get_config
    from ..orchestrator import ResourceFetcher

    cfg = cfg or get_config()
    client = client or create_upstream_client(cfg)
    cache = ResourceCache(freshness_window_ms=int(cfg["cache"]["freshness_window_ms"]))
    primary = create_primary_resolver(cfg, client)
    fallback = create_fallback_provider(cfg, client)
    logger.debug(
        "Fetcher wired: %d primary host(s), fallback=%s, window=%dms",
        len(primary.base_urls), fallback.provider_name, cache.freshness_window_ms,
    )
    return ResourceFetcher(cache, primary, fallback, clock=clock)
