"""
Resource fetch orchestrator: cache -> primary hosts -> fallback provider.

Per request:
    CheckCache -> TryPrimary -> TryFallback -> Normalize -> UpdateCache -> Respond

- A fresh cache entry is served with no network activity.
- The primary host list is always exhausted before the fallback is tried,
  even when a stale entry exists.
- A failed normalization leaves the cache untouched.
- Served values are copies, so callers cannot alter a cached entry.

The fetcher holds no mutable state of its own: cache, resolver, fallback
provider and clock are injected, so tests can drive it with fakes.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .cache import Clock, ResourceCache, epoch_millis
from .core.errors import ErrorKind, NoFallbackAvailable
from .core.types import (
    CacheEntry,
    Err,
    Failed,
    FetchOutcome,
    PricePoint,
    ResourceKind,
    Result,
    Served,
    SourceTag,
)
from .providers import normalize
from .providers.base import FallbackProvider
from .providers.failover import PrimaryFailoverResolver

logger = logging.getLogger(__name__)

# kind -> (primary endpoint under the API prefix, primary normalizer)
PRIMARY_ENDPOINTS: Dict[ResourceKind, Tuple[str, Callable[[Any], Result]]] = {
    ResourceKind.FULL_PRICE_TABLE: ("ticker/price", normalize.primary_price_table),
    ResourceKind.SINGLE_PRICE: ("ticker/price", normalize.primary_single_price),
    ResourceKind.TRADING_PAIR_LIST: ("exchangeInfo", normalize.trading_pairs),
    ResourceKind.EXCHANGE_METADATA: ("exchangeInfo", normalize.exchange_metadata),
}


def _served(entry: CacheEntry, source: SourceTag) -> Served:
    # callers get their own copy; the cache entry is only ever replaced whole
    return Served(copy.deepcopy(entry.value), source, entry.fetched_at_ms)


def request_symbol(raw: Optional[str]) -> Optional[str]:
    """Canonical form of a client-supplied symbol, or None if unusable."""
    if raw is None:
        return None
    symbol = raw.strip().upper()
    if not symbol or any(ch.isspace() for ch in symbol):
        return None
    return symbol


class ResourceFetcher:
    """Coordinates cache, primary failover and fallback for each resource request."""

    def __init__(
        self,
        cache: ResourceCache,
        primary: PrimaryFailoverResolver,
        fallback: FallbackProvider,
        clock: Clock = epoch_millis,
    ) -> None:
        self._cache = cache
        self._primary = primary
        self._fallback = fallback
        self._clock = clock

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    @property
    def primary(self) -> PrimaryFailoverResolver:
        return self._primary

    @property
    def fallback(self) -> FallbackProvider:
        return self._fallback

    @property
    def clock(self) -> Clock:
        return self._clock

    def fetch(self, kind: ResourceKind, symbol: Optional[str] = None) -> FetchOutcome:
        subject: Optional[str] = None
        if kind is ResourceKind.SINGLE_PRICE:
            subject = request_symbol(symbol)
            if subject is None:
                return Failed(ErrorKind.INVALID_REQUEST, "a non-empty symbol is required", kind)

        started_ms = self._clock()
        cached = self._serve_from_cache(kind, subject, started_ms)
        if cached is not None:
            return cached

        endpoint, primary_normalizer = PRIMARY_ENDPOINTS[kind]
        params = {"symbol": subject} if subject is not None else None
        primary = self._primary.fetch_via_primary(endpoint, params)
        if primary.ok:
            source = SourceTag.PRIMARY
            normalized = primary_normalizer(primary.value)
        else:
            source = SourceTag.FALLBACK
            if self._fallback.supports(kind):
                logger.warning("%s: primary exhausted, using fallback...", kind.value)
                normalized = self._fallback.fetch_fallback(kind, subject)
            else:
                normalized = Err(NoFallbackAvailable(kind))
            if not normalized.ok and normalized.error.kind not in (
                ErrorKind.NORMALIZATION_FAILED,
                ErrorKind.SYMBOL_NOT_FOUND,
            ):
                detail = f"primary: {primary.error.describe()}; fallback: {normalized.error.describe()}"
                logger.error("%s: all sources failed: %s", kind.value, detail)
                return Failed(ErrorKind.ALL_SOURCES_FAILED, detail, kind)

        if not normalized.ok:
            err = normalized.error
            logger.error("%s from %s rejected: %s", kind.value, source.value, err.describe())
            return Failed(err.kind, err.describe(), kind)

        if kind is ResourceKind.SINGLE_PRICE and normalized.value.symbol != subject:
            logger.error(
                "%s from %s answered for %s, wanted %s",
                kind.value, source.value, normalized.value.symbol, subject,
            )
            return Failed(
                ErrorKind.NORMALIZATION_FAILED,
                f"malformed {kind.value} payload: bad or missing field 'symbol'",
                kind,
            )

        entry = self._cache.put(
            kind,
            normalized.value,
            self._clock(),
            source,
            subject=subject,
            attempt_started_ms=started_ms,
        )
        return _served(entry, entry.source)

    def _serve_from_cache(
        self, kind: ResourceKind, subject: Optional[str], now_ms: int
    ) -> Optional[Served]:
        entry = self._cache.get(kind)
        if entry is not None and entry.subject == subject and self._cache.is_fresh(entry, now_ms):
            logger.debug("%s served from cache", kind.value)
            return _served(entry, SourceTag.CACHE)

        if kind is ResourceKind.SINGLE_PRICE and subject is not None:
            table: Optional[CacheEntry] = self._cache.get(ResourceKind.FULL_PRICE_TABLE)
            if (
                table is not None
                and self._cache.is_fresh(table, now_ms)
                and subject in table.value
            ):
                logger.debug("%s %s served from cached price table", kind.value, subject)
                return Served(
                    PricePoint(symbol=subject, price=table.value[subject]),
                    SourceTag.CACHE,
                    table.fetched_at_ms,
                )
        return None

    def get_all_prices(self) -> FetchOutcome:
        return self.fetch(ResourceKind.FULL_PRICE_TABLE)

    def get_price(self, symbol: str) -> FetchOutcome:
        return self.fetch(ResourceKind.SINGLE_PRICE, symbol)

    def get_trading_pairs(self) -> FetchOutcome:
        return self.fetch(ResourceKind.TRADING_PAIR_LIST)

    def get_exchange_info(self) -> FetchOutcome:
        return self.fetch(ResourceKind.EXCHANGE_METADATA)


__all__ = ["PRIMARY_ENDPOINTS", "ResourceFetcher", "request_symbol"]
