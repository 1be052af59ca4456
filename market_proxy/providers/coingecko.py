"""
CoinGecko fallback provider.

Uses the public CoinGecko API (no authentication required):
  GET {base}/exchanges/{exchange_id}/tickers                 full price table
  GET {base}/simple/price?ids={asset}&vs_currencies={vs}     single price

Exactly one upstream call per fetch; there is no tier beyond this one.
Trading pairs and exchange metadata have no CoinGecko equivalent.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..core.errors import FallbackFailed, NoFallbackAvailable, TransportError
from ..core.types import Err, ResourceKind, Result
from . import normalize
from .base import ProviderHealth, UpstreamClient

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_EXCHANGE_ID = "binance"
DEFAULT_VS_CURRENCY = "usd"

_SUPPORTED = frozenset({ResourceKind.FULL_PRICE_TABLE, ResourceKind.SINGLE_PRICE})


class CoinGeckoFallbackProvider:
    """Fetch prices from CoinGecko and normalize them to the canonical shapes."""

    def __init__(
        self,
        client: UpstreamClient,
        base_url: str = COINGECKO_BASE_URL,
        exchange_id: str = DEFAULT_EXCHANGE_ID,
        vs_currency: str = DEFAULT_VS_CURRENCY,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._exchange_id = exchange_id
        self._vs_currency = vs_currency
        self._health = ProviderHealth(provider_name=self.provider_name)

    @property
    def provider_name(self) -> str:
        return "coingecko"

    @property
    def health(self) -> ProviderHealth:
        return self._health

    def supports(self, kind: ResourceKind) -> bool:
        return kind in _SUPPORTED

    def fetch_fallback(self, kind: ResourceKind, symbol: Optional[str] = None) -> Result:
        if kind is ResourceKind.FULL_PRICE_TABLE:
            raw = self._get(f"exchanges/{self._exchange_id}/tickers")
            if not raw.ok:
                return raw
            return normalize.fallback_price_table(raw.value)

        if kind is ResourceKind.SINGLE_PRICE:
            if not symbol:
                return Err(FallbackFailed("symbol required"))
            asset_id = normalize.fallback_asset_id(symbol)
            raw = self._get(
                "simple/price",
                {"ids": asset_id, "vs_currencies": self._vs_currency},
            )
            if not raw.ok:
                return raw
            return normalize.fallback_single_price(raw.value, symbol, self._vs_currency)

        return Err(NoFallbackAvailable(kind))

    def _get(self, path: str, params: Optional[dict] = None) -> Result:
        result = self._client.get_json(self._base_url, path, params)
        if result.ok:
            self._health.record_success()
            return result
        err: TransportError = result.error
        if err.rejected_request:
            self._health.record_rejection(err.reason)
        else:
            self._health.record_failure(err.reason)
        logger.warning("CoinGecko %s failed: %s", path, err.reason)
        return Err(FallbackFailed(err.reason))


__all__ = ["COINGECKO_BASE_URL", "CoinGeckoFallbackProvider"]
