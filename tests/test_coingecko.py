"""
Tests for the CoinGecko fallback provider.

Verifies endpoint mapping per resource kind, the USDT symbol-splitting rule,
exactly one upstream call per fetch, and the tier error values.
"""
from __future__ import annotations

from decimal import Decimal

from market_proxy.core.errors import ErrorKind, FallbackFailed, NoFallbackAvailable
from market_proxy.core.types import PricePoint, ResourceKind
from market_proxy.providers.coingecko import CoinGeckoFallbackProvider

from tests.fakes import ScriptedUpstreamClient, fail, ok
from tests.fakes.upstreams import FALLBACK_URL

HOST = "api.coingecko.com"


def _provider(script):
    client = ScriptedUpstreamClient({HOST: script})
    return client, CoinGeckoFallbackProvider(client, base_url=FALLBACK_URL)


class TestFullPriceTable:
    def test_tickers_endpoint_and_normalization(self):
        client, provider = _provider(ok({"tickers": [{"base": "btc", "target": "usdt", "last": 50000}]}))

        result = provider.fetch_fallback(ResourceKind.FULL_PRICE_TABLE)
        assert result.value == {"BTCUSDT": "50000"}
        assert client.calls == [(HOST, "exchanges/binance/tickers", None)]

    def test_transport_failure_is_fallback_failed(self):
        client, provider = _provider(fail("HTTP 429", 429))

        result = provider.fetch_fallback(ResourceKind.FULL_PRICE_TABLE)
        assert result.error == FallbackFailed("HTTP 429")
        assert result.error.kind is ErrorKind.FALLBACK_FAILED
        assert len(client.calls) == 1
        assert provider.health.fail_count == 1

    def test_rejected_request_does_not_count_against_provider(self):
        _client, provider = _provider(fail("HTTP 404", 404))

        result = provider.fetch_fallback(ResourceKind.FULL_PRICE_TABLE)
        assert result.error == FallbackFailed("HTTP 404")
        assert provider.health.fail_count == 0
        assert provider.health.last_error == "HTTP 404"

    def test_malformed_payload_is_normalization_failed(self):
        _client, provider = _provider(ok({"error": "exchange not found"}))

        result = provider.fetch_fallback(ResourceKind.FULL_PRICE_TABLE)
        assert result.error.kind is ErrorKind.NORMALIZATION_FAILED


class TestSinglePrice:
    def test_lookup_key_strips_usdt(self):
        client, provider = _provider(ok({"eth": {"usd": Decimal("3000.25")}}))

        result = provider.fetch_fallback(ResourceKind.SINGLE_PRICE, "ETHUSDT")
        assert result.value == PricePoint(symbol="ETHUSDT", price="3000.25")
        assert client.calls == [(HOST, "simple/price", {"ids": "eth", "vs_currencies": "usd"})]

    def test_lookup_key_without_usdt_is_lower_cased_symbol(self):
        client, provider = _provider(ok({}))

        result = provider.fetch_fallback(ResourceKind.SINGLE_PRICE, "BTCBUSD")
        assert client.calls[0][2] == {"ids": "btcbusd", "vs_currencies": "usd"}
        assert result.error.kind is ErrorKind.SYMBOL_NOT_FOUND


class TestUnsupportedKinds:
    def test_no_fallback_for_exchange_metadata(self):
        client, provider = _provider(ok({}))

        assert not provider.supports(ResourceKind.EXCHANGE_METADATA)
        result = provider.fetch_fallback(ResourceKind.EXCHANGE_METADATA)
        assert result.error == NoFallbackAvailable(ResourceKind.EXCHANGE_METADATA)
        assert client.calls == []

    def test_no_fallback_for_trading_pairs(self):
        _client, provider = _provider(ok({}))

        assert not provider.supports(ResourceKind.TRADING_PAIR_LIST)
        result = provider.fetch_fallback(ResourceKind.TRADING_PAIR_LIST)
        assert result.error.kind is ErrorKind.NO_FALLBACK_AVAILABLE
