"""
Canonical normalizers: raw provider payloads -> canonical resource shapes.

Pure functions, one per (provider, resource kind). Each returns Ok(canonical)
or Err(NormalizationFailed(kind, field)); a malformed payload is never turned
into an empty value. Prices stay strings end to end.

Canonical shapes:
- price table:      {"BTCUSDT": "50000.00", ...}
- single price:     PricePoint(symbol="BTCUSDT", price="50000.00")
- trading pairs:    ["BTCUSDT", "ETHUSDT", ...] in upstream order
- exchange info:    primary payload, unchanged
"""
from __future__ import annotations

import functools
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List

from ..core.errors import NormalizationFailed, SymbolNotFound
from ..core.types import Err, Ok, PricePoint, PriceTable, ResourceKind, Result, TradingPairs

QUOTE_SUFFIX = "USDT"
ACTIVE_STATUS = "TRADING"


class _FieldError(Exception):
    def __init__(self, field_name: str) -> None:
        super().__init__(field_name)
        self.field_name = field_name


def _normalizer(kind: ResourceKind) -> Callable[[Callable[..., Any]], Callable[..., Result]]:
    def decorate(fn: Callable[..., Any]) -> Callable[..., Result]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Result:
            try:
                return Ok(fn(*args, **kwargs))
            except _FieldError as exc:
                return Err(NormalizationFailed(kind, exc.field_name))

        return wrapper

    return decorate


def _canonical_symbol(raw: Any, field_name: str = "symbol") -> str:
    """Upper-case ticker with no whitespace; raises _FieldError otherwise."""
    if not isinstance(raw, str):
        raise _FieldError(field_name)
    symbol = raw.strip().upper()
    if not symbol or any(ch.isspace() for ch in symbol):
        raise _FieldError(field_name)
    return symbol


def fallback_asset_id(symbol: str) -> str:
    """
    Secondary-provider asset id for a trading symbol.

    Text before the literal "USDT", lower-cased: "ETHUSDT" -> "eth". A symbol
    without "USDT" is only lower-cased: "BTCBUSD" -> "btcbusd". Other quote
    currencies are not stripped.
    """
    return symbol.partition(QUOTE_SUFFIX)[0].lower()


def _price_text(raw: Any, field_name: str = "price") -> str:
    """Decimal text for an upstream price, without a float round-trip."""
    if isinstance(raw, bool) or raw is None:
        raise _FieldError(field_name)
    if isinstance(raw, str):
        text = raw.strip()
    elif isinstance(raw, Decimal):
        text = format(raw, "f")
    elif isinstance(raw, (int, float)):
        text = str(raw)
    else:
        raise _FieldError(field_name)
    try:
        if not Decimal(text).is_finite():
            raise _FieldError(field_name)
    except InvalidOperation:
        raise _FieldError(field_name) from None
    return text


def _record(item: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise _FieldError(field_name)
    return item


@_normalizer(ResourceKind.FULL_PRICE_TABLE)
def primary_price_table(raw: Any) -> PriceTable:
    """[{symbol, price}, ...] -> {SYMBOL: price}."""
    if not isinstance(raw, list):
        raise _FieldError("<root>")
    table: PriceTable = {}
    for item in raw:
        rec = _record(item, "<item>")
        if "symbol" not in rec:
            raise _FieldError("symbol")
        if "price" not in rec:
            raise _FieldError("price")
        table[_canonical_symbol(rec["symbol"])] = _price_text(rec["price"])
    return table


@_normalizer(ResourceKind.FULL_PRICE_TABLE)
def fallback_price_table(raw: Any) -> PriceTable:
    """{tickers: [{base, target, last}, ...]} -> {BASE+TARGET: str(last)}."""
    rec = _record(raw, "<root>")
    tickers = rec.get("tickers")
    if not isinstance(tickers, list):
        raise _FieldError("tickers")
    table: PriceTable = {}
    for item in tickers:
        t = _record(item, "tickers[]")
        base, target = t.get("base"), t.get("target")
        if not isinstance(base, str) or not base:
            raise _FieldError("base")
        if not isinstance(target, str) or not target:
            raise _FieldError("target")
        if "last" not in t:
            raise _FieldError("last")
        table[_canonical_symbol(base + target, "base")] = _price_text(t["last"], "last")
    return table


@_normalizer(ResourceKind.SINGLE_PRICE)
def primary_single_price(raw: Any) -> PricePoint:
    """{symbol, price} -> PricePoint."""
    rec = _record(raw, "<root>")
    if "symbol" not in rec:
        raise _FieldError("symbol")
    if "price" not in rec:
        raise _FieldError("price")
    return PricePoint(symbol=_canonical_symbol(rec["symbol"]), price=_price_text(rec["price"]))


def fallback_single_price(
    raw: Any,
    symbol: str,
    vs_currency: str = "usd",
) -> Result:
    """
    {<asset id>: {<vs_currency>: price}} -> PricePoint for the requested symbol.

    A payload that lacks the asset id entirely means the provider does not know
    the asset: Err(SymbolNotFound). A present entry without a price is malformed.
    """
    asset_id = fallback_asset_id(symbol)
    if not isinstance(raw, dict):
        return Err(NormalizationFailed(ResourceKind.SINGLE_PRICE, "<root>"))
    if asset_id not in raw:
        return Err(SymbolNotFound(symbol))
    entry = raw[asset_id]
    if not isinstance(entry, dict) or vs_currency not in entry:
        return Err(NormalizationFailed(ResourceKind.SINGLE_PRICE, f"{asset_id}.{vs_currency}"))
    try:
        price = _price_text(entry[vs_currency], f"{asset_id}.{vs_currency}")
    except _FieldError as exc:
        return Err(NormalizationFailed(ResourceKind.SINGLE_PRICE, exc.field_name))
    return Ok(PricePoint(symbol=symbol, price=price))


@_normalizer(ResourceKind.TRADING_PAIR_LIST)
def trading_pairs(raw: Any) -> TradingPairs:
    """exchangeInfo symbols[] with status TRADING, projected to the symbol, upstream order."""
    rec = _record(raw, "<root>")
    symbols = rec.get("symbols")
    if not isinstance(symbols, list):
        raise _FieldError("symbols")
    pairs: List[str] = []
    for item in symbols:
        s = _record(item, "symbols[]")
        if "status" not in s:
            raise _FieldError("status")
        if s["status"] == ACTIVE_STATUS:
            pairs.append(_canonical_symbol(s.get("symbol")))
    return pairs


@_normalizer(ResourceKind.EXCHANGE_METADATA)
def exchange_metadata(raw: Any) -> Dict[str, Any]:
    return _record(raw, "<root>")


__all__ = [
    "ACTIVE_STATUS",
    "QUOTE_SUFFIX",
    "exchange_metadata",
    "fallback_asset_id",
    "fallback_price_table",
    "fallback_single_price",
    "primary_price_table",
    "primary_single_price",
    "trading_pairs",
]
