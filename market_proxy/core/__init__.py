"""Core value types and error taxonomy. No I/O."""

from __future__ import annotations

from .errors import (
    AllPrimaryFailed,
    ConfigError,
    ErrorKind,
    FallbackFailed,
    MarketProxyError,
    NoFallbackAvailable,
    NormalizationFailed,
    SymbolNotFound,
    TransportError,
)
from .types import (
    CacheEntry,
    Err,
    Failed,
    FetchOutcome,
    Ok,
    PricePoint,
    PriceTable,
    ResourceKind,
    Result,
    Served,
    SourceTag,
    TradingPairs,
)

__all__ = [
    "AllPrimaryFailed",
    "CacheEntry",
    "ConfigError",
    "Err",
    "ErrorKind",
    "Failed",
    "FallbackFailed",
    "FetchOutcome",
    "MarketProxyError",
    "NoFallbackAvailable",
    "NormalizationFailed",
    "Ok",
    "PricePoint",
    "PriceTable",
    "ResourceKind",
    "Result",
    "Served",
    "SourceTag",
    "SymbolNotFound",
    "TradingPairs",
    "TransportError",
]
