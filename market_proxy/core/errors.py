"""
Error taxonomy for market_proxy.

Tier failures are frozen dataclasses carried inside Err results; only
configuration problems are raised (ConfigError). describe() strings are safe to
return to clients: they never contain upstream URLs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

from .types import ResourceKind


class MarketProxyError(Exception):
    """Base exception for market_proxy; catch this for any package-raised error."""

    pass


class ConfigError(MarketProxyError):
    """Invalid configuration (empty primary host list, non-positive timeout, ...)."""

    pass


class ErrorKind(enum.Enum):
    TRANSPORT_ERROR = "TransportError"
    ALL_PRIMARY_FAILED = "AllPrimaryFailed"
    FALLBACK_FAILED = "FallbackFailed"
    NO_FALLBACK_AVAILABLE = "NoFallbackAvailable"
    NORMALIZATION_FAILED = "NormalizationFailed"
    SYMBOL_NOT_FOUND = "SymbolNotFound"
    ALL_SOURCES_FAILED = "AllSourcesFailed"
    INVALID_REQUEST = "InvalidRequest"


@dataclass(frozen=True)
class TransportError:
    """One failed GET against one upstream. upstream is a host label, kept out of describe()."""

    upstream: str
    reason: str
    status_code: int | None = None

    kind = ErrorKind.TRANSPORT_ERROR

    def describe(self) -> str:
        return self.reason

    @property
    def rejected_request(self) -> bool:
        """True for a 4xx answer other than 408 or 429: the upstream is up but refused this request."""
        return (
            self.status_code is not None
            and 400 <= self.status_code < 500
            and self.status_code not in (408, 429)
        )


@dataclass(frozen=True)
class AllPrimaryFailed:
    failures: Tuple[TransportError, ...]

    kind = ErrorKind.ALL_PRIMARY_FAILED

    def describe(self) -> str:
        reasons = ", ".join(f.reason for f in self.failures)
        return f"all {len(self.failures)} primary hosts failed ({reasons})"


@dataclass(frozen=True)
class FallbackFailed:
    reason: str

    kind = ErrorKind.FALLBACK_FAILED

    def describe(self) -> str:
        return f"fallback provider failed ({self.reason})"


@dataclass(frozen=True)
class NoFallbackAvailable:
    resource: ResourceKind

    kind = ErrorKind.NO_FALLBACK_AVAILABLE

    def describe(self) -> str:
        return f"no fallback provider for {self.resource.value}"


@dataclass(frozen=True)
class NormalizationFailed:
    resource: ResourceKind
    field_name: str

    kind = ErrorKind.NORMALIZATION_FAILED

    def describe(self) -> str:
        return f"malformed {self.resource.value} payload: bad or missing field '{self.field_name}'"


@dataclass(frozen=True)
class SymbolNotFound:
    symbol: str

    kind = ErrorKind.SYMBOL_NOT_FOUND

    def describe(self) -> str:
        return f"symbol {self.symbol} not found"


__all__ = [
    "AllPrimaryFailed",
    "ConfigError",
    "ErrorKind",
    "FallbackFailed",
    "MarketProxyError",
    "NoFallbackAvailable",
    "NormalizationFailed",
    "SymbolNotFound",
    "TransportError",
]
