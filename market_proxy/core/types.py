"""
Shared value types: resource kinds, provenance tags, cache entries, fetch outcomes,
and the Ok/Err result pair used at every tier boundary.

Every failure path between components is a value (Err) rather than a raised
exception, so each branch of the fetch flow can be asserted on directly.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, TypeVar, Union

if TYPE_CHECKING:
    from .errors import ErrorKind

T = TypeVar("T")
E = TypeVar("E")

# symbol -> price string
PriceTable = Dict[str, str]
TradingPairs = List[str]


class ResourceKind(enum.Enum):
    """Logical resource served by the proxy; selects endpoint mapping and canonical shape."""

    FULL_PRICE_TABLE = "full_price_table"
    SINGLE_PRICE = "single_price"
    TRADING_PAIR_LIST = "trading_pair_list"
    EXCHANGE_METADATA = "exchange_metadata"


class SourceTag(enum.Enum):
    """Where a served value came from."""

    CACHE = "cache"
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class PricePoint:
    """Single symbol price. price keeps the upstream decimal text."""

    symbol: str
    price: str

    def to_dict(self) -> Dict[str, str]:
        return {"symbol": self.symbol, "price": self.price}


@dataclass(frozen=True)
class CacheEntry:
    """Most recent canonical value for one resource kind."""

    kind: ResourceKind
    value: Any
    fetched_at_ms: int
    source: SourceTag
    # symbol for SINGLE_PRICE entries, None otherwise
    subject: Optional[str] = None


@dataclass(frozen=True)
class Served:
    """Successful outcome. timestamp is the fetch time of the value returned."""

    value: Any
    source: SourceTag
    timestamp: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """Failed outcome, scoped to a single request."""

    error: ErrorKind
    detail: str
    resource: Optional[ResourceKind] = None

    @property
    def ok(self) -> bool:
        return False


FetchOutcome = Union[Served, Failed]

__all__ = [
    "CacheEntry",
    "Err",
    "Failed",
    "FetchOutcome",
    "Ok",
    "PricePoint",
    "PriceTable",
    "ResourceKind",
    "Result",
    "Served",
    "SourceTag",
    "TradingPairs",
]
