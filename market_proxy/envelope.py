"""
Fetch outcome -> response envelope and HTTP status.

Success: {"source": "cache|primary|fallback", "data": ..., "timestamp": epoch_ms}
Failure: {"error": "<human-readable class>", "details": "<diagnostic>"}
"""
from __future__ import annotations

from typing import Any, Dict

from .core.errors import ErrorKind
from .core.types import Failed, FetchOutcome, PricePoint, ResourceKind

_RESOURCE_LABELS = {
    ResourceKind.FULL_PRICE_TABLE: "prices",
    ResourceKind.SINGLE_PRICE: "price",
    ResourceKind.TRADING_PAIR_LIST: "trading pairs",
    ResourceKind.EXCHANGE_METADATA: "exchange info",
}

_STATUS = {
    ErrorKind.ALL_SOURCES_FAILED: 502,
    ErrorKind.NORMALIZATION_FAILED: 502,
    ErrorKind.SYMBOL_NOT_FOUND: 404,
    ErrorKind.INVALID_REQUEST: 400,
}


def _error_text(outcome: Failed) -> str:
    label = _RESOURCE_LABELS.get(outcome.resource, "data") if outcome.resource else "data"
    if outcome.error is ErrorKind.ALL_SOURCES_FAILED:
        return f"Failed to fetch {label} from all sources"
    if outcome.error is ErrorKind.NORMALIZATION_FAILED:
        return f"Upstream returned malformed {label}"
    if outcome.error is ErrorKind.SYMBOL_NOT_FOUND:
        return "Symbol not found"
    if outcome.error is ErrorKind.INVALID_REQUEST:
        return "Invalid request"
    return f"Failed to fetch {label}"


def _data(value: Any) -> Any:
    if isinstance(value, PricePoint):
        return value.to_dict()
    return value


def to_envelope(outcome: FetchOutcome) -> Dict[str, Any]:
    if isinstance(outcome, Failed):
        return {"error": _error_text(outcome), "details": outcome.detail}
    return {
        "source": outcome.source.value,
        "data": _data(outcome.value),
        "timestamp": outcome.timestamp,
    }


def http_status(outcome: FetchOutcome) -> int:
    if isinstance(outcome, Failed):
        return _STATUS.get(outcome.error, 500)
    return 200


__all__ = ["http_status", "to_envelope"]
