"""
Upstream interfaces and health bookkeeping.

Two protocols define the seams the fetch orchestrator is wired through:
- UpstreamClient: one bounded-timeout GET, returns Ok(json) or Err(TransportError).
- FallbackProvider: the secondary tier, returns canonical values or a tier error.

Health records are observational only: they never change which upstream is tried.
They are updated from concurrent request threads, so each update takes a lock.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from ..core.types import ResourceKind, Result


class ProviderStatus(enum.Enum):
    """Health status of an upstream."""

    OK = "OK"
    DEGRADED = "DEGRADED"
    DOWN = "DOWN"


@dataclass
class ProviderHealth:
    """Mutable health state for a single upstream."""

    provider_name: str
    status: ProviderStatus = ProviderStatus.OK
    last_ok_at: Optional[str] = None
    fail_count: int = 0
    last_error: Optional[str] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def record_success(self) -> None:
        with self._lock:
            self.status = ProviderStatus.OK
            self.fail_count = 0
            self.last_ok_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
            self.last_error = None

    def record_failure(self, error: str) -> None:
        with self._lock:
            self.fail_count += 1
            self.last_error = error[:500]
            if self.fail_count >= 5:
                self.status = ProviderStatus.DOWN
            elif self.fail_count >= 2:
                self.status = ProviderStatus.DEGRADED

    def record_rejection(self, error: str) -> None:
        """The upstream answered but refused this request; its status is unchanged."""
        with self._lock:
            self.last_error = error[:500]

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "provider_name": self.provider_name,
                "status": self.status.value,
                "last_ok_at": self.last_ok_at,
                "fail_count": self.fail_count,
                "last_error": self.last_error,
            }


@runtime_checkable
class UpstreamClient(Protocol):
    """Single GET against one upstream; no retry or interpretation."""

    def get_json(
        self,
        base_url: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
    ) -> Result:
        """Return Ok(parsed JSON body) or Err(TransportError)."""
        ...


@runtime_checkable
class FallbackProvider(Protocol):
    """Secondary tier: one upstream call, normalized to the canonical shape."""

    @property
    def provider_name(self) -> str: ...

    def supports(self, kind: ResourceKind) -> bool: ...

    def fetch_fallback(self, kind: ResourceKind, symbol: Optional[str] = None) -> Result:
        """Return Ok(canonical value) or Err(FallbackFailed | NoFallbackAvailable | ...)."""
        ...
