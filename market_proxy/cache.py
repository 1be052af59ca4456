"""
Freshness-windowed cache of the latest canonical value per resource kind.

One entry per ResourceKind, replaced whole on every successful refresh and
never deleted. This is a memo with a fixed key set, not an LRU. Reads never
block on a refresh in flight; the orchestrator only decides to refresh from
is_fresh().
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from .core.types import CacheEntry, ResourceKind, SourceTag

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS_WINDOW_MS = 60_000

Clock = Callable[[], int]


def epoch_millis() -> int:
    return int(time.time() * 1000)


class ResourceCache:
    """Holds at most one CacheEntry per ResourceKind."""

    def __init__(self, freshness_window_ms: int = DEFAULT_FRESHNESS_WINDOW_MS) -> None:
        self._window_ms = freshness_window_ms
        self._store: Dict[ResourceKind, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def freshness_window_ms(self) -> int:
        return self._window_ms

    def get(self, kind: ResourceKind) -> Optional[CacheEntry]:
        return self._store.get(kind)

    def is_fresh(self, entry: CacheEntry, now_ms: int) -> bool:
        return now_ms - entry.fetched_at_ms < self._window_ms

    def put(
        self,
        kind: ResourceKind,
        value: Any,
        now_ms: int,
        source: SourceTag = SourceTag.PRIMARY,
        *,
        subject: Optional[str] = None,
        attempt_started_ms: Optional[int] = None,
    ) -> CacheEntry:
        """
        Store value for kind and return the entry that is live afterwards.

        A fallback value does not replace a primary entry for the same subject
        written at or after attempt_started_ms; that newer primary entry is
        returned instead.
        """
        entry = CacheEntry(
            kind=kind, value=value, fetched_at_ms=now_ms, source=source, subject=subject
        )
        with self._lock:
            current = self._store.get(kind)
            if (
                source is SourceTag.FALLBACK
                and attempt_started_ms is not None
                and current is not None
                and current.source is SourceTag.PRIMARY
                and current.subject == subject
                and current.fetched_at_ms >= attempt_started_ms
            ):
                logger.debug(
                    "Keeping newer primary %s entry over fallback value", kind.value
                )
                return current
            self._store[kind] = entry
        logger.debug("Cached %s from %s at %d", kind.value, source.value, now_ms)
        return entry

    def ages_ms(self, now_ms: int) -> Dict[str, Dict[str, Any]]:
        """Age and provenance of each live entry, for health reporting."""
        return {
            kind.value: {
                "age_ms": now_ms - entry.fetched_at_ms,
                "source": entry.source.value,
                "fresh": self.is_fresh(entry, now_ms),
            }
            for kind, entry in dict(self._store).items()
        }


__all__ = ["Clock", "DEFAULT_FRESHNESS_WINDOW_MS", "ResourceCache", "epoch_millis"]
