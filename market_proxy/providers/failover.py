"""
Primary failover: ordered pass over equivalent primary hosts.

Hosts are tried in fixed priority order, one request each. The first success
wins and later hosts are never contacted. There is no retry, backoff or
circuit breaking: one linear pass per call, so the worst case is
len(hosts) x timeout. Health is tracked per host for the /health view only.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.errors import AllPrimaryFailed, ConfigError, TransportError
from ..core.types import Err, Result
from .base import ProviderHealth, UpstreamClient
from .http import host_label, join_url

logger = logging.getLogger(__name__)

DEFAULT_API_PREFIX = "/api/v3"


class PrimaryFailoverResolver:
    """
    Ordered list of equivalent primary hosts with first-success-wins semantics.

    Usage:
        resolver = PrimaryFailoverResolver(client, ["https://api.binance.com", ...])
        result = resolver.fetch_via_primary("ticker/price", {"symbol": "BTCUSDT"})
    """

    def __init__(
        self,
        client: UpstreamClient,
        base_urls: Sequence[str],
        api_prefix: str = DEFAULT_API_PREFIX,
    ) -> None:
        if not base_urls:
            raise ConfigError("primary host list must not be empty")
        self._client = client
        self._base_urls: List[str] = list(base_urls)
        self._api_prefix = api_prefix
        self._health: Dict[str, ProviderHealth] = {}
        for url in self._base_urls:
            name = host_label(url)
            self._health[name] = ProviderHealth(provider_name=name)

    @property
    def base_urls(self) -> List[str]:
        return list(self._base_urls)

    def fetch_via_primary(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]] = None,
    ) -> Result:
        """
        Return Ok(raw payload) from the first host that answers, or
        Err(AllPrimaryFailed) with one TransportError per host, in try order.
        """
        failures: List[TransportError] = []
        path = join_url(self._api_prefix, endpoint)
        for base_url in self._base_urls:
            name = host_label(base_url)
            health = self._health[name]
            result = self._client.get_json(base_url, path, params)
            if result.ok:
                health.record_success()
                if failures:
                    logger.info("Primary %s answered %s after %d failure(s)", name, endpoint, len(failures))
                return result
            err: TransportError = result.error
            failures.append(err)
            if err.rejected_request:
                health.record_rejection(err.reason)
            else:
                health.record_failure(err.reason)
            logger.warning("Failed with %s for %s (%s), trying next...", name, endpoint, err.reason)

        logger.warning("All %d primary hosts failed for %s", len(failures), endpoint)
        return Err(AllPrimaryFailed(tuple(failures)))

    def get_health(self) -> Dict[str, ProviderHealth]:
        """Return health status for every primary host."""
        return dict(self._health)


__all__ = ["DEFAULT_API_PREFIX", "PrimaryFailoverResolver"]
