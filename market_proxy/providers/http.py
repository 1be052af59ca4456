"""
HTTP upstream client.

One GET per call with a bounded timeout. Any non-2xx status, timeout,
connection error or unparseable body becomes an Err(TransportError); nothing
is retried here. JSON floats are parsed as Decimal so upstream prices keep
their exact decimal text.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional
from urllib.parse import urlsplit

import requests

from ..core.errors import TransportError
from ..core.types import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


def host_label(base_url: str) -> str:
    """Host part of a base URL, used as the upstream name in health records and logs."""
    return urlsplit(base_url).netloc or base_url


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class RequestsUpstreamClient:
    """UpstreamClient backed by a requests.Session."""

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._timeout_s = timeout_ms / 1000.0
        self._session = session or requests.Session()

    @property
    def timeout_ms(self) -> int:
        return int(self._timeout_s * 1000)

    def get_json(
        self,
        base_url: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
    ) -> Result:
        upstream = host_label(base_url)
        url = join_url(base_url, path)
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout_s)
        except requests.Timeout:
            return Err(TransportError(upstream, f"timeout after {self.timeout_ms}ms"))
        except requests.RequestException as exc:
            return Err(TransportError(upstream, f"{type(exc).__name__}"))

        if not 200 <= resp.status_code < 300:
            if resp.status_code == 429:
                reason = "rate limited (HTTP 429)"
            else:
                reason = f"HTTP {resp.status_code}"
            return Err(TransportError(upstream, reason, status_code=resp.status_code))

        try:
            payload = resp.json(parse_float=Decimal)
        except ValueError:
            return Err(
                TransportError(upstream, "unparseable body", status_code=resp.status_code)
            )
        return Ok(payload)

    def close(self) -> None:
        self._session.close()
