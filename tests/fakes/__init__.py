"""Fake upstreams, fallback provider and clock for fetch-path tests (no live network)."""

from .upstreams import (
    FakeClock,
    FakeFallbackProvider,
    ScriptedUpstreamClient,
    fail,
    ok,
)

__all__ = [
    "FakeClock",
    "FakeFallbackProvider",
    "ScriptedUpstreamClient",
    "fail",
    "ok",
]
