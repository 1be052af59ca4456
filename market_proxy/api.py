"""
HTTP surface using FastAPI. No auth, no rate limiting.

Each route maps one resource request onto ResourceFetcher.fetch and
serializes the outcome envelope. Handlers are sync, so FastAPI runs them in
its threadpool and requests are served concurrently.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .core.types import FetchOutcome, ResourceKind
from .envelope import http_status, to_envelope
from .orchestrator import ResourceFetcher

logger = logging.getLogger(__name__)

ROUTES = [
    "GET /api/binance/spot-prices",
    "GET /api/binance/spot-price/{symbol}",
    "GET /api/binance/trading-pairs",
    "GET /api/binance/exchange-info",
    "GET /health",
]


def _respond(outcome: FetchOutcome) -> JSONResponse:
    return JSONResponse(
        status_code=http_status(outcome),
        content=jsonable_encoder(to_envelope(outcome)),
    )


def create_app(
    fetcher: Optional[ResourceFetcher] = None,
    cors_origins: Optional[list] = None,
) -> FastAPI:
    """Build the app around fetcher (default: wired from config)."""
    if fetcher is None or cors_origins is None:
        from . import config
        from .providers.defaults import create_fetcher

        cfg = config.get_config()
        if fetcher is None:
            fetcher = create_fetcher(cfg)
        if cors_origins is None:
            cors_origins = list(cfg["server"]["cors_origins"])

    app = FastAPI(title="Market Proxy", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.state.fetcher = fetcher

    @app.get("/api/binance/spot-prices")
    def spot_prices() -> JSONResponse:
        return _respond(fetcher.fetch(ResourceKind.FULL_PRICE_TABLE))

    @app.get("/api/binance/spot-price/{symbol}")
    def spot_price(symbol: str) -> JSONResponse:
        return _respond(fetcher.fetch(ResourceKind.SINGLE_PRICE, symbol))

    @app.get("/api/binance/trading-pairs")
    def trading_pairs() -> JSONResponse:
        return _respond(fetcher.fetch(ResourceKind.TRADING_PAIR_LIST))

    @app.get("/api/binance/exchange-info")
    def exchange_info() -> JSONResponse:
        return _respond(fetcher.fetch(ResourceKind.EXCHANGE_METADATA))

    @app.get("/health")
    def health() -> Dict[str, Any]:
        primary = {name: h.to_dict() for name, h in fetcher.primary.get_health().items()}
        fallback_health = getattr(fetcher.fallback, "health", None)
        return {
            "status": "ok",
            "version": __version__,
            "primary": primary,
            "fallback": fallback_health.to_dict() if fallback_health is not None else None,
            "cache": fetcher.cache.ages_ms(fetcher.clock()),
        }

    return app
