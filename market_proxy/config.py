"""
Load config from config.yaml with optional env overrides.
Single source of truth for listen address, upstream hosts, timeout and cache window.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List

import yaml

from .core.errors import ConfigError

DEFAULT_PRIMARY_URLS = [
    "https://api.binance.com",
    "https://api1.binance.com",
    "https://api2.binance.com",
    "https://api3.binance.com",
]

# Defaults if no YAML or env
_DEFAULTS = {
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
        "cors_origins": ["*"],
    },
    "primary": {
        "base_urls": DEFAULT_PRIMARY_URLS,
        "api_prefix": "/api/v3",
    },
    "fallback": {
        "base_url": "https://api.coingecko.com/api/v3",
        "exchange_id": "binance",
        "vs_currency": "usd",
    },
    "http": {"timeout_ms": 5000},
    "cache": {"freshness_window_ms": 60_000},
}


def _config_yaml_path() -> Path:
    """MARKET_PROXY_CONFIG if set, else config.yaml at repo root (parent of package dir)."""
    override = os.environ.get("MARKET_PROXY_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    config_path = _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _split_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_overrides() -> dict:
    overrides: dict = {}
    host = os.environ.get("HOST")
    if host:
        overrides.setdefault("server", {})["host"] = host
    port = _env_int("PORT")
    if port is not None:
        overrides.setdefault("server", {})["port"] = port
    origins = os.environ.get("MARKET_PROXY_CORS_ORIGINS")
    if origins:
        overrides.setdefault("server", {})["cors_origins"] = _split_list(origins)
    urls = os.environ.get("MARKET_PROXY_PRIMARY_URLS")
    if urls:
        overrides.setdefault("primary", {})["base_urls"] = _split_list(urls)
    fallback_url = os.environ.get("MARKET_PROXY_FALLBACK_URL")
    if fallback_url:
        overrides.setdefault("fallback", {})["base_url"] = fallback_url
    timeout = _env_int("MARKET_PROXY_TIMEOUT_MS")
    if timeout is not None:
        overrides.setdefault("http", {})["timeout_ms"] = timeout
    window = _env_int("MARKET_PROXY_CACHE_WINDOW_MS")
    if window is not None:
        overrides.setdefault("cache", {})["freshness_window_ms"] = window
    return overrides


def _as_int(cfg: dict, section: str, key: str) -> int:
    raw = cfg[section][key]
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{section}.{key} must be an integer, got {raw!r}") from None


def _validate(cfg: dict) -> dict:
    urls = cfg["primary"]["base_urls"]
    if not isinstance(urls, list) or not urls:
        raise ConfigError("primary.base_urls must be a non-empty list")
    if _as_int(cfg, "server", "port") <= 0:
        raise ConfigError("server.port must be positive")
    if _as_int(cfg, "http", "timeout_ms") <= 0:
        raise ConfigError("http.timeout_ms must be positive")
    if _as_int(cfg, "cache", "freshness_window_ms") < 0:
        raise ConfigError("cache.freshness_window_ms must not be negative")
    return cfg


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return _validate(merged)


# Convenience accessors
def server_host() -> str:
    return str(get_config()["server"]["host"])


def server_port() -> int:
    return int(get_config()["server"]["port"])


def cors_origins() -> List[str]:
    return list(get_config()["server"]["cors_origins"])


def primary_base_urls() -> List[str]:
    return list(get_config()["primary"]["base_urls"])


def primary_api_prefix() -> str:
    return str(get_config()["primary"]["api_prefix"])


def fallback_base_url() -> str:
    return str(get_config()["fallback"]["base_url"])


def fallback_settings() -> dict[str, Any]:
    return dict(get_config()["fallback"])


def timeout_ms() -> int:
    return int(get_config()["http"]["timeout_ms"])


def freshness_window_ms() -> int:
    return int(get_config()["cache"]["freshness_window_ms"])
