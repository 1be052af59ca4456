"""Config loading: defaults <- config.yaml <- env."""
from __future__ import annotations

import pytest

from market_proxy import config
from market_proxy.core.errors import ConfigError

_ENV_VARS = (
    "HOST",
    "PORT",
    "MARKET_PROXY_CONFIG",
    "MARKET_PROXY_PRIMARY_URLS",
    "MARKET_PROXY_FALLBACK_URL",
    "MARKET_PROXY_TIMEOUT_MS",
    "MARKET_PROXY_CACHE_WINDOW_MS",
    "MARKET_PROXY_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # point at a file that does not exist so a repo-level config.yaml is ignored
    monkeypatch.setenv("MARKET_PROXY_CONFIG", str(tmp_path / "absent.yaml"))


def test_defaults():
    assert config.server_port() == 3000
    assert config.primary_base_urls() == [
        "https://api.binance.com",
        "https://api1.binance.com",
        "https://api2.binance.com",
        "https://api3.binance.com",
    ]
    assert config.fallback_base_url() == "https://api.coingecko.com/api/v3"
    assert config.timeout_ms() == 5000
    assert config.freshness_window_ms() == 60_000
    assert config.primary_api_prefix() == "/api/v3"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MARKET_PROXY_PRIMARY_URLS", "https://a.example, https://b.example")
    monkeypatch.setenv("MARKET_PROXY_TIMEOUT_MS", "1500")
    monkeypatch.setenv("MARKET_PROXY_CACHE_WINDOW_MS", "0")

    assert config.server_port() == 8080
    assert config.primary_base_urls() == ["https://a.example", "https://b.example"]
    assert config.timeout_ms() == 1500
    assert config.freshness_window_ms() == 0


def test_yaml_merged_under_env(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n  port: 4000\nfallback:\n  vs_currency: eur\ncache:\n  freshness_window_ms: 30000\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("MARKET_PROXY_CONFIG", str(path))
    monkeypatch.setenv("MARKET_PROXY_CACHE_WINDOW_MS", "10000")

    cfg = config.get_config()
    assert cfg["server"]["port"] == 4000
    assert cfg["server"]["host"] == "0.0.0.0"
    assert cfg["fallback"]["vs_currency"] == "eur"
    assert cfg["fallback"]["exchange_id"] == "binance"
    assert cfg["cache"]["freshness_window_ms"] == 10000


def test_bad_integer_env(monkeypatch):
    monkeypatch.setenv("MARKET_PROXY_TIMEOUT_MS", "soon")
    with pytest.raises(ConfigError, match="MARKET_PROXY_TIMEOUT_MS"):
        config.get_config()


def test_empty_primary_list_rejected(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("primary:\n  base_urls: []\n", encoding="utf-8")
    monkeypatch.setenv("MARKET_PROXY_CONFIG", str(path))
    with pytest.raises(ConfigError):
        config.get_config()


def test_non_positive_timeout_rejected(monkeypatch):
    monkeypatch.setenv("MARKET_PROXY_TIMEOUT_MS", "0")
    with pytest.raises(ConfigError):
        config.get_config()


@pytest.mark.parametrize(
    "yaml_text, key",
    [
        ("http:\n  timeout_ms: abc\n", "http.timeout_ms"),
        ("cache:\n  freshness_window_ms: [1]\n", "cache.freshness_window_ms"),
        ("server:\n  port: eighty\n", "server.port"),
    ],
)
def test_non_integer_yaml_value_is_config_error(monkeypatch, tmp_path, yaml_text, key):
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text, encoding="utf-8")
    monkeypatch.setenv("MARKET_PROXY_CONFIG", str(path))
    with pytest.raises(ConfigError, match=key):
        config.get_config()
