"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from weatherproxy.app import create_app
from weatherproxy.config.defaults import DEFAULT_CITIES
from weatherproxy.config.schema import ProxyConfig, UpstreamConfig


@pytest.fixture
def default_config() -> ProxyConfig:
    """Default cities, upstream pointed at a test host."""
    return ProxyConfig(
        upstream=UpstreamConfig(base_url="https://test-cwa.example.com/api"),
        cities=DEFAULT_CITIES,
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "upstream": {"timeout_seconds": 5.0},
        "server": {"port": 8080},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def cwa_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "cwa_forecast_36h.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("CWA_API_KEY", "test-key-123")
    return "test-key-123"


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CWA_API_KEY", raising=False)


@pytest.fixture
def client(default_config: ProxyConfig) -> TestClient:
    return TestClient(create_app(default_config))
