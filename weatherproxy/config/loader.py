"""YAML config loader with default-city injection and credential lookup."""

import os
from pathlib import Path
from typing import Any

import yaml

from weatherproxy.config.defaults import DEFAULT_CITIES
from weatherproxy.config.schema import ProxyConfig, UpstreamConfig

DEFAULT_CONFIG_PATH = "ops/configs/default.yaml"
CONFIG_PATH_ENV = "WEATHERPROXY_CONFIG"


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))


def load_config(path: str | Path | None = None) -> ProxyConfig:
    """Load and validate config from a YAML file.

    A missing file behaves like an empty one. If no cities are specified,
    injects DEFAULT_CITIES.
    """
    path = Path(path) if path is not None else default_config_path()
    raw: dict[str, Any] = {}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    if "cities" not in raw or not raw["cities"]:
        raw["cities"] = [c.model_dump() for c in DEFAULT_CITIES]

    return ProxyConfig(**raw)


def get_config_value(config: ProxyConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'upstream.timeout_seconds'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def resolve_api_key(upstream: UpstreamConfig) -> str:
    """Read the upstream credential from the environment. Empty if unset."""
    return os.environ.get(upstream.api_key_env, "").strip()
