from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .settings import Settings

# Conventional per-exchange variable names, applied on top of CHAINSTAT_ overrides.
CREDENTIAL_ENV_VARS: dict[str, tuple[str, str]] = {
    "OKX_API_KEY": ("okx", "api_key"),
    "OKX_API_SECRET": ("okx", "api_secret"),
    "OKX_API_PASSPHRASE": ("okx", "passphrase"),
    "OKX_API_PROJECT": ("okx", "project"),
    "BINANCE_API_KEY": ("binance", "api_key"),
    "BINANCE_API_SECRET": ("binance", "api_secret"),
    "BYBIT_API_KEY": ("bybit", "api_key"),
    "BYBIT_API_SECRET": ("bybit", "api_secret"),
    "GATE_API_KEY": ("gate", "api_key"),
    "GATE_API_SECRET": ("gate", "api_secret"),
    "BITGET_API_KEY": ("bitget", "api_key"),
    "BITGET_API_SECRET": ("bitget", "api_secret"),
    "BITGET_API_PASSPHRASE": ("bitget", "passphrase"),
}


def _deep_set(obj: dict[str, Any], path: list[str], value: Any) -> None:
    cur: dict[str, Any] = obj
    for key in path[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[key] = nxt
        cur = nxt
    cur[path[-1]] = value


def _parse_env_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _apply_env_overrides(data: dict[str, Any], *, prefix: str = "CHAINSTAT_") -> dict[str, Any]:
    merged: dict[str, Any] = dict(data)

    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        if remainder in {"CONFIG", "LOG_LEVEL"}:
            continue

        path = [p.lower() for p in remainder.split("__") if p]
        if not path:
            continue

        _deep_set(merged, path, _parse_env_value(raw_value))

    return merged


def _apply_conventional_env(data: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(data)

    for key, (exchange, field) in CREDENTIAL_ENV_VARS.items():
        value = os.environ.get(key)
        if value:
            _deep_set(merged, ["exchanges", exchange, "credentials", field], value)

    timeout = os.environ.get("API_TIMEOUT")
    if timeout:
        _deep_set(merged, ["collector", "timeout_ms"], _parse_env_value(timeout))

    return merged


def load_settings(config_path: str | Path | None = None) -> Settings:
    if config_path is None:
        config_path = os.environ.get("CHAINSTAT_CONFIG", "config.yml")

    path = Path(config_path)
    if path.exists():
        raw = path.read_text(encoding="utf-8")
        loaded = yaml.safe_load(raw)
        if loaded is None:
            data: dict[str, Any] = {}
        elif isinstance(loaded, dict):
            data = loaded
        else:
            raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    else:
        data = {}

    data = _apply_env_overrides(data)
    data = _apply_conventional_env(data)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
