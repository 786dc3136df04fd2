"""
Configuration management for the settlement performer.

Loads configuration from YAML with ZERO defaults.
Every value must be explicitly specified or startup fails.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict

REDACTION_MARKER = "***REDACTED***"

_SENSITIVE_KEYS: frozenset[str] = frozenset({"l1_rpc_url", "l2_rpc_url"})

# src/settlement_performer/config.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class ServiceConfig(BaseModel):
    """Service identity configuration."""

    model_config = ConfigDict(extra="forbid")
    name: str
    version: str


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(extra="forbid")
    host: str
    port: int
    log_level: str


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")
    level: str
    directory: str


class RequestConfig(BaseModel):
    """Request handling configuration."""

    model_config = ConfigDict(extra="forbid")
    max_body_size: int


class DestinationsConfig(BaseModel):
    """
    Default destination contract addresses.

    Null means "not configured here"; the matching environment variable
    may still provide it. Tasks can always override per request.
    """

    model_config = ConfigDict(extra="forbid")
    auction_service_address: str | None
    settlement_vault_address: str | None


class ChainConfig(BaseModel):
    """JSON-RPC endpoints used for auxiliary chain lookups."""

    model_config = ConfigDict(extra="forbid")
    l1_rpc_url: str | None
    l2_rpc_url: str | None
    timeout_seconds: int


class Settings(BaseModel):
    """
    Root configuration container.

    All fields are REQUIRED. No defaults exist.
    Missing fields cause immediate startup failure.
    """

    model_config = ConfigDict(extra="forbid")
    service: ServiceConfig
    server: ServerConfig
    logging: LoggingConfig
    request: RequestConfig
    destinations: DestinationsConfig
    chain: ChainConfig
    contracts: dict[str, str]


def get_config_path() -> Path:
    """Determine configuration file path: CONFIG_PATH, else config.yaml at the project root."""
    env_path = os.environ.get("CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return _PROJECT_ROOT / "config.yaml"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings from the YAML config file."""
    config_path = get_config_path()
    raw = yaml.safe_load(config_path.read_text())
    if not isinstance(raw, dict):
        msg = f"Invalid config file: {config_path}"
        raise ValueError(msg)
    return Settings(**raw)


def clear_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the file."""
    get_settings.cache_clear()


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: (REDACTION_MARKER if key in _SENSITIVE_KEYS and item else _redact(item))
            for key, item in value.items()
        }
    return value


def get_safe_config() -> dict[str, Any]:
    """Get configuration with sensitive values redacted."""
    return _redact(get_settings().model_dump())
