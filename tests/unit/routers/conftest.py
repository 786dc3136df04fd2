"""Router test fixtures: app with lifespan and async client."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient

from settlement_performer.app import create_app
from settlement_performer.config import clear_settings_cache
from settlement_performer.core.lifespan import lifespan
from settlement_performer.core.state import reset_app_state

from task_samples import DEFAULT_AUCTION_SERVICE, DEFAULT_SETTLEMENT_VAULT

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

MAX_BODY_SIZE = 8192
REGISTRAR_ADDRESS = "0x00000000000000000000000000000000000000aa"

_ENV_OVERRIDES = (
    "AUCTION_SERVICE_ADDRESS",
    "SETTLEMENT_VAULT_ADDRESS",
    "L1_RPC_URL",
    "L2_RPC_URL",
)


@pytest.fixture
async def app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[Any]:
    """Create a test app with both destinations configured and no chain RPC."""
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)

    log_dir = tmp_path / "logs"
    config_content = f"""\
service:
  name: "settlement-performer"
  version: "0.1.0"
server:
  host: "0.0.0.0"
  port: 8080
  log_level: "info"
logging:
  level: "WARNING"
  directory: "{log_dir}"
request:
  max_body_size: {MAX_BODY_SIZE}
destinations:
  auction_service_address: "{DEFAULT_AUCTION_SERVICE}"
  settlement_vault_address: "{DEFAULT_SETTLEMENT_VAULT}"
chain:
  l1_rpc_url: null
  l2_rpc_url: null
  timeout_seconds: 1
contracts:
  TaskAVSRegistrar: "{REGISTRAR_ADDRESS}"
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)

    old_config = os.environ.get("CONFIG_PATH")
    os.environ["CONFIG_PATH"] = str(config_path)

    clear_settings_cache()
    reset_app_state()

    test_app = create_app()
    async with lifespan(test_app):
        yield test_app

    reset_app_state()
    clear_settings_cache()
    if old_config is None:
        os.environ.pop("CONFIG_PATH", None)
    else:
        os.environ["CONFIG_PATH"] = old_config


@pytest.fixture
async def client(app: Any) -> AsyncIterator[AsyncClient]:
    """Create an async HTTP client for the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
