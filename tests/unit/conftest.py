"""Unit test fixtures: cache and logger resets between tests, sample task payloads."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from settlement_performer.config import clear_settings_cache
from settlement_performer.core.state import reset_app_state
from settlement_performer.logging import SERVICE_LOGGER_NAME
from settlement_performer.services.addresses import (
    AUCTION_SERVICE_ADDRESS,
    SETTLEMENT_VAULT_ADDRESS,
    DestinationConfig,
)

from task_samples import (
    APP_ID,
    DEFAULT_AUCTION_SERVICE,
    DEFAULT_SETTLEMENT_VAULT,
    IMAGE_DIGEST,
    ORACLE_UPDATE_ID,
    POOL_ID,
)


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear settings cache and app state between tests."""
    clear_settings_cache()
    reset_app_state()
    yield
    clear_settings_cache()
    reset_app_state()


@pytest.fixture(autouse=True)
def _reset_service_logger():
    """Undo setup_logging() so caplog sees records from later tests."""
    yield
    service_logger = logging.getLogger(SERVICE_LOGGER_NAME)
    for handler in list(service_logger.handlers):
        service_logger.removeHandler(handler)
        handler.close()
    service_logger.propagate = True
    service_logger.setLevel(logging.NOTSET)


@pytest.fixture
def auction_body() -> dict[str, Any]:
    """A complete, valid auction task object."""
    return {
        "auction_id": 1,
        "pool_id": POOL_ID,
        "oracle_update_id": ORACLE_UPDATE_ID,
        "settlement_data": "0xdead",
        "app_id": APP_ID,
        "image_digest": IMAGE_DIGEST,
    }


@pytest.fixture
def insurance_body() -> dict[str, Any]:
    """A complete, valid insurance task object."""
    return {
        "policy_batch_id": "b1",
        "events": ["e1", "e2"],
        "seed": 7,
        "amount_wei": "100",
        "app_id": APP_ID,
        "image_digest": IMAGE_DIGEST,
    }


@pytest.fixture
def auction_payload(auction_body: dict[str, Any]) -> bytes:
    return json.dumps({"kind": "auction_settlement", "auction": auction_body}).encode()


@pytest.fixture
def insurance_payload(insurance_body: dict[str, Any]) -> bytes:
    return json.dumps({"kind": "insurance_payout", "insurance": insurance_body}).encode()


@pytest.fixture
def destinations() -> DestinationConfig:
    """Both destination defaults configured."""
    return DestinationConfig(
        defaults={
            AUCTION_SERVICE_ADDRESS: DEFAULT_AUCTION_SERVICE,
            SETTLEMENT_VAULT_ADDRESS: DEFAULT_SETTLEMENT_VAULT,
        }
    )


@pytest.fixture
def empty_destinations() -> DestinationConfig:
    """No destination defaults configured."""
    return DestinationConfig()
