"""Application lifecycle management."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from settlement_performer.config import get_settings
from settlement_performer.core.state import init_app_state
from settlement_performer.logging import get_logger, setup_logging
from settlement_performer.services.addresses import (
    AUCTION_SERVICE_ADDRESS,
    SETTLEMENT_VAULT_ADDRESS,
    DestinationConfig,
)
from settlement_performer.services.chain_client import ChainRpcClient, ChainRpcError
from settlement_performer.services.contract_store import ContractStore
from settlement_performer.services.task_worker import TaskWorker

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    # === STARTUP ===
    settings = get_settings()

    setup_logging(settings.logging.level, settings.service.name, settings.logging.directory)
    logger = get_logger(__name__)

    state = init_app_state()

    # Destination defaults are frozen here; tasks only ever read them
    destinations = DestinationConfig.from_sources(
        {
            AUCTION_SERVICE_ADDRESS: settings.destinations.auction_service_address,
            SETTLEMENT_VAULT_ADDRESS: settings.destinations.settlement_vault_address,
        },
        os.environ,
    )

    contract_store = ContractStore(settings.contracts)
    state.contract_store = contract_store
    state.task_worker = TaskWorker(destinations=destinations, chain_lookup=contract_store)

    # Connect to execution nodes when configured; an unreachable node is logged, not fatal
    rpc_urls = {
        "l1": os.environ.get("L1_RPC_URL") or settings.chain.l1_rpc_url,
        "l2": os.environ.get("L2_RPC_URL") or settings.chain.l2_rpc_url,
    }
    for name, rpc_url in rpc_urls.items():
        if not rpc_url:
            continue
        client = ChainRpcClient(rpc_url=rpc_url, timeout_seconds=settings.chain.timeout_seconds)
        state.chain_clients[name] = client
        try:
            state.chain_ids[name] = await client.chain_id()
        except ChainRpcError as exc:
            state.chain_ids[name] = None
            logger.error(
                "Failed to connect to chain RPC",
                extra={"chain": name, "reason": str(exc)},
            )
        else:
            logger.info(
                "Connected to chain RPC",
                extra={"chain": name, "chain_id": state.chain_ids[name]},
            )

    logger.info(
        "Service starting",
        extra={
            "service": settings.service.name,
            "version": settings.service.version,
            "port": settings.server.port,
            "configured_destinations": sorted(destinations.defaults),
            "contracts": contract_store.list_contracts(),
        },
    )

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Service shutting down", extra={"uptime_seconds": state.uptime_seconds})

    for client in state.chain_clients.values():
        await client.close()
