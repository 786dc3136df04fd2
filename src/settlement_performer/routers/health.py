"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from settlement_performer.core.state import get_app_state
from settlement_performer.schemas import HealthResponse
from settlement_performer.services.envelope import SUPPORTED_KINDS

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health and report what the performer is wired to."""
    state = get_app_state()
    contracts: list[str] = []
    if state.contract_store is not None:
        contracts = state.contract_store.list_contracts()
    return HealthResponse(
        status="ok",
        uptime_seconds=state.uptime_seconds,
        started_at=state.started_at,
        supported_kinds=list(SUPPORTED_KINDS),
        contracts=contracts,
        chains=dict(state.chain_ids),
    )
