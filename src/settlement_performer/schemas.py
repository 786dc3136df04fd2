"""Pydantic request/response models for the API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Response model for GET /health."""

    model_config = ConfigDict(extra="forbid")
    status: Literal["ok"]
    uptime_seconds: float
    started_at: str
    supported_kinds: list[str]
    contracts: list[str]
    chains: dict[str, int | None]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    model_config = ConfigDict(extra="forbid")
    error: str
    message: str
    details: dict[str, object]


class ValidateTaskResponse(BaseModel):
    """Response model for POST /tasks/validate."""

    model_config = ConfigDict(extra="forbid")
    task_id: str
    valid: Literal[True]


class HandleTaskResponse(BaseModel):
    """Response model for POST /tasks/handle. Bytes fields are base64."""

    model_config = ConfigDict(extra="forbid")
    task_id: str
    result: str
