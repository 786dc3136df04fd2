"""Task endpoints: the performer side of the task RPC.

Request bodies carry the task id and payload as standard base64 strings,
following the JSON mapping of protobuf ``bytes`` fields. An omitted field
is the empty byte string.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from fastapi import APIRouter, Request

from settlement_performer.core.exceptions import ServiceError
from settlement_performer.core.state import get_app_state
from settlement_performer.schemas import ErrorResponse, HandleTaskResponse, ValidateTaskResponse
from settlement_performer.services.task_worker import TaskRequest, TaskWorker

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status_code: {"model": ErrorResponse} for status_code in (400, 413, 415, 500)
}


def _parse_json_body(raw_body: bytes) -> dict[str, Any]:
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ServiceError(
            "INVALID_JSON",
            "Request body is not valid JSON",
            400,
            {},
        ) from exc

    if not isinstance(data, dict):
        raise ServiceError(
            "INVALID_JSON",
            "Request body must be a JSON object",
            400,
            {},
        )

    return data


def _decode_bytes_field(data: dict[str, Any], field_name: str) -> bytes:
    value = data.get(field_name)
    if value is None:
        return b""

    if not isinstance(value, str):
        raise ServiceError(
            "INVALID_REQUEST",
            f"Field '{field_name}' must be a base64 string",
            400,
            {"field": field_name},
        )

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ServiceError(
            "INVALID_REQUEST",
            f"Field '{field_name}' is not valid base64",
            400,
            {"field": field_name},
        ) from exc


async def _read_task_request(request: Request) -> TaskRequest:
    data = _parse_json_body(await request.body())
    return TaskRequest(
        task_id=_decode_bytes_field(data, "task_id"),
        payload=_decode_bytes_field(data, "payload"),
    )


def _get_worker() -> TaskWorker:
    state = get_app_state()
    if state.task_worker is None:
        msg = "Task worker not initialized"
        raise RuntimeError(msg)
    return state.task_worker


@router.post(
    "/tasks/validate", response_model=ValidateTaskResponse, responses=_ERROR_RESPONSES
)
async def validate_task(request: Request) -> ValidateTaskResponse:
    """Check that a task could be handled, without producing a result."""
    task_request = await _read_task_request(request)
    _get_worker().validate_task(task_request)
    return ValidateTaskResponse(
        task_id=base64.b64encode(task_request.task_id).decode("ascii"),
        valid=True,
    )


@router.post("/tasks/handle", response_model=HandleTaskResponse, responses=_ERROR_RESPONSES)
async def handle_task(request: Request) -> HandleTaskResponse:
    """Handle a task and return its settlement result."""
    task_request = await _read_task_request(request)
    response = _get_worker().handle_task(task_request)
    return HandleTaskResponse(
        task_id=base64.b64encode(response.task_id).decode("ascii"),
        result=base64.b64encode(response.result).decode("ascii"),
    )
