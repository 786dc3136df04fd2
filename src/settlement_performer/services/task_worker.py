"""
Task worker: the performer entry points called by the transport.

validate_task() checks a request without producing a result;
handle_task() decodes, dispatches by kind and returns the result bytes.
Both are pure functions of the request and the startup configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from settlement_performer.exceptions import (
    MissingPayloadError,
    MissingTaskIdError,
    TaskError,
    UnsupportedTaskKindError,
)
from settlement_performer.logging import get_logger
from settlement_performer.services.auction import settle_auction
from settlement_performer.services.envelope import (
    AuctionSettlement,
    InsurancePayout,
    decode_task_envelope,
)
from settlement_performer.services.insurance import settle_insurance_payout

if TYPE_CHECKING:
    from settlement_performer.services.addresses import DestinationConfig
    from settlement_performer.services.envelope import TaskEnvelope


class ChainLookup(Protocol):
    """Resolves named on-chain contracts. Optional; used only for logging."""

    def get_task_avs_registrar(self) -> str: ...

    def list_contracts(self) -> list[str]: ...


@dataclass(frozen=True)
class TaskRequest:
    task_id: bytes
    payload: bytes


@dataclass(frozen=True)
class TaskResponse:
    task_id: bytes
    result: bytes


class TaskWorker:
    """Validates and handles settlement tasks against a fixed destination config."""

    def __init__(
        self,
        destinations: DestinationConfig,
        chain_lookup: ChainLookup | None = None,
    ) -> None:
        self._destinations = destinations
        self._chain_lookup = chain_lookup
        self._logger = get_logger(__name__)

    def validate_task(self, request: TaskRequest) -> None:
        """
        Reject a request that could not be handled.

        Raises:
            MissingTaskIdError: Empty task id.
            MissingPayloadError: Empty payload.
            TaskError: Any envelope decode or attestation failure.
        """
        self._logger.info(
            "Validating task",
            extra={"task_id": request.task_id.hex(), "payload_bytes": len(request.payload)},
        )
        if not request.task_id:
            raise MissingTaskIdError()
        if not request.payload:
            raise MissingPayloadError()
        decode_task_envelope(request.payload)

    def handle_task(self, request: TaskRequest) -> TaskResponse:
        """
        Produce the settlement result for a request.

        Raises:
            TaskError: Decode, field, configuration or routing failure. No
                result is produced when any check fails.
        """
        self._logger.info(
            "Handling task",
            extra={"task_id": request.task_id.hex(), "payload_bytes": len(request.payload)},
        )
        envelope = decode_task_envelope(request.payload)
        try:
            result = self._dispatch(envelope)
        except TaskError as exc:
            self._logger.warning(
                "Task rejected",
                extra={
                    "task_id": request.task_id.hex(),
                    "kind": envelope.kind,
                    "error_code": exc.error,
                    "category": exc.category,
                },
            )
            raise

        self._log_chain_context()
        return TaskResponse(task_id=request.task_id, result=result)

    def _dispatch(self, envelope: TaskEnvelope) -> bytes:
        if isinstance(envelope, AuctionSettlement):
            return settle_auction(envelope.task, self._destinations).to_bytes()
        if isinstance(envelope, InsurancePayout):
            return settle_insurance_payout(envelope.task, self._destinations).to_bytes()
        raise UnsupportedTaskKindError(envelope.kind)

    def _log_chain_context(self) -> None:
        if self._chain_lookup is None:
            return
        try:
            registrar = self._chain_lookup.get_task_avs_registrar()
        except LookupError as exc:
            self._logger.warning("TaskAVSRegistrar not found", extra={"reason": str(exc)})
        else:
            self._logger.info("TaskAVSRegistrar", extra={"address": registrar})
        self._logger.info(
            "Available contracts",
            extra={"contracts": self._chain_lookup.list_contracts()},
        )
