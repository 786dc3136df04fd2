"""Settlement task validation and commitment logic."""

from settlement_performer.services.addresses import DestinationConfig, resolve_address
from settlement_performer.services.commitment import hash_commitment
from settlement_performer.services.envelope import decode_task_envelope
from settlement_performer.services.task_worker import TaskRequest, TaskResponse, TaskWorker

__all__ = [
    "DestinationConfig",
    "TaskRequest",
    "TaskResponse",
    "TaskWorker",
    "decode_task_envelope",
    "hash_commitment",
    "resolve_address",
]
