"""
Service error types.

Every failure the performer reports is a ServiceError carrying a
machine-readable error code, a human-readable message, the HTTP status
used by the transport, and a details dict. Task errors additionally carry
a category from the taxonomy below.
"""

from __future__ import annotations

from typing import Any, Literal

ErrorCategory = Literal[
    "structural",
    "schema",
    "field_validation",
    "configuration",
    "routing",
]


class ServiceError(Exception):
    """Base error with an error code, message, HTTP status and details."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details: dict[str, Any] = details if details is not None else {}


class TaskError(ServiceError):
    """A task was rejected. Never retried internally."""

    category: ErrorCategory = "structural"


# --- structural ---------------------------------------------------------------


class MissingTaskIdError(TaskError):
    def __init__(self) -> None:
        super().__init__("MISSING_TASK_ID", "missing task id", 400)


class MissingPayloadError(TaskError):
    def __init__(self) -> None:
        super().__init__("MISSING_PAYLOAD", "missing task payload", 400)


class EnvelopeDecodeError(TaskError):
    def __init__(self, reason: str) -> None:
        super().__init__(
            "INVALID_PAYLOAD",
            f"invalid task payload: {reason}",
            400,
            {"reason": reason},
        )


# --- schema -------------------------------------------------------------------


class MissingTaskBodyError(TaskError):
    """The kind selects a domain but the matching task object is absent."""

    category: ErrorCategory = "schema"

    def __init__(self, kind: str, section: str) -> None:
        super().__init__(
            "MISSING_TASK_BODY",
            f"{section} task missing",
            400,
            {"kind": kind, "section": section},
        )


class MissingAttestationError(TaskError):
    category: ErrorCategory = "schema"

    def __init__(self, section: str) -> None:
        super().__init__(
            "MISSING_ATTESTATION",
            f"{section} task missing app attestation fields",
            400,
            {"section": section},
        )


# --- field validation ---------------------------------------------------------


class FieldValidationError(TaskError):
    category: ErrorCategory = "field_validation"

    def __init__(self, field: str, message: str) -> None:
        super().__init__("INVALID_FIELD", message, 400, {"field": field})
        self.field = field


# --- configuration ------------------------------------------------------------


class ConfigurationError(TaskError):
    """No destination address from either the task override or the configuration."""

    category: ErrorCategory = "configuration"

    def __init__(self, config_key: str, field: str) -> None:
        super().__init__(
            "ADDRESS_MISSING",
            f"{field} address missing (env {config_key})",
            500,
            {"config_key": config_key, "field": field},
        )
        self.config_key = config_key


# --- routing ------------------------------------------------------------------


class UnsupportedTaskKindError(TaskError):
    category: ErrorCategory = "routing"

    def __init__(self, kind: str) -> None:
        super().__init__(
            "UNSUPPORTED_TASK_KIND",
            f"unsupported task kind: {kind}",
            400,
            {"kind": kind},
        )
        self.kind = kind
