"""
Task envelope codec.

A task payload is a JSON object::

    {"kind": "auction_settlement" | "insurance_payout" | ...,
     "auction": {...} | "insurance": {...},
     "meta": {"k": "v"}}

decode_task_envelope() turns it into one of three envelope variants. Known
kinds must carry their task object with both attestation identifiers set;
unknown kinds decode to UnrecognizedTask and are rejected later by the
task worker.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, Final

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from settlement_performer.exceptions import (
    EnvelopeDecodeError,
    MissingAttestationError,
    MissingTaskBodyError,
)

AUCTION_SETTLEMENT: Final = "auction_settlement"
INSURANCE_PAYOUT: Final = "insurance_payout"

SUPPORTED_KINDS: tuple[str, ...] = (AUCTION_SETTLEMENT, INSURANCE_PAYOUT)


def _null_as(zero: Callable[[], Any]) -> BeforeValidator:
    """JSON null decodes to the zero value, as an absent field does."""

    def convert(value: Any) -> Any:
        return zero() if value is None else value

    return BeforeValidator(convert)


WireStr = Annotated[str, _null_as(str)]
Uint64 = Annotated[int, _null_as(int), Field(ge=0, le=2**64 - 1)]
WireStrList = Annotated[list[WireStr], _null_as(list)]


class AuctionTask(BaseModel):
    """Auction settlement inputs. Absent fields take their zero value."""

    model_config = ConfigDict(strict=True, frozen=True)

    auction_id: Uint64 = 0
    pool_id: WireStr = ""  # bytes32 hex
    oracle_update_id: WireStr = ""  # bytes32 hex
    settlement_data: WireStr = ""  # hex payload destined for the auction service
    expected_bid_wei: WireStr = ""  # decimal or hex, not interpreted here
    app_id: WireStr = ""  # bytes32 hex
    image_digest: WireStr = ""  # bytes32 hex
    submission_nonce: Uint64 = 0
    auction_service: WireStr = ""
    settlement_vault: WireStr = ""


class InsuranceTask(BaseModel):
    """Insurance payout inputs. Absent fields take their zero value."""

    model_config = ConfigDict(strict=True, frozen=True)

    policy_batch_id: WireStr = ""
    events: WireStrList = Field(default_factory=list)
    seed: Uint64 = 0
    amount_wei: WireStr = ""
    app_id: WireStr = ""
    image_digest: WireStr = ""
    settlement_vault: WireStr = ""


class _WireEnvelope(BaseModel):
    model_config = ConfigDict(strict=True)

    kind: WireStr = ""
    auction: AuctionTask | None = None
    insurance: InsuranceTask | None = None
    meta: dict[str, WireStr] | None = None


@dataclass(frozen=True)
class AuctionSettlement:
    task: AuctionTask
    metadata: dict[str, str] = field(default_factory=dict)

    kind: ClassVar[str] = AUCTION_SETTLEMENT


@dataclass(frozen=True)
class InsurancePayout:
    task: InsuranceTask
    metadata: dict[str, str] = field(default_factory=dict)

    kind: ClassVar[str] = INSURANCE_PAYOUT


@dataclass(frozen=True)
class UnrecognizedTask:
    """Any kind this worker has no handler for."""

    kind: str
    metadata: dict[str, str] = field(default_factory=dict)


TaskEnvelope = AuctionSettlement | InsurancePayout | UnrecognizedTask


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return str(first["msg"])


def decode_task_envelope(data: bytes) -> TaskEnvelope:
    """Decode and check a raw task payload.

    Raises:
        EnvelopeDecodeError: Malformed JSON or wrongly typed fields.
        MissingTaskBodyError: A known kind without its task object.
        MissingAttestationError: app_id or image_digest empty.
    """
    try:
        wire = _WireEnvelope.model_validate_json(data)
    except ValidationError as exc:
        raise EnvelopeDecodeError(_describe(exc)) from exc

    metadata = dict(wire.meta) if wire.meta else {}

    if wire.kind == AUCTION_SETTLEMENT:
        if wire.auction is None:
            raise MissingTaskBodyError(wire.kind, "auction")
        if not wire.auction.app_id or not wire.auction.image_digest:
            raise MissingAttestationError("auction")
        return AuctionSettlement(task=wire.auction, metadata=metadata)

    if wire.kind == INSURANCE_PAYOUT:
        if wire.insurance is None:
            raise MissingTaskBodyError(wire.kind, "insurance")
        if not wire.insurance.app_id or not wire.insurance.image_digest:
            raise MissingAttestationError("insurance")
        return InsurancePayout(task=wire.insurance, metadata=metadata)

    return UnrecognizedTask(kind=wire.kind, metadata=metadata)


# Escapes applied by Go's encoding/json inside strings; every other
# non-ASCII character is written as raw UTF-8.
_GO_STRING_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def encode_result(fields: Mapping[str, Any]) -> bytes:
    """Serialize a task result as compact, key-sorted JSON in UTF-8.

    The bytes match what a Go performer marshals from the same map, so
    executors signing results from either implementation agree.
    """
    text = json.dumps(fields, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return text.translate(_GO_STRING_ESCAPES).encode("utf-8")
