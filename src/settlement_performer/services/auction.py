"""Auction settlement handler."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from settlement_performer.exceptions import FieldValidationError
from settlement_performer.logging import get_logger
from settlement_performer.services.addresses import AUCTION_SERVICE_ADDRESS, resolve_address
from settlement_performer.services.commitment import format_commitment, hash_commitment
from settlement_performer.services.envelope import AUCTION_SETTLEMENT, encode_result
from settlement_performer.services.validators import (
    BYTES32_HEX_LENGTH,
    decode_hex_bytes,
    require_hex,
)

if TYPE_CHECKING:
    from settlement_performer.services.addresses import DestinationConfig
    from settlement_performer.services.envelope import AuctionTask

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuctionSettlementResult:
    kind: str
    auction_id: int
    oracle_update_id: str
    pool_id: str
    commitment: str
    auction_service: str

    def to_bytes(self) -> bytes:
        return encode_result(asdict(self))


def settle_auction(task: AuctionTask, destinations: DestinationConfig) -> AuctionSettlementResult:
    """Validate an auction task and commit to (settlement_data, oracle_update_id, pool_id).

    Checks run in a fixed order and stop at the first failure. Nothing is
    resolved or hashed until every field check has passed.

    Raises:
        FieldValidationError: A malformed field.
        ConfigurationError: No auction service address available.
    """
    logger.info(
        "Auction settlement task",
        extra={
            "auction_id": task.auction_id,
            "pool_id": task.pool_id,
            "oracle_update_id": task.oracle_update_id,
        },
    )

    require_hex("pool_id", task.pool_id, BYTES32_HEX_LENGTH)
    require_hex("oracle_update_id", task.oracle_update_id, BYTES32_HEX_LENGTH)
    require_hex("app_id", task.app_id, BYTES32_HEX_LENGTH)
    require_hex("image_digest", task.image_digest, BYTES32_HEX_LENGTH)
    try:
        decode_hex_bytes(task.settlement_data)
    except ValueError as exc:
        raise FieldValidationError(
            "settlement_data", f"settlement_data invalid hex: {exc}"
        ) from exc

    auction_service = resolve_address(
        task.auction_service,
        AUCTION_SERVICE_ADDRESS,
        destinations,
        field_name="auction_service",
    )

    commitment = hash_commitment(task.settlement_data, task.oracle_update_id, task.pool_id)
    return AuctionSettlementResult(
        kind=AUCTION_SETTLEMENT,
        auction_id=task.auction_id,
        oracle_update_id=task.oracle_update_id,
        pool_id=task.pool_id,
        commitment=format_commitment(commitment),
        auction_service=auction_service,
    )
