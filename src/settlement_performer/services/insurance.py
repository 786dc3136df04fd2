"""Insurance payout handler."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from settlement_performer.logging import get_logger
from settlement_performer.services.addresses import SETTLEMENT_VAULT_ADDRESS, resolve_address
from settlement_performer.services.commitment import format_commitment, hash_commitment
from settlement_performer.services.envelope import INSURANCE_PAYOUT, encode_result
from settlement_performer.services.validators import BYTES32_HEX_LENGTH, require_hex

if TYPE_CHECKING:
    from settlement_performer.services.addresses import DestinationConfig
    from settlement_performer.services.envelope import InsuranceTask

logger = get_logger(__name__)

EVENT_SEPARATOR = ","


@dataclass(frozen=True)
class InsurancePayoutResult:
    kind: str
    policy_batch_id: str
    payout_commitment: str
    seed: int
    settlement_vault: str

    def to_bytes(self) -> bytes:
        return encode_result(asdict(self))


def settle_insurance_payout(
    task: InsuranceTask, destinations: DestinationConfig
) -> InsurancePayoutResult:
    """Validate an insurance task and commit to (events, seed, amount_wei).

    Events are joined with a bare comma. An event that itself contains a
    comma is indistinguishable from two events; existing commitments depend
    on this encoding, so it is kept as is.

    Raises:
        FieldValidationError: app_id or image_digest malformed.
        ConfigurationError: No settlement vault address available.
    """
    logger.info(
        "Insurance payout task",
        extra={
            "batch": task.policy_batch_id,
            "events": list(task.events),
            "seed": task.seed,
        },
    )

    require_hex("app_id", task.app_id, BYTES32_HEX_LENGTH)
    require_hex("image_digest", task.image_digest, BYTES32_HEX_LENGTH)

    settlement_vault = resolve_address(
        task.settlement_vault,
        SETTLEMENT_VAULT_ADDRESS,
        destinations,
        field_name="settlement_vault",
    )

    commitment = hash_commitment(
        EVENT_SEPARATOR.join(task.events),
        str(task.seed),
        task.amount_wei,
    )
    return InsurancePayoutResult(
        kind=INSURANCE_PAYOUT,
        policy_batch_id=task.policy_batch_id,
        payout_commitment=format_commitment(commitment),
        seed=task.seed,
        settlement_vault=settlement_vault,
    )
