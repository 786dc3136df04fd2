"""Unit tests for the task worker (validate + handle)."""

from __future__ import annotations

import hashlib
import json
import logging
from unittest.mock import MagicMock

import pytest

from settlement_performer.exceptions import (
    ConfigurationError,
    EnvelopeDecodeError,
    FieldValidationError,
    MissingAttestationError,
    MissingPayloadError,
    MissingTaskIdError,
    UnsupportedTaskKindError,
)
from settlement_performer.services import task_worker as task_worker_module
from settlement_performer.services.contract_store import ContractNotFoundError, ContractStore
from settlement_performer.services.task_worker import TaskRequest, TaskResponse, TaskWorker
from task_samples import DEFAULT_AUCTION_SERVICE, ORACLE_UPDATE_ID, POOL_ID

TASK_ID = b"\x01\x02task"


@pytest.mark.unit
class TestValidateTask:
    def test_valid_auction(self, destinations, auction_payload) -> None:
        TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, auction_payload))

    def test_valid_insurance(self, destinations, insurance_payload) -> None:
        TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, insurance_payload))

    def test_empty_task_id(self, destinations, auction_payload) -> None:
        with pytest.raises(MissingTaskIdError) as exc_info:
            TaskWorker(destinations).validate_task(TaskRequest(b"", auction_payload))
        assert exc_info.value.message == "missing task id"

    def test_empty_payload(self, destinations) -> None:
        with pytest.raises(MissingPayloadError):
            TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, b""))

    def test_task_id_checked_before_payload(self, destinations) -> None:
        with pytest.raises(MissingTaskIdError):
            TaskWorker(destinations).validate_task(TaskRequest(b"", b""))

    def test_malformed_payload(self, destinations) -> None:
        with pytest.raises(EnvelopeDecodeError):
            TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, b"{oops"))

    def test_missing_attestation(self, destinations, auction_body) -> None:
        del auction_body["image_digest"]
        payload = json.dumps({"kind": "auction_settlement", "auction": auction_body}).encode()
        with pytest.raises(MissingAttestationError):
            TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, payload))

    def test_unknown_kind_passes_validation(self, destinations) -> None:
        """Unknown kinds are rejected by handle_task, not at validation."""
        TaskWorker(destinations).validate_task(TaskRequest(TASK_ID, b'{"kind":"unknown"}'))

    def test_field_format_not_checked(self, empty_destinations, auction_body) -> None:
        auction_body["pool_id"] = "0x11"
        payload = json.dumps({"kind": "auction_settlement", "auction": auction_body}).encode()
        TaskWorker(empty_destinations).validate_task(TaskRequest(TASK_ID, payload))


@pytest.mark.unit
class TestHandleTask:
    def test_auction_response(self, destinations, auction_payload) -> None:
        response = TaskWorker(destinations).handle_task(TaskRequest(TASK_ID, auction_payload))

        assert isinstance(response, TaskResponse)
        assert response.task_id == TASK_ID
        result = json.loads(response.result)
        expected = hashlib.sha256(b"0xdead" + ORACLE_UPDATE_ID.encode() + POOL_ID.encode())
        assert result["commitment"] == "0x" + expected.hexdigest()
        assert result["auction_service"] == DEFAULT_AUCTION_SERVICE

    def test_insurance_response(self, destinations, insurance_payload) -> None:
        response = TaskWorker(destinations).handle_task(TaskRequest(TASK_ID, insurance_payload))

        result = json.loads(response.result)
        assert result["payout_commitment"] == "0x" + hashlib.sha256(b"e1,e27100").hexdigest()
        assert result["policy_batch_id"] == "b1"

    def test_unknown_kind_invokes_no_handler(self, destinations, monkeypatch) -> None:
        """Scenario: kind "unknown" fails with unsupported task kind; no handler runs."""
        settle_auction = MagicMock()
        settle_insurance = MagicMock()
        monkeypatch.setattr(task_worker_module, "settle_auction", settle_auction)
        monkeypatch.setattr(task_worker_module, "settle_insurance_payout", settle_insurance)

        with pytest.raises(UnsupportedTaskKindError) as exc_info:
            TaskWorker(destinations).handle_task(TaskRequest(TASK_ID, b'{"kind":"unknown"}'))

        assert exc_info.value.message == "unsupported task kind: unknown"
        assert exc_info.value.category == "routing"
        settle_auction.assert_not_called()
        settle_insurance.assert_not_called()

    def test_handler_errors_propagate(self, destinations, auction_body) -> None:
        auction_body["pool_id"] = POOL_ID[:64]
        payload = json.dumps({"kind": "auction_settlement", "auction": auction_body}).encode()
        with pytest.raises(FieldValidationError) as exc_info:
            TaskWorker(destinations).handle_task(TaskRequest(TASK_ID, payload))
        assert exc_info.value.field == "pool_id"

    def test_configuration_error(self, empty_destinations, insurance_payload) -> None:
        with pytest.raises(ConfigurationError):
            TaskWorker(empty_destinations).handle_task(TaskRequest(TASK_ID, insurance_payload))

    def test_decode_error(self, destinations) -> None:
        with pytest.raises(EnvelopeDecodeError):
            TaskWorker(destinations).handle_task(TaskRequest(TASK_ID, b"[1, 2]"))

    def test_handling_is_repeatable(self, destinations, auction_payload) -> None:
        worker = TaskWorker(destinations)
        first = worker.handle_task(TaskRequest(TASK_ID, auction_payload))
        second = worker.handle_task(TaskRequest(b"other", auction_payload))
        assert first.result == second.result
        assert second.task_id == b"other"


@pytest.mark.unit
class TestChainLookup:
    def test_registrar_logged(self, destinations, auction_payload, caplog) -> None:
        store = ContractStore({"TaskAVSRegistrar": "0xregistrar", "AuctionService": "0xa"})
        worker = TaskWorker(destinations, chain_lookup=store)

        with caplog.at_level(logging.INFO, logger="settlement_performer"):
            worker.handle_task(TaskRequest(TASK_ID, auction_payload))

        registrar = [r for r in caplog.records if r.getMessage() == "TaskAVSRegistrar"]
        assert registrar and registrar[0].address == "0xregistrar"
        listed = [r for r in caplog.records if r.getMessage() == "Available contracts"]
        assert listed and listed[0].contracts == ["AuctionService", "TaskAVSRegistrar"]

    def test_missing_registrar_does_not_fail_task(
        self, destinations, auction_payload, caplog
    ) -> None:
        lookup = MagicMock()
        lookup.get_task_avs_registrar.side_effect = ContractNotFoundError("absent")
        lookup.list_contracts.return_value = []
        worker = TaskWorker(destinations, chain_lookup=lookup)

        with caplog.at_level(logging.WARNING, logger="settlement_performer"):
            response = worker.handle_task(TaskRequest(TASK_ID, auction_payload))

        assert response.task_id == TASK_ID
        assert any(r.getMessage() == "TaskAVSRegistrar not found" for r in caplog.records)

    def test_lookup_skipped_on_failure(self, empty_destinations, auction_payload) -> None:
        lookup = MagicMock()
        worker = TaskWorker(empty_destinations, chain_lookup=lookup)

        with pytest.raises(ConfigurationError):
            worker.handle_task(TaskRequest(TASK_ID, auction_payload))

        lookup.get_task_avs_registrar.assert_not_called()
