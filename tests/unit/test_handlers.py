from __future__ import annotations

import json

import pytest

from grievance_ledger.common.errors import PinningError, TransientError, ValidationError
from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.digests import keccak_text
from grievance_ledger.domain.enums import TaskCategory
from grievance_ledger.handlers import HANDLERS, dispatch
from grievance_ledger.handlers.base import canonical_json
from grievance_ledger.ledger.base import LedgerRejectedError, RejectionReason


def _user_task(task_id: str = "t-user-1", **overrides) -> Task:
    payload = {
        "id": "U1",
        "name": "Asha",
        "email": "asha@example.org",
        "phoneNumber": "9000000000",
        "location": {
            "pin": "834001",
            "district": "Ranchi",
            "city": "Ranchi",
            "state": "Jharkhand",
            "municipal": "RMC",
        },
    }
    payload.update(overrides)
    return Task(id=task_id, category=TaskCategory.USER_REGISTRATION, payload=payload)


def _complaint_task(task_id: str = "t-comp-1", **overrides) -> Task:
    payload = {
        "description": "Garbage not collected for a week",
        "userId": "U1",
        "categoryId": "C-SANITATION",
        "urgency": "high",
        "location": {"pin": "834001", "district": "Ranchi", "city": "Ranchi"},
    }
    payload.update(overrides)
    return Task(id=task_id, category=TaskCategory.COMPLAINT_REGISTRATION, payload=payload)


class _FlakyPinner:
    def __init__(self) -> None:
        self.calls = 0

    def pin(self, data: bytes, filename: str):
        self.calls += 1
        raise PinningError("gateway timeout")


def test_every_category_has_a_handler() -> None:
    assert set(HANDLERS) == set(TaskCategory)


def test_canonical_json_is_stable() -> None:
    assert canonical_json({"b": 1, "a": "é"}) == '{"a":"é","b":1}'.encode()


def test_user_registration_pins_and_registers(worker_ctx) -> None:
    result = dispatch(worker_ctx, _user_task())

    assert worker_ctx.pinner.calls == 1
    pinned = json.loads(worker_ctx.pinner.pinned[result.content_id])
    assert pinned["role"] == "CITIZEN"
    assert pinned["email"] == "asha@example.org"

    entry = worker_ctx.ledger.entries[0]
    assert entry.fn == "registerUser"
    assert entry.args["email_hash"] == keccak_text("asha@example.org")
    assert entry.args["national_id_hash"] == keccak_text("NOT_PROVIDED")
    assert entry.args["location_hash"] == keccak_text("834001|Ranchi|Ranchi|Jharkhand|RMC")
    # raw PII never goes to the ledger
    assert "email" not in entry.args
    assert result.receipt is not None
    assert result.duplicate is False
    assert worker_ctx.content_ids.get_for_record("user", "U1") == result.content_id


def test_user_already_registered_is_success(worker_ctx) -> None:
    dispatch(worker_ctx, _user_task("t-1"))
    again = dispatch(worker_ctx, _user_task("t-2"))

    assert again.duplicate is True
    assert again.receipt is None
    assert again.content_id
    assert len(worker_ctx.ledger.users) == 1


def test_complaint_gets_generated_id_persisted_in_payload(worker_ctx) -> None:
    task = _complaint_task()
    result = dispatch(worker_ctx, task)

    complaint_id = task.payload["id"]
    assert complaint_id.startswith("COMP-")
    stored = worker_ctx.ledger.complaints[complaint_id]
    assert stored["urgency"] == 3
    assert stored["state"] == "Jharkhand"
    assert stored["is_public"] is False
    pinned = json.loads(worker_ctx.pinner.pinned[result.content_id])
    assert pinned["complaintId"] == complaint_id


def test_complaint_missing_description_short_circuits(worker_ctx) -> None:
    task = _complaint_task()
    del task.payload["description"]

    with pytest.raises(ValidationError):
        dispatch(worker_ctx, task)
    assert worker_ctx.pinner.calls == 0
    assert worker_ctx.ledger.submissions == 0


def test_cached_content_id_is_not_pinned_again(worker_ctx) -> None:
    task = _complaint_task(id="COMP-42")
    worker_ctx.content_ids.remember(
        task_id=task.id, kind="complaint", record_id="COMP-42", content_id="bafkcached"
    )

    result = dispatch(worker_ctx, task)
    assert result.content_id == "bafkcached"
    assert worker_ctx.pinner.calls == 0
    assert "COMP-42" in worker_ctx.ledger.complaints


def test_pin_failure_is_transient_and_skips_ledger(worker_ctx) -> None:
    worker_ctx.pinner = _FlakyPinner()
    with pytest.raises(TransientError):
        dispatch(worker_ctx, _user_task())
    assert worker_ctx.ledger.submissions == 0


def test_lifecycle_on_unknown_complaint_is_permanent(worker_ctx) -> None:
    task = Task(
        id="t-st-1",
        category=TaskCategory.STATUS_UPDATE,
        payload={"complaintId": "COMP-missing", "status": "FORWARDED"},
    )
    with pytest.raises(LedgerRejectedError) as exc:
        dispatch(worker_ctx, task)
    assert exc.value.reason == RejectionReason.NOT_FOUND
    assert exc.value.retryable is False


def test_lifecycle_sequence(worker_ctx) -> None:
    dispatch(worker_ctx, _complaint_task(id="COMP-7"))
    dispatch(
        worker_ctx,
        Task(
            id="t-as-1",
            category=TaskCategory.ASSIGNMENT,
            payload={"complaintId": "COMP-7", "departmentId": "D-PWD"},
        ),
    )
    resolution = Task(
        id="t-rs-1", category=TaskCategory.RESOLUTION, payload={"complaintId": "COMP-7"}
    )
    dispatch(worker_ctx, resolution)

    complaint = worker_ctx.ledger.complaints["COMP-7"]
    assert complaint["assigned_to"] == "D-PWD"
    assert complaint["status"] == 5
    assert complaint["resolution_date"] == resolution.payload["resolutionDate"]
    assert worker_ctx.pinner.calls == 1


def test_unexpected_handler_error_becomes_transient(worker_ctx, monkeypatch) -> None:
    def _broken(**_kwargs):
        raise KeyError("boom")

    monkeypatch.setattr(worker_ctx.ledger, "register_user", _broken)
    with pytest.raises(TransientError) as exc:
        dispatch(worker_ctx, _user_task())
    assert "KeyError" in exc.value.message
