from __future__ import annotations

import json

import pytest

from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.contracts.tasks import Task, TaskOutcome, peek_task_id
from grievance_ledger.domain.enums import TaskCategory, TaskStatus


def test_task_parses_camel_case_wire_format() -> None:
    raw = json.dumps(
        {
            "id": "t-1",
            "category": "COMPLAINT_REGISTRATION",
            "payload": {"description": "x"},
            "retryCount": 2,
            "createdAt": "2024-01-01T00:00:00+00:00",
        }
    )
    task = Task.from_json(raw)
    assert task.category == TaskCategory.COMPLAINT_REGISTRATION
    assert task.retry_count == 2
    assert task.to_dict()["retryCount"] == 2
    assert task.to_dict()["createdAt"] == "2024-01-01T00:00:00+00:00"


def test_task_accepts_legacy_type_and_data_keys() -> None:
    task = Task.from_dict({"id": "t-2", "type": "user_registration", "data": {"id": "U1"}})
    assert task.category == TaskCategory.USER_REGISTRATION
    assert task.payload == {"id": "U1"}
    assert task.retry_count == 0


def test_unknown_category_is_validation_error() -> None:
    with pytest.raises(ValidationError) as exc:
        Task.from_dict({"id": "t-3", "category": "REFUND", "payload": {}})
    assert exc.value.code == ErrCode.UNKNOWN_CATEGORY
    assert exc.value.retryable is False


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        json.dumps({"category": "RESOLUTION", "payload": {}}),
        json.dumps({"id": "t-4", "category": "RESOLUTION", "payload": "x"}),
        json.dumps({"id": "t-5", "category": "RESOLUTION", "payload": {}, "retryCount": "n"}),
    ],
)
def test_malformed_tasks(raw: str) -> None:
    with pytest.raises(ValidationError) as exc:
        Task.from_json(raw)
    assert exc.value.code == ErrCode.MALFORMED_TASK


def test_peek_task_id() -> None:
    assert peek_task_id(json.dumps({"id": "t-9", "category": "???"})) == "t-9"
    assert peek_task_id("{broken") is None


def test_outcome_dict_keys() -> None:
    outcome = TaskOutcome(
        task_id="t-1",
        status=TaskStatus.SUCCESS,
        category="USER_REGISTRATION",
        content_id="bafkabc",
        tx_hash="0xabc",
        block_number=12,
    )
    data = outcome.to_dict()
    assert data["taskId"] == "t-1"
    assert data["status"] == "SUCCESS"
    assert data["contentId"] == "bafkabc"
    assert data["blockNumber"] == 12
    assert data["errorMessage"] is None
    assert TaskOutcome.from_dict(data) == outcome
