from __future__ import annotations

import pytest

from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.domain.enums import ComplaintStatus, Urgency
from grievance_ledger.domain.policy import (
    DEFAULT_STATE_REGION,
    DEFAULT_URGENCY,
    parse_complaint_status,
    resolve_state,
    resolve_urgency,
)
from grievance_ledger.domain.records import (
    ComplaintRecord,
    ResolutionRecord,
    StatusUpdateRecord,
    UserRecord,
)


def _complaint_payload(**overrides) -> dict:
    payload = {
        "description": "Streetlight broken near the market",
        "userId": "U1",
        "categoryId": "C-LIGHT",
        "location": {"pin": "834001", "district": "Ranchi", "city": "Ranchi"},
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("low", 1), ("medium", 2), ("high", 3), ("critical", 4), ("HIGH", 3), (4, 4)],
)
def test_urgency_mapping(raw, expected) -> None:
    assert int(resolve_urgency(raw)) == expected


def test_unrecognized_urgency_falls_back_to_medium() -> None:
    assert resolve_urgency("urgent") == Urgency.MEDIUM
    assert int(resolve_urgency("urgent")) == 2
    assert resolve_urgency(None) == DEFAULT_URGENCY
    assert resolve_urgency(7) == DEFAULT_URGENCY
    assert resolve_urgency(True) == DEFAULT_URGENCY


def test_resolve_state_defaults() -> None:
    assert resolve_state("Bihar") == "Bihar"
    assert resolve_state("  ") == DEFAULT_STATE_REGION
    assert resolve_state(None, "Odisha") == "Odisha"


def test_parse_complaint_status() -> None:
    assert parse_complaint_status("completed") == ComplaintStatus.COMPLETED
    assert parse_complaint_status("4") == ComplaintStatus.ON_HOLD
    assert parse_complaint_status(9) == ComplaintStatus.DELETED
    assert parse_complaint_status("closed") is None
    assert parse_complaint_status(42) is None


def test_complaint_missing_description_is_validation_error() -> None:
    payload = _complaint_payload()
    del payload["description"]
    with pytest.raises(ValidationError) as exc:
        ComplaintRecord.from_payload(payload)
    assert exc.value.code == ErrCode.VALIDATION
    assert exc.value.details["missing"] == ["description"]


def test_complaint_empty_location_is_validation_error() -> None:
    with pytest.raises(ValidationError, match="location"):
        ComplaintRecord.from_payload(_complaint_payload(location={"pin": " "}))


def test_complaint_defaults_applied_at_parse() -> None:
    record = ComplaintRecord.from_payload(_complaint_payload(urgency="urgent"))
    assert record.id == ""
    assert record.urgency == Urgency.MEDIUM
    assert record.location.state == DEFAULT_STATE_REGION
    assert record.is_public is False

    other = ComplaintRecord.from_payload(
        _complaint_payload(isPublic="true"), default_state_region="West Bengal"
    )
    assert other.location.state == "West Bengal"
    assert other.is_public is True


def test_user_record_accepts_aliases() -> None:
    record = UserRecord.from_payload(
        {
            "userId": "U7",
            "name": "Asha",
            "email": "asha@example.org",
            "aadhaarId": "1234-5678-9012",
            "location": {"pincode": "834002", "district": "Ranchi", "state": "Jharkhand"},
        }
    )
    assert record.id == "U7"
    assert record.national_id == "1234-5678-9012"
    assert record.location.pin == "834002"


def test_user_without_national_id_uses_sentinel() -> None:
    record = UserRecord.from_payload(
        {"id": "U8", "name": "Ravi", "email": "r@example.org", "location": {"city": "Ranchi"}}
    )
    assert record.national_id_or_sentinel == "NOT_PROVIDED"


def test_user_missing_email_is_validation_error() -> None:
    with pytest.raises(ValidationError) as exc:
        UserRecord.from_payload({"id": "U9", "name": "X", "location": {"city": "Ranchi"}})
    assert "email" in exc.value.details["missing"]


def test_status_update_unknown_status_rejected() -> None:
    with pytest.raises(ValidationError, match="unknown complaint status"):
        StatusUpdateRecord.from_payload({"complaintId": "COMP-1", "status": "closed"})


def test_resolution_date_defaults_to_today() -> None:
    record = ResolutionRecord.from_payload({"complaintId": "COMP-1"})
    assert len(record.resolution_date) == 10
    assert record.resolution_date.count("-") == 2
