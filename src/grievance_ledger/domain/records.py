"""
Domain records carried in task payloads.

Purpose:
- parse the producer's camelCase JSON into typed records
- validation gate: a missing required field raises ValidationError
- defaults from domain.policy are applied here and nowhere else
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from grievance_ledger.common.errors import ValidationError
from grievance_ledger.common.time import utc_today_iso

from .enums import ComplaintStatus, Urgency
from .policy import (
    DEFAULT_IS_PUBLIC,
    NATIONAL_ID_SENTINEL,
    parse_complaint_status,
    resolve_state,
    resolve_urgency,
)


def _text(payload: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _require(fields: dict[str, str], *, record: str) -> None:
    missing = sorted(name for name, value in fields.items() if not value)
    if missing:
        raise ValidationError(
            f"{record}: missing required fields: {', '.join(missing)}",
            details={"record": record, "missing": missing},
        )


def _as_bool(raw: object, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "y"}
    return bool(raw)


@dataclass
class Location:
    pin: str = ""
    district: str = ""
    city: str = ""
    locality: str = ""
    municipal: str = ""
    state: str = ""

    @classmethod
    def from_payload(cls, raw: object, *, record: str) -> Location:
        if not isinstance(raw, dict) or not any(
            str(v).strip() for v in raw.values() if v is not None
        ):
            raise ValidationError(
                f"{record}: location is required",
                details={"record": record, "missing": ["location"]},
            )
        return cls(
            pin=_text(raw, "pin", "pincode"),
            district=_text(raw, "district"),
            city=_text(raw, "city"),
            locality=_text(raw, "locality"),
            municipal=_text(raw, "municipal"),
            state=_text(raw, "state"),
        )


@dataclass
class UserRecord:
    id: str
    name: str
    email: str
    location: Location
    phone_number: str = ""
    national_id: str = ""
    date_of_creation: str = ""

    @property
    def national_id_or_sentinel(self) -> str:
        return self.national_id or NATIONAL_ID_SENTINEL

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> UserRecord:
        fields = {
            "id": _text(payload, "id", "userId"),
            "name": _text(payload, "name"),
            "email": _text(payload, "email"),
        }
        _require(fields, record="user")
        return cls(
            id=fields["id"],
            name=fields["name"],
            email=fields["email"],
            location=Location.from_payload(payload.get("location"), record="user"),
            phone_number=_text(payload, "phoneNumber"),
            national_id=_text(payload, "nationalId", "aadhaarId"),
            date_of_creation=_text(payload, "dateOfCreation"),
        )


@dataclass
class ComplaintRecord:
    id: str
    user_id: str
    category_id: str
    description: str
    location: Location
    sub_category: str = ""
    assigned_department: str = ""
    urgency: Urgency = Urgency.MEDIUM
    attachment_url: str = ""
    is_public: bool = DEFAULT_IS_PUBLIC
    submission_date: str = ""

    @classmethod
    def from_payload(
        cls, payload: dict[str, Any], *, default_state_region: str | None = None
    ) -> ComplaintRecord:
        """
        The id may be empty here: the complaint handler assigns one before pinning.
        """
        fields = {
            "description": _text(payload, "description"),
            "userId": _text(payload, "userId"),
            "categoryId": _text(payload, "categoryId"),
        }
        _require(fields, record="complaint")
        location = Location.from_payload(payload.get("location"), record="complaint")
        location.state = resolve_state(location.state, default_state_region)
        return cls(
            id=_text(payload, "id", "complaintId"),
            user_id=fields["userId"],
            category_id=fields["categoryId"],
            description=fields["description"],
            location=location,
            sub_category=_text(payload, "subCategory", "subcategory"),
            assigned_department=_text(payload, "assignedDepartment"),
            urgency=resolve_urgency(payload.get("urgency")),
            attachment_url=_text(payload, "attachmentUrl"),
            is_public=_as_bool(payload.get("isPublic"), DEFAULT_IS_PUBLIC),
            submission_date=_text(payload, "submissionDate"),
        )


@dataclass
class StatusUpdateRecord:
    complaint_id: str
    status: ComplaintStatus

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StatusUpdateRecord:
        complaint_id = _text(payload, "complaintId", "id")
        _require({"complaintId": complaint_id}, record="status_update")
        status = parse_complaint_status(payload.get("status"))
        if status is None:
            raise ValidationError(
                "status_update: unknown complaint status",
                details={"record": "status_update", "status": str(payload.get("status"))[:50]},
            )
        return cls(complaint_id=complaint_id, status=status)


@dataclass
class AssignmentRecord:
    complaint_id: str
    department_id: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AssignmentRecord:
        fields = {
            "complaintId": _text(payload, "complaintId", "id"),
            "departmentId": _text(payload, "departmentId", "assignedDepartment"),
        }
        _require(fields, record="assignment")
        return cls(complaint_id=fields["complaintId"], department_id=fields["departmentId"])


@dataclass
class ResolutionRecord:
    complaint_id: str
    resolution_date: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ResolutionRecord:
        complaint_id = _text(payload, "complaintId", "id")
        _require({"complaintId": complaint_id}, record="resolution")
        return cls(
            complaint_id=complaint_id,
            resolution_date=_text(payload, "resolutionDate") or utc_today_iso(),
        )
