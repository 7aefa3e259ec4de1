"""
Queue task and task outcome contracts.

Rules:
- the wire format is JSON with camelCase keys (producers are not Python)
- retryCount is the only field the worker changes on re-enqueue
- legacy producers send "type"/"data" instead of "category"/"payload"
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.common.time import utc_now_iso
from grievance_ledger.domain.enums import TaskCategory, TaskStatus

from .versions import QUEUE_SCHEMA_VERSION


@dataclass
class Task:
    id: str
    category: TaskCategory
    payload: dict[str, Any]
    retry_count: int = 0
    created_at: str | None = None
    schema_version: str = QUEUE_SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "schemaVersion": self.schema_version,
            "id": self.id,
            "category": self.category.value,
            "payload": self.payload,
            "retryCount": self.retry_count,
        }
        if self.created_at:
            data["createdAt"] = self.created_at
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        task_id = str(data.get("id") or "").strip()
        if not task_id:
            raise ValidationError(
                "task id is missing", details={"keys": sorted(data)}, code=ErrCode.MALFORMED_TASK
            )

        raw_category = data.get("category", data.get("type"))
        try:
            category = TaskCategory(str(raw_category).strip().upper())
        except ValueError as e:
            raise ValidationError(
                f"unknown task category: {str(raw_category)[:50]}",
                details={"task_id": task_id},
                code=ErrCode.UNKNOWN_CATEGORY,
            ) from e

        payload = data.get("payload", data.get("data"))
        if not isinstance(payload, dict):
            raise ValidationError(
                "task payload must be a JSON object",
                details={"task_id": task_id},
                code=ErrCode.MALFORMED_TASK,
            )

        try:
            retry_count = max(0, int(data.get("retryCount") or 0))
        except (TypeError, ValueError) as e:
            raise ValidationError(
                "retryCount must be an integer",
                details={"task_id": task_id},
                code=ErrCode.MALFORMED_TASK,
            ) from e

        return cls(
            id=task_id,
            category=category,
            payload=payload,
            retry_count=retry_count,
            created_at=data.get("createdAt"),
            schema_version=str(data.get("schemaVersion") or QUEUE_SCHEMA_VERSION),
        )

    @classmethod
    def from_json(cls, raw: str) -> Task:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                "task is not valid JSON", details={"err": str(e)[:200]}, code=ErrCode.MALFORMED_TASK
            ) from e
        if not isinstance(data, dict):
            raise ValidationError("task must be a JSON object", code=ErrCode.MALFORMED_TASK)
        return cls.from_dict(data)


def peek_task_id(raw: str) -> str | None:
    """
    Best-effort task id from a task that failed to parse.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    return None


@dataclass
class TaskOutcome:
    task_id: str
    status: TaskStatus
    category: str | None = None
    content_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    attempts: int = 1
    duplicate: bool = False
    tx_hash: str | None = None
    block_number: int | None = None
    recorded_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "taskId": self.task_id,
            "status": self.status.value,
            "category": self.category,
            "contentId": self.content_id,
            "errorCode": self.error_code,
            "errorMessage": self.error_message,
            "attempts": self.attempts,
            "duplicate": self.duplicate,
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
            "recordedAt": self.recorded_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskOutcome:
        block_number = data.get("blockNumber")
        return cls(
            task_id=str(data["taskId"]),
            status=TaskStatus(str(data["status"])),
            category=data.get("category"),
            content_id=data.get("contentId"),
            error_code=data.get("errorCode"),
            error_message=data.get("errorMessage"),
            attempts=int(data.get("attempts") or 1),
            duplicate=bool(data.get("duplicate", False)),
            tx_hash=data.get("txHash"),
            block_number=int(block_number) if block_number is not None else None,
            recorded_at=str(data.get("recordedAt") or utc_now_iso()),
        )
