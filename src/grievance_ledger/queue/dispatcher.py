"""
Queue dispatcher.

Purpose:
- one Redis list per task category, with fixed names shared with the producers
- producers RPUSH, the worker BLPOPs: FIFO within a category
- BLPOP over several keys serves the first non-empty key in argument order,
  which is how the configured category priority is enforced
"""

from __future__ import annotations

from typing import Any

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.common.ids import new_task_id
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.common.time import utc_now_iso
from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.enums import TaskCategory

log = get_project_logger()

# =============================================================================
# QUEUE NAMES (Redis lists)
# =============================================================================
Q_USERS = "user:registration:queue"
Q_COMPLAINTS = "complaint:registration:queue"
Q_STATUS_UPDATES = "complaint:status:queue"
Q_ASSIGNMENTS = "complaint:assignment:queue"
Q_RESOLUTIONS = "complaint:resolution:queue"

QUEUE_BY_CATEGORY: dict[TaskCategory, str] = {
    TaskCategory.USER_REGISTRATION: Q_USERS,
    TaskCategory.COMPLAINT_REGISTRATION: Q_COMPLAINTS,
    TaskCategory.STATUS_UPDATE: Q_STATUS_UPDATES,
    TaskCategory.ASSIGNMENT: Q_ASSIGNMENTS,
    TaskCategory.RESOLUTION: Q_RESOLUTIONS,
}


def queue_for(category: TaskCategory) -> str:
    return QUEUE_BY_CATEGORY[category]


def parse_queue_priority(raw: str | None) -> list[str]:
    """
    "USER_REGISTRATION,COMPLAINT_REGISTRATION" -> queue names in that order.

    Categories left out of the list are appended in enum order so no queue is
    ever starved completely.
    """
    order: list[TaskCategory] = []
    for item in (raw or "").split(","):
        item = item.strip().upper()
        if not item:
            continue
        try:
            category = TaskCategory(item)
        except ValueError as e:
            raise ValidationError(
                f"unknown category in WORKER_QUEUE_PRIORITY: {item}",
                code=ErrCode.UNKNOWN_CATEGORY,
            ) from e
        if category not in order:
            order.append(category)
    order.extend(c for c in TaskCategory if c not in order)
    return [queue_for(c) for c in order]


def enqueue_task(r: Any, task: Task) -> None:
    r.rpush(queue_for(task.category), task.to_json())


def enqueue(r: Any, *, category: TaskCategory, payload: dict[str, Any]) -> str:
    """
    Put a new task at the tail of its category queue. Returns the task id.
    """
    task = Task(
        id=new_task_id(),
        category=category,
        payload=payload,
        created_at=utc_now_iso(),
    )
    enqueue_task(r, task)
    log.info(
        "task_enqueued",
        extra={"payload": {"task_id": task.id, "category": category.value}},
    )
    return task.id


def pop_next(r: Any, queues: list[str], *, timeout_sec: int) -> tuple[str, str] | None:
    """
    Blocking pop across the queues in priority order.
    Returns (queue_name, raw_task) or None when the wait window elapsed.
    """
    item = r.blpop(queues, timeout=max(1, int(timeout_sec)))
    if not item:
        return None
    queue_name, raw = item
    return str(queue_name), raw


def queue_depths(r: Any) -> dict[str, int]:
    return {name: int(r.llen(name)) for name in QUEUE_BY_CATEGORY.values()}


def default_queue_order() -> list[str]:
    return parse_queue_priority(get_settings().worker_queue_priority)
