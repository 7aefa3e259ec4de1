"""
Operational endpoints.

Purpose:
- queue depth per category, in the order the worker serves them
- readiness report for the current configuration
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from apps.api_gateway.deps import auth_dep
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.common.metrics import QUEUE_DEPTH
from grievance_ledger.queue.dispatcher import QUEUE_BY_CATEGORY, default_queue_order
from grievance_ledger.queue.redis import redis_client
from grievance_ledger.services.readiness_service import evaluate_readiness

log = get_project_logger()

router = APIRouter()
AUTH_DEP = Depends(auth_dep)

_CATEGORY_BY_QUEUE = {queue: category.value for category, queue in QUEUE_BY_CATEGORY.items()}


class QueueHealthItem(BaseModel):
    queue: str
    category: str
    depth: int
    error: str | None = None


class QueueHealthResponse(BaseModel):
    queues: list[QueueHealthItem]


class ReadinessIssueResponse(BaseModel):
    severity: str
    code: str
    message: str


class SystemReadinessResponse(BaseModel):
    ready: bool
    issues: list[ReadinessIssueResponse]


@router.get("/admin/queues", response_model=QueueHealthResponse)
def admin_queue_health(_=AUTH_DEP) -> QueueHealthResponse:
    r = redis_client()
    items: list[QueueHealthItem] = []
    for queue in default_queue_order():
        try:
            depth = int(r.llen(queue))
            QUEUE_DEPTH.labels(queue=queue).set(depth)
            items.append(
                QueueHealthItem(queue=queue, category=_CATEGORY_BY_QUEUE[queue], depth=depth)
            )
        except Exception as e:
            log.warning(
                "admin_queue_depth_failed",
                extra={"payload": {"queue": queue, "err": str(e)[:200]}},
            )
            items.append(
                QueueHealthItem(
                    queue=queue,
                    category=_CATEGORY_BY_QUEUE[queue],
                    depth=0,
                    error=str(e)[:200],
                )
            )
    return QueueHealthResponse(queues=items)


@router.get("/admin/system/readiness", response_model=SystemReadinessResponse)
def admin_system_readiness(_=AUTH_DEP) -> SystemReadinessResponse:
    state = evaluate_readiness()
    return SystemReadinessResponse(
        ready=state.ready,
        issues=[
            ReadinessIssueResponse(severity=i.severity, code=i.code, message=i.message)
            for i in state.issues
        ],
    )
