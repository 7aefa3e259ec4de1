"""
Task outcome and pinned-content lookups.

- GET /tasks/{task_id}: terminal outcome written by the worker (404 while pending)
- GET /content/{kind}/{record_id}: content id pinned for a user or complaint
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from apps.api_gateway.deps import auth_dep
from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import ErrCode
from grievance_ledger.queue.redis import redis_client
from grievance_ledger.storage.content_ids import ContentIdCache
from grievance_ledger.storage.results import ResultStore

router = APIRouter()
AUTH_DEP = Depends(auth_dep)


class TaskOutcomeResponse(BaseModel):
    taskId: str
    status: str
    category: str | None = None
    contentId: str | None = None
    errorCode: str | None = None
    errorMessage: str | None = None
    attempts: int
    duplicate: bool
    txHash: str | None = None
    blockNumber: int | None = None
    recordedAt: str


class ContentIdResponse(BaseModel):
    kind: str
    recordId: str
    contentId: str


@router.get("/tasks/{task_id}", response_model=TaskOutcomeResponse)
def get_task_outcome(task_id: str, _=AUTH_DEP) -> TaskOutcomeResponse:
    store = ResultStore(redis_client(), ttl_sec=get_settings().result_ttl_sec)
    outcome = store.get_result(task_id)
    if outcome is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": ErrCode.NOT_FOUND, "message": "No outcome recorded for task"},
        )
    return TaskOutcomeResponse(**outcome.to_dict())


@router.get("/content/{kind}/{record_id}", response_model=ContentIdResponse)
def get_content_id(
    kind: Literal["user", "complaint"], record_id: str, _=AUTH_DEP
) -> ContentIdResponse:
    cache = ContentIdCache(redis_client(), ttl_sec=get_settings().content_cache_ttl_sec)
    content_id = cache.get_for_record(kind, record_id)
    if not content_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": ErrCode.NOT_FOUND, "message": "No pinned content for record"},
        )
    return ContentIdResponse(kind=kind, recordId=record_id, contentId=content_id)
