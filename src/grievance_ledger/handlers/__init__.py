"""
Task handlers and the category dispatch table.

dispatch() is the handler boundary: whatever a handler raises leaves it as an
AppError, either retryable (TransientError) or permanent (ValidationError,
LedgerRejectedError).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import redis
import requests

from grievance_ledger.common.errors import AppError, ErrCode, TransientError
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.enums import TaskCategory

from .base import HandlerResult
from .complaints import handle_complaint_registration
from .lifecycle import handle_assignment, handle_resolution, handle_status_update
from .users import handle_user_registration

if TYPE_CHECKING:
    from grievance_ledger.worker.context import WorkerContext

log = get_project_logger()

Handler = Callable[["WorkerContext", Task], HandlerResult]

HANDLERS: dict[TaskCategory, Handler] = {
    TaskCategory.USER_REGISTRATION: handle_user_registration,
    TaskCategory.COMPLAINT_REGISTRATION: handle_complaint_registration,
    TaskCategory.STATUS_UPDATE: handle_status_update,
    TaskCategory.ASSIGNMENT: handle_assignment,
    TaskCategory.RESOLUTION: handle_resolution,
}

_missing = set(TaskCategory) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"no handler for task categories: {sorted(c.value for c in _missing)}")


def dispatch(ctx: WorkerContext, task: Task) -> HandlerResult:
    handler = HANDLERS[task.category]
    try:
        return handler(ctx, task)
    except AppError:
        raise
    except redis.RedisError as e:
        raise TransientError(
            ErrCode.REDIS_ERROR, "Redis error inside handler", {"err": str(e)[:200]}
        ) from e
    except requests.RequestException as e:
        raise TransientError(
            ErrCode.UNKNOWN, "HTTP error inside handler", {"err": str(e)[:200]}
        ) from e
    except Exception as e:
        log.exception(
            "handler_unexpected_error",
            extra={"payload": {"task_id": task.id, "category": task.category.value}},
        )
        raise TransientError(
            ErrCode.UNKNOWN, f"{type(e).__name__}: {str(e)[:200]}", {"task_id": task.id}
        ) from e


__all__ = ["HANDLERS", "HandlerResult", "dispatch"]
