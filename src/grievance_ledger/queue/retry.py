"""
Retry utilities for the queues.

- a failed task goes back to the TAIL of its queue with retryCount + 1
  (fairness across tasks over strict ordering)
- optional sleep before the re-push
- synchronous, like the worker itself
"""

from __future__ import annotations

import time
from typing import Any

from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.contracts.tasks import Task

log = get_project_logger()


def can_retry(task: Task, retry_limit: int) -> bool:
    return task.retry_count < max(0, int(retry_limit))


def requeue_for_retry(
    r: Any,
    *,
    queue_name: str,
    task: Task,
    backoff_ms: int = 0,
) -> None:
    """
    Increment retryCount and re-push the task to the tail of queue_name.
    """
    if backoff_ms and backoff_ms > 0:
        time.sleep(backoff_ms / 1000.0)

    task.retry_count += 1
    r.rpush(queue_name, task.to_json())
    log.warning(
        "task_requeued",
        extra={
            "payload": {
                "queue": queue_name,
                "task_id": task.id,
                "retry_count": task.retry_count,
            }
        },
    )
