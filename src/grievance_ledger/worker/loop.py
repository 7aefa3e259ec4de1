"""
Ledger worker loop.

Algorithm:
- BLPOP over the category queues in priority order (bounded wait)
- parse the task; malformed JSON / unknown category -> FAILED, no retry
- dispatch to the category handler
- success (including "already exists" on the ledger) -> SUCCESS outcome
- retryable failure below RETRY_LIMIT -> retryCount + 1, RPUSH to the tail
- retryable failure at the limit, or permanent failure -> FAILED outcome
- queue/result-store errors are logged and the loop backs off by the poll
  interval; only stop() ends the loop, after the in-flight task completes
"""

from __future__ import annotations

import signal
import time
from typing import Any

from grievance_ledger.common.errors import AppError
from grievance_ledger.common.ids import new_task_id
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.common.metrics import QUEUE_TASKS_TOTAL
from grievance_ledger.contracts.tasks import Task, TaskOutcome, peek_task_id
from grievance_ledger.domain.enums import TaskStatus
from grievance_ledger.handlers import dispatch
from grievance_ledger.queue.dispatcher import pop_next, queue_for
from grievance_ledger.queue.retry import can_retry, requeue_for_retry

from .context import WorkerContext

log = get_project_logger()


def _error_message(error: AppError) -> str:
    return f"{error.code}: {error.message}"


class LedgerWorker:
    def __init__(self, ctx: WorkerContext) -> None:
        self.ctx = ctx

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self._on_signal)
        signal.signal(signal.SIGINT, self._on_signal)

    def _on_signal(self, signum: int, frame: Any) -> None:
        log.info("worker_shutdown_requested", extra={"payload": {"signal": signum}})
        self.ctx.stop()

    def run_forever(self) -> None:
        ctx = self.ctx
        ctx.start()
        log.info(
            "worker_ledger_started",
            extra={
                "payload": {
                    "queues": ctx.queues,
                    "poll_interval_ms": ctx.poll_interval_ms,
                    "retry_limit": ctx.retry_limit,
                }
            },
        )
        try:
            while ctx.running:
                try:
                    self.run_once()
                except Exception as e:
                    log.error(
                        "worker_loop_error",
                        extra={"payload": {"err": str(e)[:300], "type": type(e).__name__}},
                    )
                    time.sleep(ctx.poll_interval_sec)
        finally:
            ctx.close()
            log.info("worker_ledger_stopped")

    # ------------------------------------------------------------------
    # one iteration
    # ------------------------------------------------------------------
    def run_once(self) -> TaskOutcome | None:
        """
        Pop and process at most one task.
        Returns the terminal outcome, or None if nothing was popped or the task was re-queued.
        """
        popped = pop_next(self.ctx.redis, self.ctx.queues, timeout_sec=self.ctx.poll_timeout_sec)
        if popped is None:
            return None
        queue_name, raw = popped
        return self.process_raw(queue_name, raw)

    def process_raw(self, queue_name: str, raw: str) -> TaskOutcome | None:
        try:
            task = Task.from_json(raw)
        except AppError as e:
            task_id = peek_task_id(raw) or new_task_id("unparsed")
            log.error(
                "worker_task_malformed",
                extra={"payload": {"queue": queue_name, "task_id": task_id, "err": e.message}},
            )
            outcome = TaskOutcome(
                task_id=task_id,
                status=TaskStatus.FAILED,
                error_code=e.code,
                error_message=_error_message(e),
            )
            self.ctx.results.set_result(outcome)
            QUEUE_TASKS_TOTAL.labels(
                service=self.ctx.service_name, queue=queue_name, result="failed"
            ).inc()
            return outcome
        return self.process(task, queue_name=queue_name)

    def process(self, task: Task, *, queue_name: str | None = None) -> TaskOutcome | None:
        queue_name = queue_name or queue_for(task.category)
        try:
            result = dispatch(self.ctx, task)
        except AppError as e:
            return self._handle_failure(task, queue_name, e)

        outcome = TaskOutcome(
            task_id=task.id,
            status=TaskStatus.SUCCESS,
            category=task.category.value,
            content_id=result.content_id,
            attempts=task.retry_count + 1,
            duplicate=result.duplicate,
            tx_hash=result.receipt.tx_hash if result.receipt else None,
            block_number=result.receipt.block_number if result.receipt else None,
        )
        self.ctx.results.set_result(outcome)
        QUEUE_TASKS_TOTAL.labels(
            service=self.ctx.service_name,
            queue=queue_name,
            result="duplicate" if result.duplicate else "success",
        ).inc()
        log.info(
            "worker_task_done",
            extra={
                "payload": {
                    "task_id": task.id,
                    "category": task.category.value,
                    "cid": result.content_id,
                    "duplicate": result.duplicate,
                    "block": outcome.block_number,
                }
            },
        )
        return outcome

    def _handle_failure(self, task: Task, queue_name: str, error: AppError) -> TaskOutcome | None:
        log.warning(
            "worker_task_failed",
            extra={
                "payload": {
                    "task_id": task.id,
                    "category": task.category.value,
                    "retry_count": task.retry_count,
                    "retryable": error.retryable,
                    "err": _error_message(error)[:300],
                }
            },
        )
        if error.retryable and can_retry(task, self.ctx.retry_limit):
            requeue_for_retry(
                self.ctx.redis,
                queue_name=queue_name,
                task=task,
                backoff_ms=self.ctx.retry_backoff_ms,
            )
            QUEUE_TASKS_TOTAL.labels(
                service=self.ctx.service_name, queue=queue_name, result="retry"
            ).inc()
            return None

        outcome = TaskOutcome(
            task_id=task.id,
            status=TaskStatus.FAILED,
            category=task.category.value,
            content_id=self.ctx.content_ids.get_for_task(task.id) if error.retryable else None,
            error_code=error.code,
            error_message=_error_message(error),
            attempts=task.retry_count + 1,
        )
        self.ctx.results.set_result(outcome)
        QUEUE_TASKS_TOTAL.labels(
            service=self.ctx.service_name, queue=queue_name, result="failed"
        ).inc()
        return outcome
