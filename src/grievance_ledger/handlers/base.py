"""
Shared handler steps.

- canonical JSON of the document that gets pinned
- pin with the per-task content-id cache (no re-upload on retry)
- ledger submission with the idempotent-success rule for "already exists"
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from grievance_ledger.common.errors import TransientError
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.common.metrics import (
    CONTENT_PINS_TOTAL,
    LEDGER_SUBMISSIONS_TOTAL,
    track_stage_latency,
)
from grievance_ledger.contracts.tasks import Task
from grievance_ledger.ledger.base import InclusionReceipt, LedgerRejectedError, RejectionReason

if TYPE_CHECKING:
    from grievance_ledger.worker.context import WorkerContext

log = get_project_logger()

SERVICE = "worker-ledger"


@dataclass
class HandlerResult:
    content_id: str | None = None
    receipt: InclusionReceipt | None = None
    # the ledger already held this record; the desired end state is reached
    duplicate: bool = False


def canonical_json(document: dict[str, Any]) -> bytes:
    return json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def pin_document(
    ctx: WorkerContext,
    task: Task,
    *,
    kind: str,
    record_id: str,
    document: dict[str, Any],
) -> str:
    cached = ctx.content_ids.get_for_task(task.id)
    if cached:
        CONTENT_PINS_TOTAL.labels(kind=kind, result="cached").inc()
        log.info(
            "content_pin_cached",
            extra={"payload": {"task_id": task.id, "kind": kind, "cid": cached}},
        )
        return cached

    try:
        with track_stage_latency(SERVICE, "pin"):
            result = ctx.pinner.pin(canonical_json(document), f"{kind}-{record_id}.json")
    except TransientError:
        CONTENT_PINS_TOTAL.labels(kind=kind, result="error").inc()
        raise

    ctx.content_ids.remember(
        task_id=task.id, kind=kind, record_id=record_id, content_id=result.content_id
    )
    CONTENT_PINS_TOTAL.labels(kind=kind, result="pinned").inc()
    log.info(
        "content_pinned",
        extra={"payload": {"task_id": task.id, "kind": kind, "cid": result.content_id}},
    )
    return result.content_id


def submit_to_ledger(
    fn_name: str,
    call: Callable[[], InclusionReceipt],
    *,
    task: Task,
    duplicate_is_success: bool,
) -> tuple[InclusionReceipt | None, bool]:
    """
    Run one ledger write. Returns (receipt, duplicate).

    With duplicate_is_success an ALREADY_EXISTS rejection returns (None, True);
    every other rejection propagates as a permanent failure.
    """
    try:
        with track_stage_latency(SERVICE, "ledger"):
            receipt = call()
    except LedgerRejectedError as e:
        if duplicate_is_success and e.reason == RejectionReason.ALREADY_EXISTS:
            LEDGER_SUBMISSIONS_TOTAL.labels(fn=fn_name, result="duplicate").inc()
            log.info(
                "ledger_duplicate_treated_as_success",
                extra={"payload": {"task_id": task.id, "fn": fn_name}},
            )
            return None, True
        LEDGER_SUBMISSIONS_TOTAL.labels(fn=fn_name, result="rejected").inc()
        raise
    except TransientError:
        LEDGER_SUBMISSIONS_TOTAL.labels(fn=fn_name, result="transient").inc()
        raise

    LEDGER_SUBMISSIONS_TOTAL.labels(fn=fn_name, result="included").inc()
    return receipt, False
