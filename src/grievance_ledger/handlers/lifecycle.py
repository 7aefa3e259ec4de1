"""
Complaint lifecycle handlers: status update, assignment, resolution.

These carry no PII or free text, so nothing is pinned: the task goes straight
to the ledger. Rejections (unknown complaint, bad transition) are permanent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.records import AssignmentRecord, ResolutionRecord, StatusUpdateRecord

from .base import HandlerResult, submit_to_ledger

if TYPE_CHECKING:
    from grievance_ledger.worker.context import WorkerContext


def handle_status_update(ctx: WorkerContext, task: Task) -> HandlerResult:
    record = StatusUpdateRecord.from_payload(task.payload)
    receipt, _ = submit_to_ledger(
        "updateComplaintStatus",
        lambda: ctx.ledger.update_complaint_status(
            complaint_id=record.complaint_id, status=int(record.status)
        ),
        task=task,
        duplicate_is_success=False,
    )
    return HandlerResult(receipt=receipt)


def handle_assignment(ctx: WorkerContext, task: Task) -> HandlerResult:
    record = AssignmentRecord.from_payload(task.payload)
    receipt, _ = submit_to_ledger(
        "assignComplaint",
        lambda: ctx.ledger.assign_complaint(
            complaint_id=record.complaint_id, department_id=record.department_id
        ),
        task=task,
        duplicate_is_success=False,
    )
    return HandlerResult(receipt=receipt)


def handle_resolution(ctx: WorkerContext, task: Task) -> HandlerResult:
    record = ResolutionRecord.from_payload(task.payload)
    # keep the defaulted date so a retried task resubmits the same value
    task.payload.setdefault("resolutionDate", record.resolution_date)
    receipt, _ = submit_to_ledger(
        "resolveComplaint",
        lambda: ctx.ledger.resolve_complaint(
            complaint_id=record.complaint_id, resolution_date=record.resolution_date
        ),
        task=task,
        duplicate_is_success=False,
    )
    return HandlerResult(receipt=receipt)
