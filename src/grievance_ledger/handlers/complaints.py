"""
Complaint registration handler.

Steps:
- validation gate (description, userId, categoryId, location): fails before
  any pin or ledger call, never retried
- complaint id: producer's, or a random COMP-<uuid> written back into the task
  payload so a retried task keeps the same id
a. pin {complaintId, ...payload} (cached per task id)
b. digests: description, attachment (zero digest if none), location
c. urgency ordinal (unknown -> MEDIUM, see domain.policy)
d. registerComplaint, wait for inclusion
e. "already exists" is an idempotent success
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grievance_ledger.common.ids import new_complaint_id
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.digests import complaint_digests
from grievance_ledger.domain.records import ComplaintRecord

from .base import HandlerResult, pin_document, submit_to_ledger

if TYPE_CHECKING:
    from grievance_ledger.worker.context import WorkerContext

log = get_project_logger()


def handle_complaint_registration(ctx: WorkerContext, task: Task) -> HandlerResult:
    record = ComplaintRecord.from_payload(
        task.payload, default_state_region=ctx.default_state_region
    )
    if not record.id:
        record.id = new_complaint_id()
        task.payload["id"] = record.id
        log.info(
            "complaint_id_generated",
            extra={"payload": {"task_id": task.id, "complaint_id": record.id}},
        )

    document = {"complaintId": record.id, **task.payload}
    content_id = pin_document(
        ctx, task, kind="complaint", record_id=record.id, document=document
    )

    digests = complaint_digests(record)
    loc = record.location
    receipt, duplicate = submit_to_ledger(
        "registerComplaint",
        lambda: ctx.ledger.register_complaint(
            complaint_id=record.id,
            user_id=record.user_id,
            category_id=record.category_id,
            sub_category=record.sub_category,
            department=record.assigned_department,
            urgency=int(record.urgency),
            description_hash=digests.description,
            attachment_hash=digests.attachment,
            location_hash=digests.location,
            is_public=record.is_public,
            pin=loc.pin,
            district=loc.district,
            city=loc.city,
            locality=loc.locality,
            state=loc.state,
        ),
        task=task,
        duplicate_is_success=True,
    )
    return HandlerResult(content_id=content_id, receipt=receipt, duplicate=duplicate)
