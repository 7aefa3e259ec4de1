"""
User registration handler.

Steps:
a. pin {...payload, role} (cached per task id)
b. digests: email, national id (or sentinel), location
c. registerUser with digests + plaintext location, wait for inclusion
d. "already registered" is an idempotent success
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grievance_ledger.contracts.tasks import Task
from grievance_ledger.domain.digests import user_digests
from grievance_ledger.domain.policy import USER_ROLE
from grievance_ledger.domain.records import UserRecord

from .base import HandlerResult, pin_document, submit_to_ledger

if TYPE_CHECKING:
    from grievance_ledger.worker.context import WorkerContext


def handle_user_registration(ctx: WorkerContext, task: Task) -> HandlerResult:
    record = UserRecord.from_payload(task.payload)

    document = {**task.payload, "role": USER_ROLE}
    content_id = pin_document(ctx, task, kind="user", record_id=record.id, document=document)

    digests = user_digests(record)
    loc = record.location
    receipt, duplicate = submit_to_ledger(
        "registerUser",
        lambda: ctx.ledger.register_user(
            user_id=record.id,
            name=record.name,
            role=USER_ROLE,
            email_hash=digests.email,
            national_id_hash=digests.national_id,
            location_hash=digests.location,
            pin=loc.pin,
            district=loc.district,
            city=loc.city,
            state=loc.state,
            municipal=loc.municipal,
        ),
        task=task,
        duplicate_is_success=True,
    )
    return HandlerResult(content_id=content_id, receipt=receipt, duplicate=duplicate)
