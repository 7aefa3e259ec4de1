"""
Result store: terminal outcome per task id.

Implementation:
- JSON under "task_result:<task_id>" with a TTL (old outcomes expire)
- written once by the worker at terminal resolution, read by the status API
"""

from __future__ import annotations

import json
from typing import Any

from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.contracts.tasks import TaskOutcome

log = get_project_logger()

RESULT_KEY_PREFIX = "task_result:"


def result_key(task_id: str) -> str:
    return f"{RESULT_KEY_PREFIX}{task_id}"


class ResultStore:
    def __init__(self, r: Any, *, ttl_sec: int) -> None:
        self._r = r
        self.ttl_sec = max(1, int(ttl_sec))

    def set_result(self, outcome: TaskOutcome, ttl_sec: int | None = None) -> None:
        payload = json.dumps(outcome.to_dict(), ensure_ascii=False)
        self._r.set(result_key(outcome.task_id), payload, ex=int(ttl_sec or self.ttl_sec))

    def get_result(self, task_id: str) -> TaskOutcome | None:
        raw = self._r.get(result_key(task_id))
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return TaskOutcome.from_dict(data)
        except (TypeError, ValueError, KeyError) as e:
            log.warning(
                "task_result_unreadable",
                extra={"payload": {"task_id": task_id, "err": str(e)[:200]}},
            )
            return None
