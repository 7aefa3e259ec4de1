"""
Content-id cache.

Why:
- a task that pinned its record and then failed at the ledger step must not
  upload the same document again on retry
- the content id is also indexed by record id ("user:cid:<id>",
  "complaint:cid:<id>") so callers can find the pinned document later
"""

from __future__ import annotations

from typing import Any

TASK_CID_PREFIX = "task:cid:"


def task_cid_key(task_id: str) -> str:
    return f"{TASK_CID_PREFIX}{task_id}"


def record_cid_key(kind: str, record_id: str) -> str:
    return f"{kind}:cid:{record_id}"


class ContentIdCache:
    def __init__(self, r: Any, *, ttl_sec: int) -> None:
        self._r = r
        self.ttl_sec = max(1, int(ttl_sec))

    def get_for_task(self, task_id: str) -> str | None:
        value = self._r.get(task_cid_key(task_id))
        return str(value) if value else None

    def get_for_record(self, kind: str, record_id: str) -> str | None:
        value = self._r.get(record_cid_key(kind, record_id))
        return str(value) if value else None

    def remember(self, *, task_id: str, kind: str, record_id: str, content_id: str) -> None:
        self._r.set(task_cid_key(task_id), content_id, ex=self.ttl_sec)
        self._r.set(record_cid_key(kind, record_id), content_id, ex=self.ttl_sec)
