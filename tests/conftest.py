from __future__ import annotations

import pytest

from grievance_ledger.ledger.mock import InMemoryLedger
from grievance_ledger.pinning.mock import MockContentPinner
from grievance_ledger.storage.content_ids import ContentIdCache
from grievance_ledger.storage.results import ResultStore
from grievance_ledger.worker.context import WorkerContext


class FakeRedis:
    """
    In-process stand-in for the redis-py calls the worker and the API make.
    BLPOP never blocks: it returns None when every listed queue is empty.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self._ttl: dict[str, int | None] = {}
        self._lists: dict[str, list[str]] = {}
        self.blpop_calls: list[tuple[list[str], int]] = []
        self.closed = False

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._store[key] = value
        self._ttl[key] = ex
        return True

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def ttl(self, key: str) -> int | None:
        return self._ttl.get(key)

    def delete(self, key: str) -> int:
        removed = 0
        for bucket in (self._store, self._lists):
            if key in bucket:
                del bucket[key]
                removed = 1
        return removed

    def rpush(self, key: str, *values: str) -> int:
        items = self._lists.setdefault(key, [])
        items.extend(values)
        return len(items)

    def blpop(self, keys: list[str], timeout: int = 0) -> tuple[str, str] | None:
        self.blpop_calls.append((list(keys), timeout))
        for key in keys:
            items = self._lists.get(key)
            if items:
                return key, items.pop(0)
        return None

    def llen(self, key: str) -> int:
        return len(self._lists.get(key, []))

    def lrange(self, key: str, start: int, end: int) -> list[str]:
        items = self._lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def worker_ctx(fake_redis: FakeRedis) -> WorkerContext:
    return WorkerContext(
        redis=fake_redis,
        pinner=MockContentPinner(),
        ledger=InMemoryLedger(),
        results=ResultStore(fake_redis, ttl_sec=3600),
        content_ids=ContentIdCache(fake_redis, ttl_sec=3600),
        poll_interval_ms=1000,
        retry_limit=3,
        retry_backoff_ms=0,
    )
