"""
Worker context: everything one worker process owns.

- the queue connection, pinner and ledger client live for the process lifetime
- the running flag is the only mutable state shared with signal handlers
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any

from grievance_ledger.common.config import Settings, get_settings
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.domain.policy import DEFAULT_STATE_REGION
from grievance_ledger.ledger import LedgerClient, resolve_ledger_client
from grievance_ledger.pinning import ContentPinner, resolve_pinner
from grievance_ledger.queue.dispatcher import parse_queue_priority
from grievance_ledger.queue.redis import create_redis
from grievance_ledger.storage.content_ids import ContentIdCache
from grievance_ledger.storage.results import ResultStore

log = get_project_logger()


@dataclass
class WorkerContext:
    redis: Any
    pinner: ContentPinner
    ledger: LedgerClient
    results: ResultStore
    content_ids: ContentIdCache
    queues: list[str] = field(default_factory=lambda: parse_queue_priority(None))
    poll_interval_ms: int = 5000
    retry_limit: int = 3
    retry_backoff_ms: int = 0
    default_state_region: str = DEFAULT_STATE_REGION
    service_name: str = "worker-ledger"
    running: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        redis: Any | None = None,
        pinner: ContentPinner | None = None,
        ledger: LedgerClient | None = None,
    ) -> WorkerContext:
        s = settings or get_settings()
        r = redis if redis is not None else create_redis(s.redis_url)
        return cls(
            redis=r,
            pinner=pinner if pinner is not None else resolve_pinner(s),
            ledger=ledger if ledger is not None else resolve_ledger_client(s),
            results=ResultStore(r, ttl_sec=s.result_ttl_sec),
            content_ids=ContentIdCache(r, ttl_sec=s.content_cache_ttl_sec),
            queues=parse_queue_priority(s.worker_queue_priority),
            poll_interval_ms=max(1, int(s.worker_poll_interval_ms)),
            retry_limit=max(0, int(s.retry_limit)),
            retry_backoff_ms=max(0, int(s.retry_backoff_ms)),
            default_state_region=s.default_state_region or DEFAULT_STATE_REGION,
            service_name=s.service_name or "worker-ledger",
        )

    @property
    def poll_timeout_sec(self) -> int:
        """BLPOP wait window (whole seconds, at least 1)."""
        return max(1, self.poll_interval_ms // 1000)

    @property
    def poll_interval_sec(self) -> float:
        return self.poll_interval_ms / 1000.0

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def close(self) -> None:
        close = getattr(self.redis, "close", None)
        if callable(close):
            with suppress(Exception):
                close()
        log.info("worker_context_closed", extra={"payload": {"service": self.service_name}})
