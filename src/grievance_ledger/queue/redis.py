"""
Redis client for the task queues and the result store.

- create_redis(): a dedicated connection, owned by whoever creates it (worker)
- redis_client(): shared lazily-created client for the status API
"""

from __future__ import annotations

import redis

from grievance_ledger.common.config import get_settings

_client: redis.Redis | None = None


def create_redis(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(url or get_settings().redis_url, decode_responses=True)


def redis_client() -> redis.Redis:
    """
    Singleton Redis client.
    """
    global _client
    if _client is None:
        _client = create_redis()
    return _client
