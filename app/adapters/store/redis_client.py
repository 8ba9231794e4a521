"""Process-wide Redis handle for the rate-limit counters.

The handle is created on first use rather than at import time, so a process
that never rate limits (health checks, CLI tooling) never touches Redis.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from redis.asyncio import Redis

from app.core.config import settings

logger = logging.getLogger(__name__)


class CounterStore(Protocol):
    """Subset of the async Redis API used by the limiter."""

    async def incr(self, name: str, amount: int = 1) -> int: ...

    async def expire(self, name: str, time: int) -> bool: ...


_client: Redis | None = None
_client_lock = threading.Lock()


def _create_client() -> Redis:
    """Build a Redis client from ``settings.store``.

    URL and token are handed to redis-py unvalidated. redis-py connects
    lazily, so a wrong token or unreachable host surfaces on the first
    command; an empty or malformed URL raises ``ValueError`` right here.
    """

    store = settings.store
    return Redis.from_url(
        store.url,
        password=store.token or None,
        socket_timeout=store.socket_timeout_seconds,
        decode_responses=True,
    )


def get_client() -> Redis:
    """Return the shared Redis client, creating it on first call.

    Double-checked under a lock: concurrent first callers all receive the
    same instance and at most one connection pool is ever built.

    Returns:
        Redis: The process-wide async Redis client.
    """

    global _client

    client = _client
    if client is not None:
        return client

    with _client_lock:
        if _client is None:
            _client = _create_client()
            logger.info(
                "store.client_created",
                extra={"has_token": bool(settings.store.token)},
            )
        return _client
