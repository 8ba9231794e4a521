"""Redis-backed fixed-window rate limiter.

Notes:
- Shared across workers: the count lives in Redis, never in process memory.
- No locks: ``INCR`` is atomic, so concurrent checks for one identity get
  distinct counts and exactly one of them sees 1 and arms the TTL.
- The key carries no window number. The window ends when Redis expires the
  key, ``window`` seconds after the first request.
- ``INCR`` and ``EXPIRE`` are two round trips. A failure between them
  leaves a counter without a TTL until someone deletes it.
- Fails open: any store error admits the request.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    RateLimitPolicy,
)
from app.adapters.rate_limit.identity import resolve_identity
from app.adapters.store.redis_client import CounterStore, get_client

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "rate-limit"


def build_counter_key(identity: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    return f"{prefix}:{identity}"


def hash_identity(identity: str) -> str:
    """Short digest of an identity, safe to put in logs."""
    return hashlib.sha256(identity.encode()).hexdigest()[:16]


class RedisFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window limiter counting requests per identity in Redis."""

    def __init__(
        self,
        *,
        client_factory: Callable[[], CounterStore] = get_client,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        """Initialize the limiter.

        Args:
            client_factory: Returns the counter store; called on every check
                so the shared client is only built when first needed.
            key_prefix: Namespace for counter keys.
        """
        self._client_factory = client_factory
        self._key_prefix = key_prefix

    async def _increment(self, key: str, window: int) -> int:
        client = self._client_factory()
        count = await client.incr(key)
        if count == 1:
            await client.expire(key, window)
        return count

    async def check(self, request: Any, policy: RateLimitPolicy) -> RateLimitDecision:
        """Count one request for the caller and decide admit or reject.

        Args:
            request: Incoming request.
            policy: Limit, window and optional identity function.

        Returns:
            RateLimitDecision. Store failures yield an allowed decision with
            ``count=None``.
        """
        identity = resolve_identity(request, policy.identifier)
        key = build_counter_key(identity, self._key_prefix)

        try:
            count = await self._increment(key, policy.window)
        except Exception as exc:
            logger.error(
                "rate_limit.store_error",
                extra={
                    "identity_hash": hash_identity(identity),
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return RateLimitDecision(allowed=True, limit=policy.limit, remaining=policy.limit)

        remaining = max(0, policy.limit - count)
        if count > policy.limit:
            return RateLimitDecision(
                allowed=False,
                limit=policy.limit,
                remaining=0,
                count=count,
                retry_after_seconds=policy.window,
            )

        return RateLimitDecision(
            allowed=True,
            limit=policy.limit,
            remaining=remaining,
            count=count,
        )
