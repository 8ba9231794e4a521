"""Rate limiting dependency for FastAPI routes.

Wires the Redis fixed-window limiter into the HTTP layer:

- Callers presenting the bypass key are never counted.
- Everyone else is counted by client IP (first X-Forwarded-For hop).
- The store round-trips are bounded by ``rate_limit_timeout_seconds``; a
  slow store fails open just like an unreachable one.
- Over the limit, the request ends with HTTP 429 and X-RateLimit-* headers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import Header, HTTPException, Request, Response, status

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitPolicy
from app.adapters.rate_limit.identity import client_ip_identity
from app.adapters.rate_limit.redis_fixed_window import (
    RedisFixedWindowRateLimiter,
    hash_identity,
)
from app.core.auth import has_bypass_key
from app.core.config import settings

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide rate limiter.

    The limiter holds no counts itself, only a way to reach the shared store.
    """

    global _limiter

    if _limiter is None:
        _limiter = RedisFixedWindowRateLimiter()
    return _limiter


def get_rate_limit_policy() -> RateLimitPolicy:
    return RateLimitPolicy(
        limit=settings.app.rate_limit_requests,
        window=settings.app.rate_limit_window_seconds,
        identifier=client_ip_identity,
    )


async def enforce_rate_limit(
    request: Request,
    response: Response,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency enforcing the per-identity request ceiling.

    Args:
        request: FastAPI request.
        response: Response being built; receives X-RateLimit-* headers.
        x_api_key: Optional bypass key from the X-API-Key header.

    Raises:
        HTTPException: 429 Too Many Requests when the limit is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        return

    if has_bypass_key(x_api_key):
        logger.debug("rate_limit.bypassed", extra={"reason": "api_key"})
        return

    policy = get_rate_limit_policy()
    identity_hash = hash_identity(client_ip_identity(request))

    try:
        decision = await asyncio.wait_for(
            get_rate_limiter().check(request, policy),
            timeout=settings.app.rate_limit_timeout_seconds,
        )
    except asyncio.TimeoutError:
        # The increment may still land in Redis; the request is admitted anyway.
        logger.error(
            "rate_limit.store_timeout",
            extra={
                "identity_hash": identity_hash,
                "timeout_s": settings.app.rate_limit_timeout_seconds,
            },
        )
        return

    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "identity_hash": identity_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "count": decision.count,
                "window_s": policy.window,
            },
        )
        if settings.app.rate_limit_include_headers and decision.count is not None:
            response.headers.update(decision.headers())
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "identity_hash": identity_hash,
            "limit": decision.limit,
            "count": decision.count,
            "window_s": policy.window,
            "retry_after_s": decision.retry_after_seconds,
        },
    )
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded",
        headers=decision.headers(),
    )
