"""Rate limiter interfaces.

The HTTP layer depends on this abstraction, not on the Redis implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

IdentityFn = Callable[[Any], str]


@dataclass(frozen=True)
class RateLimitPolicy:
    """How many requests an identity may make per window.

    Attributes:
        limit: Max requests per window.
        window: Window length in seconds, counted from the first request.
        identifier: Optional function deriving the caller identity from the
            request. When absent or failing, the default identity is used.
    """

    limit: int
    window: int
    identifier: IdentityFn | None = None

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        if self.window < 1:
            raise ValueError("window must be >= 1")


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        count: Counter value after this check; None when the store could
            not be consulted and the check failed open.
        retry_after_seconds: Upper bound on the wait before retrying, set
            only when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    count: int | None = None
    retry_after_seconds: int | None = None

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
        }
        if not self.allowed and self.retry_after_seconds is not None:
            headers["Retry-After"] = str(self.retry_after_seconds)
        return headers


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    async def check(self, request: Any, policy: RateLimitPolicy) -> RateLimitDecision:
        """Count one request against the caller's budget and decide.

        Args:
            request: Incoming request (anything exposing ``headers.get``).
            policy: Limit, window and optional identity function.

        Returns:
            RateLimitDecision describing whether the request is admitted.
        """
        raise NotImplementedError
