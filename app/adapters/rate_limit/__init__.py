"""Rate limiting adapters.

A fixed-window limiter whose counters live in Redis, so every worker and
every replica of the API shares one budget per caller.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision, RateLimitPolicy
from app.adapters.rate_limit.identity import client_ip_identity, resolve_identity
from app.adapters.rate_limit.redis_fixed_window import RedisFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "RateLimitDecision",
    "RateLimitPolicy",
    "RedisFixedWindowRateLimiter",
    "client_ip_identity",
    "resolve_identity",
]
