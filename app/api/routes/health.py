from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe for load balancers and uptime checks.

    Not rate limited and does not touch Redis.
    """

    return {
        "status": "ok",
        "rate_limit": "enabled" if settings.app.rate_limit_enabled else "disabled",
    }
