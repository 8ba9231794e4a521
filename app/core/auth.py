"""Shared-secret bypass for trusted callers.

Requests presenting the configured key in ``X-API-Key`` skip rate limiting.
Every other request, with a wrong key or none, is served but rate limited.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode()).hexdigest()[:16]


def has_bypass_key(provided_key: str | None) -> bool:
    """Check whether ``provided_key`` matches the configured bypass secret.

    Args:
        provided_key: Value of the X-API-Key header, if any.

    Returns:
        True only when a bypass key is configured and matches exactly.
    """
    configured = settings.app.api_key
    if not configured or not provided_key:
        return False

    if hmac.compare_digest(provided_key.encode(), configured.encode()):
        return True

    logger.warning(
        "auth.bypass_key_mismatch",
        extra={"api_key_hash": hash_api_key(provided_key)},
    )
    return False
