"""Caller identity resolution for rate limiting."""

from __future__ import annotations

import logging
from typing import Any

from app.adapters.rate_limit.base import IdentityFn

logger = logging.getLogger(__name__)

UNKNOWN_IDENTITY = "unknown"
FORWARDED_FOR_HEADER = "x-forwarded-for"


def forwarded_for_identity(request: Any) -> str:
    """Default identity: the raw X-Forwarded-For header, or ``"unknown"``."""

    value = (request.headers.get(FORWARDED_FOR_HEADER) or "").strip()
    return value or UNKNOWN_IDENTITY


def client_ip_identity(request: Any) -> str:
    """Identity from the first X-Forwarded-For hop (the originating client).

    Proxies append to the header, so the left-most entry is the address the
    caller connected from. Falls back to the socket peer, then ``"unknown"``.
    """

    forwarded = request.headers.get(FORWARDED_FOR_HEADER) or ""
    client_ip = forwarded.split(",")[0].strip()
    if client_ip:
        return client_ip

    client = getattr(request, "client", None)
    host = getattr(client, "host", None) if client else None
    return host or UNKNOWN_IDENTITY


def resolve_identity(request: Any, identifier: IdentityFn | None = None) -> str:
    """Resolve the identity a request is counted against. Never raises.

    Args:
        request: Incoming request.
        identifier: Optional caller-supplied extraction function.

    Returns:
        Non-empty identity string.
    """

    if identifier is not None:
        try:
            identity = identifier(request)
        except Exception as exc:
            logger.warning(
                "rate_limit.identity_fallback",
                extra={"reason": "identifier_error", "error_type": type(exc).__name__},
            )
        else:
            if isinstance(identity, str) and identity.strip():
                return identity.strip()

    try:
        return forwarded_for_identity(request)
    except Exception as exc:
        logger.warning(
            "rate_limit.identity_fallback",
            extra={"reason": "default_error", "error_type": type(exc).__name__},
        )
        return UNKNOWN_IDENTITY
