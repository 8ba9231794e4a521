"""Request correlation middleware.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

DURATION_HEADER = "X-Request-Duration-ms"


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id to the logging context and echo it back.

    The id comes from the configured header when the caller (or a gateway in
    front of us) sent one, else a fresh UUID4. Every request ends with one
    ``http.request`` log line; rejected (429) calls log at WARNING.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or uuid.uuid4().hex
    set_request_id(request_id)
    started = time.perf_counter()

    try:
        response: Response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        level = logging.WARNING if response.status_code == 429 else logging.INFO
        logger.log(
            level,
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault(DURATION_HEADER, f"{elapsed_ms:.2f}")
    return response
