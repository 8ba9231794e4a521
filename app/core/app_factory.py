"""Application factory for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import health_router, tagging_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Image Tag Checker API",
        description=(
            "Checks which tags apply to the images of a short post. Send the post "
            "text, up to four images and the mandatory tags; a multimodal model "
            "returns, per image, a verdict for every mandatory tag plus any other "
            "relevant tag. Requests are rate limited per client IP."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(tagging_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
