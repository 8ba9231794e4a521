from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.tagging import router as tagging_router

__all__ = ["health_router", "tagging_router"]
