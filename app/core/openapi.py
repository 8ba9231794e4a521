"""OpenAPI customization.

Documents the optional ``X-API-Key`` bypass header and the 429 response of
rate-limited operations, and adds tag metadata.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

RATE_LIMITED_RESPONSE: Dict[str, Any] = {
    "description": "Rate limit exceeded for this client.",
    "headers": {
        "X-RateLimit-Limit": {
            "description": "Requests allowed per window.",
            "schema": {"type": "integer"},
        },
        "X-RateLimit-Remaining": {
            "description": "Requests left in the current window (0 when throttled).",
            "schema": {"type": "integer"},
        },
        "Retry-After": {
            "description": "Seconds to wait at most before retrying.",
            "schema": {"type": "integer"},
        },
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation.

    - Adds an optional ``BypassKey`` security scheme (header ``X-API-Key``)
      to rate-limited operations; ``{}`` keeps anonymous access valid
    - Adds the 429 response to every operation outside ``/health``
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "BypassKey",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Trusted callers skip rate limiting with the shared key.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in (
            {"name": "Tagging", "description": "Judge tags on the images of a post."},
            {"name": "Health", "description": "Liveness checks."},
        ):
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj["security"] = [{}, {"BypassKey": []}]
                    method_obj.setdefault("responses", {}).setdefault("429", RATE_LIMITED_RESPONSE)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
