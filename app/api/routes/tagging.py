from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends

from app.adapters.llm.factory import create_llm_client
from app.core.rate_limit import enforce_rate_limit
from app.schemas.tagging import TagCheckRequest, TagCheckResponse
from app.services.tagging_service import TaggingService

router = APIRouter(tags=["Tagging"])


@lru_cache(maxsize=1)
def get_tagging_service() -> TaggingService:
    """Build the tagging service on first use and reuse it afterwards."""
    return TaggingService(llm=create_llm_client())


@router.post(
    "/check",
    response_model=TagCheckResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def check_tags(
    payload: TagCheckRequest,
    service: Annotated[TaggingService, Depends(get_tagging_service)],
) -> TagCheckResponse:
    """Judge the requested tags on every image of a post.

    Requests are rate limited per client IP unless they carry the bypass
    key in X-API-Key.

    Args:
        payload: Post text, up to four images and the mandatory tags.
        service: Tagging service (injected).

    Returns:
        TagCheckResponse: One list of tag verdicts per image.
    """
    return await service.tag_images(payload)
