"""Image tagging service orchestrating the multimodal LLM call.

Turns a validated tag check request into per-image tag verdicts:
- Builds the tagging prompt around the mandatory tags
- Sends the images to the LLM with the output schema enforced
- Validates the structured output
- Marks which returned tags were requested by the caller
"""

import logging
from typing import Any

from pydantic import ValidationError

from app.adapters.llm.base import AbstractLLMClient
from app.core.errors import LLMAppError
from app.schemas.tagging import TagCheckRequest, TagCheckResponse, TaggingOutput, TagVerdict

logger = logging.getLogger(__name__)


def build_prompt(tags: list[str]) -> str:
    """Build the system prompt for tagging images.

    Args:
        tags: Mandatory tags the model must judge for every image.

    Returns:
        Prompt string for the LLM.
    """
    return f"""
Analyze the following images and for each return an array of tag objects for each image.
Include and identify if image contains the following mandatory tags: [{", ".join(tags)}].
But also include any other tags you think are relevant to describe the image.
Each tag object should have the structure {{"id": "tag-name", "value": true/false}}.
Return a JSON object {{"result": [...]}} with one array per image, in the order the images were given.
If no images are provided, return an empty array.
""".strip()


def mark_mandatory(output: TaggingOutput, tags: list[str]) -> list[list[TagVerdict]]:
    """Attach the ``mandatory`` flag to every tag the model returned."""
    requested = set(tags)
    return [
        [TagVerdict(id=tag.id, value=tag.value, mandatory=tag.id in requested) for tag in image_tags]
        for image_tags in output.result
    ]


class TaggingService:
    """Service for judging tags on images using an LLM.

    Attributes:
        llm: LLM client adapter for generating structured JSON.
    """

    def __init__(self, llm: AbstractLLMClient) -> None:
        self.llm = llm

    async def _generate_tags(self, images: list[str], tags: list[str]) -> TaggingOutput:
        """Ask the model for tag judgements and validate its answer.

        Raises:
            LLMAppError: If the call fails or the output does not match the schema.
        """
        prompt = build_prompt(tags)
        schema: dict[str, Any] = TaggingOutput.model_json_schema()

        try:
            raw_response = await self.llm.generate_json(prompt, images=images, schema=schema)
        except RuntimeError as exc:
            raise LLMAppError(code="llm_request_failed", message=str(exc)) from exc

        try:
            return TaggingOutput.model_validate(raw_response)
        except ValidationError as exc:
            raise LLMAppError(
                code="llm_invalid_output",
                message="LLM output does not match the tagging schema",
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc

    async def tag_images(self, request: TagCheckRequest) -> TagCheckResponse:
        """Judge the requested tags on every image of the post.

        Args:
            request: Validated tag check request.

        Returns:
            TagCheckResponse with one verdict list per image.

        Raises:
            LLMAppError: If the LLM call fails or returns invalid output.
        """
        if not request.images:
            return TagCheckResponse(result=[])

        output = await self._generate_tags(request.images, request.tags)
        if len(output.result) != len(request.images):
            logger.warning(
                "tagging.image_count_mismatch",
                extra={
                    "status_id": request.status_id,
                    "image_count": len(request.images),
                    "result_count": len(output.result),
                },
            )

        result = mark_mandatory(output, request.tags)
        logger.info(
            "tagging.completed",
            extra={
                "status_id": request.status_id,
                "image_count": len(request.images),
                "tag_count": len(request.tags),
            },
        )
        return TagCheckResponse(result=result)
