"""Pydantic schemas for the image tag check endpoint."""

from __future__ import annotations

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_url_adapter = TypeAdapter(AnyUrl)

DATA_IMAGE_PREFIX = "data:image/"
MAX_IMAGES = 4
MAX_TEXT_CHARS = 280


class TagCheckRequest(BaseModel):
    """A short post with its images and the tags that must be judged."""

    model_config = ConfigDict(populate_by_name=True)

    status_id: str = Field(
        ...,
        alias="statusId",
        min_length=1,
        pattern=r"^[0-9]",
        description="Identifier of the post; starts with a digit.",
    )
    text_content: str = Field(
        ...,
        alias="textContent",
        max_length=MAX_TEXT_CHARS,
        description="Post text (up to 280 characters).",
    )
    images: list[str] = Field(
        ...,
        max_length=MAX_IMAGES,
        description="Up to four images, each a data:image/... URI or an absolute URL.",
    )
    tags: list[str] = Field(
        ...,
        description="Mandatory tags the model must judge for every image.",
    )

    @field_validator("images")
    @classmethod
    def _check_images(cls, images: list[str]) -> list[str]:
        for image in images:
            if image.startswith(DATA_IMAGE_PREFIX):
                continue
            # Raises ValidationError for anything that is not an absolute URL
            _url_adapter.validate_python(image)
        return images

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, tags: list[str]) -> list[str]:
        if any(not tag for tag in tags):
            raise ValueError("tags must be non-empty strings")
        return tags


class RawTag(BaseModel):
    """A tag judgement as produced by the model."""

    id: str
    value: bool


class TaggingOutput(BaseModel):
    """Structured output requested from the model: one tag list per image."""

    result: list[list[RawTag]]


class TagVerdict(BaseModel):
    """Whether a tag applies to an image, and whether the caller required it."""

    id: str = Field(..., description="Tag name.")
    value: bool = Field(..., description="True if the tag applies to the image.")
    mandatory: bool = Field(..., description="True if the tag was one of the requested tags.")


class TagCheckResponse(BaseModel):
    """Per-image tag verdicts, in the order the images were sent."""

    result: list[list[TagVerdict]]
