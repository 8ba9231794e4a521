"""Unit tests for TaggingService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import LLMAppError
from app.schemas.tagging import TagCheckRequest, TaggingOutput
from app.services.tagging_service import TaggingService, build_prompt, mark_mandatory

PNG = "data:image/png;base64,iVBORw0KGgo="


def make_request(images: list[str], tags: list[str]) -> TagCheckRequest:
    return TagCheckRequest(statusId="1790000000000000000", textContent="hello", images=images, tags=tags)


class TestHelperFunctions:
    def test_build_prompt_lists_mandatory_tags(self) -> None:
        prompt = build_prompt(["cat", "outdoor"])

        assert "[cat, outdoor]" in prompt
        assert "mandatory" in prompt
        assert '"id"' in prompt and '"value"' in prompt

    def test_build_prompt_without_tags(self) -> None:
        assert "[]" in build_prompt([])

    def test_mark_mandatory(self) -> None:
        output = TaggingOutput.model_validate(
            {"result": [[{"id": "cat", "value": True}, {"id": "sofa", "value": True}], []]}
        )

        verdicts = mark_mandatory(output, ["cat"])

        assert [[v.model_dump() for v in image] for image in verdicts] == [
            [
                {"id": "cat", "value": True, "mandatory": True},
                {"id": "sofa", "value": True, "mandatory": False},
            ],
            [],
        ]


class TestTagImages:
    @pytest.mark.asyncio
    async def test_no_images_skips_llm(self) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock()
        service = TaggingService(llm=llm)

        response = await service.tag_images(make_request([], ["cat"]))

        assert response.result == []
        llm.generate_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sends_images_and_schema(self) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(
            return_value={"result": [[{"id": "cat", "value": False}, {"id": "dog", "value": True}]]}
        )
        service = TaggingService(llm=llm)

        response = await service.tag_images(make_request([PNG], ["cat"]))

        args, kwargs = llm.generate_json.call_args
        assert "[cat]" in args[0]
        assert kwargs["images"] == [PNG]
        assert kwargs["schema"] == TaggingOutput.model_json_schema()

        verdicts = response.result[0]
        assert verdicts[0].id == "cat" and verdicts[0].value is False and verdicts[0].mandatory is True
        assert verdicts[1].id == "dog" and verdicts[1].mandatory is False

    @pytest.mark.asyncio
    async def test_invalid_llm_output_raises(self) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(return_value={"result": [[{"id": "cat", "value": "maybe"}]]})
        service = TaggingService(llm=llm)

        with pytest.raises(LLMAppError) as exc_info:
            await service.tag_images(make_request([PNG], ["cat"]))

        assert exc_info.value.code == "llm_invalid_output"
        assert exc_info.value.details["errors"]

    @pytest.mark.asyncio
    async def test_missing_result_key_raises(self) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(return_value={"tags": []})
        service = TaggingService(llm=llm)

        with pytest.raises(LLMAppError):
            await service.tag_images(make_request([PNG], ["cat"]))

    @pytest.mark.asyncio
    async def test_provider_error_raises(self) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(side_effect=RuntimeError("OpenAI API error: 503"))
        service = TaggingService(llm=llm)

        with pytest.raises(LLMAppError) as exc_info:
            await service.tag_images(make_request([PNG], ["cat"]))

        assert exc_info.value.code == "llm_request_failed"
        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_image_count_mismatch_is_returned_as_is(self, caplog) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(return_value={"result": [[{"id": "cat", "value": True}]]})
        service = TaggingService(llm=llm)

        with caplog.at_level("WARNING", logger="app.services.tagging_service"):
            response = await service.tag_images(make_request([PNG, PNG], ["cat"]))

        assert len(response.result) == 1
        assert any(r.getMessage() == "tagging.image_count_mismatch" for r in caplog.records)
