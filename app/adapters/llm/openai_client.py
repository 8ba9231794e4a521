"""OpenAI vision client adapter."""

import json
from typing import Any, Sequence

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractLLMClient


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions with image inputs, returning JSON."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
        image_detail: str = "low",
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Vision-capable model name (e.g., "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
            image_detail: Detail level for every image part ("low", "high", "auto").
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.image_detail = image_detail

    def _build_messages(self, prompt: str, images: Sequence[str]) -> list[dict[str, Any]]:
        image_parts = [
            {
                "type": "image_url",
                "image_url": {"url": image, "detail": self.image_detail},
            }
            for image in images
        ]
        return [
            {"role": "system", "content": prompt},
            {"role": "user", "content": image_parts},
        ]

    async def generate_json(
        self,
        prompt: str,
        *,
        images: Sequence[str] = (),
        schema: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Generate structured JSON from a prompt and a set of images.

        Args:
            prompt: System instructions.
            images: Data URIs or URLs, one user content part each.
            schema: JSON schema; when given, enforced via structured outputs.
            **kwargs: Provider options (temperature, max_tokens, seed, ...).
                ``schema_name`` names the structured output (default "tagging").

        Returns:
            dict[str, Any]: Parsed JSON object from the LLM response.

        Raises:
            RuntimeError: If the API call fails or the response is not valid JSON.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": self._build_messages(prompt, images),
            "temperature": kwargs.pop("temperature", 0.0),
        }

        if schema is not None:
            request_params["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": kwargs.pop("schema_name", "tagging"),
                    "schema": schema,
                },
            }
        else:
            request_params["response_format"] = {"type": "json_object"}

        for param in ("max_tokens", "top_p", "seed"):
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
            content = response.choices[0].message.content

            if content is None:
                raise RuntimeError("LLM returned empty response")

            content = content.strip()

        except Exception as exc:
            raise RuntimeError(f"OpenAI API error: {str(exc)}") from exc

        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"LLM returned invalid JSON: {str(exc)}") from exc
