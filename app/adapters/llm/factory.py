"""Factory for the configured LLM client."""

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_llm_client() -> AbstractLLMClient:
    """Instantiate the LLM client named by ``settings.llm.provider``.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If the provider is unknown or its API key is missing.
    """
    provider = settings.llm.provider.lower()

    if provider == "openai":
        if not settings.llm.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY environment variable",
                details={"provider": provider},
            )
        return OpenAIClient(
            api_key=settings.llm.api_key,
            model=settings.llm.model,
            base_url=settings.llm.base_url,
            timeout_seconds=settings.llm.timeout_seconds,
            image_detail=settings.llm.image_detail,
        )

    raise ValidationAppError(
        code="llm_unknown_provider",
        message=f"Unknown LLM provider: '{provider}'. Supported providers: openai",
        details={"provider": provider, "hint": "Set LLM_PROVIDER=openai"},
    )
