from abc import ABC, abstractmethod
from typing import Any, Sequence


class AbstractLLMClient(ABC):
	"""Interface for multimodal LLM clients that produce structured JSON outputs."""

	@abstractmethod
	async def generate_json(
		self,
		prompt: str,
		*,
		images: Sequence[str] = (),
		schema: dict[str, Any] | None = None,
		**kwargs: Any,
	) -> dict[str, Any]:
		"""Generate a structured JSON response from the model.

		Args:
			prompt: Instructions sent as the system message.
			images: Image references (data URIs or URLs) sent as the user turn.
			schema: Optional JSON schema the response must follow.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			dict[str, Any]: Parsed JSON object returned by the model.

		Raises:
			RuntimeError: If the provider call fails or the response cannot be parsed.
		"""
		...
