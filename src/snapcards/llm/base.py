"""Base types and abstract classes for LLM integration."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from snapcards.constants.llm_config import (
    DEFAULT_MODEL_ANTHROPIC,
    DEFAULT_MODEL_GEMINI,
    DEFAULT_TEXT_MODEL,
)
from snapcards.llm.parsing import extract_json


@dataclass
class LLMResponse:
    """Response from an LLM provider.

    Attributes:
        content: The text content of the response.
        model: The model used for generation.
        input_tokens: Number of input tokens.
        output_tokens: Number of output tokens.
    """

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Total tokens used (input + output)."""
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Implementations should handle:
    - API authentication
    - Optional system prompt
    - Optional inline image (base64 JPEG) for vision requests
    - Wrapping SDK errors into AIServiceError
    """

    model: str
    temperature: float

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system: str | None = None,
        image_base64: str | None = None,
        **kwargs,
    ) -> LLMResponse:
        """Execute a completion request.

        Args:
            prompt: The prompt text to send to the LLM.
            system: Optional system message.
            image_base64: Optional base64-encoded JPEG sent alongside the prompt.
            **kwargs: Additional provider-specific parameters (model, max_tokens).

        Returns:
            LLMResponse with the completion result.

        Raises:
            AIServiceError: If the request fails or the service reports an error.
        """
        pass

    def complete_json(
        self,
        prompt: str,
        system: str | None = None,
        image_base64: str | None = None,
        expect: type = dict,
        **kwargs,
    ):
        """Execute a completion request expecting a JSON reply.

        The reply may be wrapped in prose or markdown fences; the first
        balanced JSON value of the expected type is extracted.

        Returns:
            Parsed JSON (dict or list depending on `expect`).

        Raises:
            AIServiceError: If the request fails.
            MalformedResponseError: If no JSON value of the expected type is found.
        """
        response = self.complete(prompt, system=system, image_base64=image_base64, **kwargs)
        return extract_json(response.content, expect=expect)


# Default text models for each provider
DEFAULT_MODELS = {
    "openai": DEFAULT_TEXT_MODEL,
    "anthropic": DEFAULT_MODEL_ANTHROPIC,
    "gemini": DEFAULT_MODEL_GEMINI,
}


def get_provider(provider_name: str, model: str | None = None, **kwargs) -> LLMProvider:
    """Factory function to get an LLM provider.

    Args:
        provider_name: Name of provider ("openai", "anthropic", "gemini")
        model: Optional model name. Uses default if not specified.
        **kwargs: Additional provider-specific arguments (api_key, base_url).

    Returns:
        Configured LLMProvider instance.

    Raises:
        ValueError: If provider_name is unknown.

    Examples:
        >>> provider = get_provider("openai", api_key="sk-...")  # DashScope qwen-turbo
        >>> provider = get_provider("anthropic", api_key="sk-ant-...")
    """
    # Import here to avoid circular imports
    from snapcards.llm.providers.anthropic import AnthropicProvider
    from snapcards.llm.providers.gemini import GeminiProvider
    from snapcards.llm.providers.openai import OpenAIProvider

    providers = {
        "openai": OpenAIProvider,
        "anthropic": AnthropicProvider,
        "gemini": GeminiProvider,
    }

    if provider_name not in providers:
        raise ValueError(
            f"Unknown provider: {provider_name}. Available: {list(providers.keys())}"
        )

    provider_class = providers[provider_name]
    model = model or DEFAULT_MODELS.get(provider_name)

    if provider_name != "openai":
        kwargs.pop("base_url", None)

    return provider_class(model=model, **kwargs)
