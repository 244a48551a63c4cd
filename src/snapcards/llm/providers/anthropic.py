"""Anthropic provider implementation."""

import os

import anthropic
from anthropic import Anthropic

from snapcards.constants.llm_config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL_ANTHROPIC,
    DEFAULT_TEMPERATURE,
)
from snapcards.errors import AIServiceError
from snapcards.llm.base import LLMProvider, LLMResponse


class AnthropicProvider(LLMProvider):
    """Anthropic API provider.

    Args:
        api_key: Anthropic API key. If not provided, reads from ANTHROPIC_API_KEY env var.
        model: Model to use. Defaults to claude-3-5-haiku.
        temperature: Temperature for sampling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL_ANTHROPIC,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not found. Set it as environment variable or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self.client = Anthropic(api_key=self.api_key)

    def complete(
        self,
        prompt: str,
        system: str | None = None,
        image_base64: str | None = None,
        **kwargs,
    ) -> LLMResponse:
        """Execute a completion request.

        Args:
            prompt: The prompt text to send.
            system: Optional system message.
            image_base64: Optional base64 JPEG, sent as an image content block.
            **kwargs: Additional parameters (model, temperature, max_tokens).

        Returns:
            LLMResponse with the completion result.
        """
        model = kwargs.get("model", self.model)
        temperature = kwargs.get("temperature", self.temperature)
        max_tokens = kwargs.get("max_tokens", DEFAULT_MAX_TOKENS)

        if image_base64:
            content: str | list[dict] = [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": "image/jpeg",
                        "data": image_base64,
                    },
                },
                {"type": "text", "text": prompt},
            ]
        else:
            content = prompt

        request: dict = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system:
            request["system"] = system

        try:
            response = self.client.messages.create(**request)
        except anthropic.APIStatusError as e:
            raise AIServiceError(f"{model} request failed ({e.status_code}): {e.message}") from e
        except anthropic.AnthropicError as e:
            raise AIServiceError(f"{model} request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise AIServiceError(f"No content returned from {model}")

        return LLMResponse(
            content=text,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
