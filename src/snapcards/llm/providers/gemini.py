"""Gemini provider implementation."""

import base64
import os

from google import genai
from google.genai import errors, types

from snapcards.constants.llm_config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL_GEMINI,
    DEFAULT_TEMPERATURE,
)
from snapcards.errors import AIServiceError
from snapcards.llm.base import LLMProvider, LLMResponse


class GeminiProvider(LLMProvider):
    """Google Gemini API provider.

    Args:
        api_key: Google API key. If not provided, reads from GOOGLE_API_KEY env var.
        model: Model to use. Defaults to gemini-2.5-flash.
        temperature: Temperature for sampling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL_GEMINI,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GOOGLE_API_KEY not found. Set it as environment variable or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self._client = genai.Client(api_key=self.api_key)

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
            system: Optional system instruction.
            image_base64: Optional base64 JPEG, sent as an inline part.
            **kwargs: Additional parameters (temperature, max_output_tokens).

        Returns:
            LLMResponse with the completion result.
        """
        temperature = kwargs.get("temperature", self.temperature)
        max_output_tokens = kwargs.get("max_output_tokens", DEFAULT_MAX_TOKENS)

        config_kwargs: dict = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        }
        if system:
            config_kwargs["system_instruction"] = system

        # Skip internal thinking on flash models; replies here are short JSON
        if "flash" in self.model:
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=0)

        contents: list = [prompt]
        if image_base64:
            contents.append(
                types.Part.from_bytes(data=base64.b64decode(image_base64), mime_type="image/jpeg")
            )

        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except errors.APIError as e:
            raise AIServiceError(f"{self.model} request failed ({e.code}): {e.message}") from e

        content = response.text or ""
        if not content:
            raise AIServiceError(f"No content returned from {self.model}")

        input_tokens = 0
        output_tokens = 0
        if getattr(response, "usage_metadata", None):
            input_tokens = response.usage_metadata.prompt_token_count or 0
            output_tokens = response.usage_metadata.candidates_token_count or 0

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
