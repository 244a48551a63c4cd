"""OpenAI-compatible provider implementation.

Also used for DashScope (Qwen) through its OpenAI-compatible endpoint.
"""

import os

import openai
from openai import OpenAI

from snapcards.constants.llm_config import (
    DASHSCOPE_BASE_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TEXT_MODEL,
)
from snapcards.errors import AIServiceError
from snapcards.llm.base import LLMProvider, LLMResponse


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider.

    Args:
        api_key: API key. If not provided, reads from DASHSCOPE_API_KEY, then
            OPENAI_API_KEY env vars.
        model: Model to use. Defaults to qwen-turbo.
        temperature: Temperature for sampling.
        base_url: Endpoint base URL. Defaults to DashScope compatible mode.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_TEXT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        base_url: str | None = DASHSCOPE_BASE_URL,
    ):
        self.api_key = (
            api_key or os.environ.get("DASHSCOPE_API_KEY") or os.environ.get("OPENAI_API_KEY")
        )
        if not self.api_key:
            raise ValueError(
                "API key not found. Set DASHSCOPE_API_KEY or OPENAI_API_KEY, or pass api_key."
            )

        self.model = model
        self.temperature = temperature
        self.base_url = base_url
        self.client = OpenAI(api_key=self.api_key, base_url=base_url)

    def _build_messages(
        self, prompt: str, system: str | None, image_base64: str | None
    ) -> list[dict]:
        messages: list[dict] = []
        if system:
            messages.append({"role": "system", "content": system})
        if image_base64:
            messages.append(
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
                        },
                    ],
                }
            )
        else:
            messages.append({"role": "user", "content": prompt})
        return messages

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
            image_base64: Optional base64 JPEG, sent as an image_url data URL.
            **kwargs: Additional parameters (model, temperature, max_tokens).

        Returns:
            LLMResponse with the completion result.
        """
        model = kwargs.get("model", self.model)
        temperature = kwargs.get("temperature", self.temperature)
        max_tokens = kwargs.get("max_tokens", DEFAULT_MAX_TOKENS)

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=self._build_messages(prompt, system, image_base64),
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )
        except openai.APIStatusError as e:
            raise AIServiceError(f"{model} request failed ({e.status_code}): {e.message}") from e
        except openai.OpenAIError as e:
            raise AIServiceError(f"{model} request failed: {e}") from e

        if not response.choices:
            raise AIServiceError(f"No content returned from {model}")
        content = response.choices[0].message.content
        if not content:
            raise AIServiceError(f"No content returned from {model}")

        usage = response.usage
        return LLMResponse(
            content=content,
            model=response.model or model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )
