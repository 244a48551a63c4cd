"""LLM providers module."""

from snapcards.llm.providers.anthropic import AnthropicProvider
from snapcards.llm.providers.gemini import GeminiProvider
from snapcards.llm.providers.openai import OpenAIProvider

__all__ = [
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
]
