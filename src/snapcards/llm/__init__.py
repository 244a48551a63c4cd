"""LLM integration module.

Provides:
- LLMProvider abstract base class for different LLM backends
- Concrete providers for OpenAI-compatible endpoints, Anthropic, Gemini
- Tolerant JSON extraction and retry utilities
"""

from snapcards.llm.base import LLMProvider, LLMResponse, get_provider
from snapcards.llm.parsing import extract_json
from snapcards.llm.retry import call_llm_json

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "get_provider",
    "extract_json",
    "call_llm_json",
]
