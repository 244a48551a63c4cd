"""Shared credential and provider handling for the AI adapters."""

import logging
import time
from typing import Callable, Protocol

from snapcards.config import resolve_api_key
from snapcards.constants.llm_config import DASHSCOPE_BASE_URL, DEFAULT_MAX_RETRIES, DEFAULT_PROVIDER
from snapcards.llm.base import LLMProvider, get_provider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str], LLMProvider]


class DemoFlag(Protocol):
    is_demo_mode: bool


class AIAdapter:
    """Base for adapters that either call an LLM or short-circuit to canned data.

    The canned path is taken when demo mode is on or no usable credential
    exists (neither a per-call key nor the configured fallback).

    Args:
        model: Model name passed to the provider.
        mode: Object exposing `is_demo_mode` (usually the ModeController).
        fallback_api_key: Key used when the caller supplies none.
        provider_name: "openai", "anthropic" or "gemini".
        base_url: Endpoint for the openai provider.
        provider_factory: Builds a provider from a key; defaults to get_provider.
        max_retries: Retries per request after the first attempt.
        demo_delay: Simulated latency of the canned path, in seconds.
        sleep: Sleep function (injected by tests).
    """

    def __init__(
        self,
        model: str,
        mode: DemoFlag | None = None,
        fallback_api_key: str | None = None,
        provider_name: str = DEFAULT_PROVIDER,
        base_url: str | None = DASHSCOPE_BASE_URL,
        provider_factory: ProviderFactory | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        demo_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.model = model
        self.mode = mode
        self.fallback_api_key = fallback_api_key
        self.provider_name = provider_name
        self.base_url = base_url
        self.max_retries = max_retries
        self.demo_delay = demo_delay
        self._sleep = sleep
        self._provider_factory = provider_factory or self._default_factory

    def _default_factory(self, api_key: str) -> LLMProvider:
        return get_provider(
            self.provider_name, model=self.model, api_key=api_key, base_url=self.base_url
        )

    @property
    def is_demo(self) -> bool:
        return bool(self.mode is not None and self.mode.is_demo_mode)

    def live_key(self, api_key: str | None) -> str | None:
        """Return the key for a live call, or None when the canned path applies."""
        if self.is_demo:
            return None
        return resolve_api_key(api_key, self.fallback_api_key)

    def provider_for(self, api_key: str) -> LLMProvider:
        return self._provider_factory(api_key)

    def simulate_latency(self) -> None:
        if self.demo_delay > 0:
            self._sleep(self.demo_delay)
