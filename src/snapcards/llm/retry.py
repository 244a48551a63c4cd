"""Retry utilities for LLM calls.

Retries transport failures and malformed replies with exponential backoff.
The final error is re-raised unchanged so callers can still tell the two apart.
"""

import logging
import time
from typing import Any, Callable

from snapcards.constants.llm_config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY
from snapcards.errors import AIServiceError, MalformedResponseError
from snapcards.llm.base import LLMProvider

logger = logging.getLogger(__name__)


def call_llm_json(
    provider: LLMProvider,
    prompt: str,
    system: str | None = None,
    image_base64: str | None = None,
    expect: type = dict,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    on_retry: Callable[[int, Exception], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Call LLM and parse a JSON reply, retrying on failure.

    Args:
        provider: LLM provider instance
        prompt: Prompt text
        system: Optional system message
        image_base64: Optional base64 JPEG for vision requests
        expect: `dict` for a JSON object reply, `list` for an array
        max_retries: Number of retries after the first attempt (default: 0)
        retry_delay: Base delay between retries in seconds
        on_retry: Optional callback called on each retry (attempt_num, error)
        sleep: Sleep function (injected by tests)

    Returns:
        Parsed JSON value of the expected type

    Raises:
        AIServiceError: If the last attempt failed at the transport level
        MalformedResponseError: If the last reply could not be parsed
    """
    attempts = max_retries + 1
    for attempt in range(attempts):
        try:
            return provider.complete_json(
                prompt, system=system, image_base64=image_base64, expect=expect
            )
        except (AIServiceError, MalformedResponseError) as e:
            logger.warning(f"LLM call failed (attempt {attempt + 1}/{attempts}): {e}")
            if attempt + 1 >= attempts:
                raise
            if on_retry:
                on_retry(attempt + 1, e)
            delay = retry_delay * (2**attempt)  # Exponential backoff
            logger.info(f"Retrying LLM call in {delay:.1f}s...")
            sleep(delay)

    # range(attempts) is never empty, so the loop always returns or raises
    raise AIServiceError("LLM call failed for unknown reason")
