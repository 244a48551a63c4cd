"""Recognition adapter: captured image -> candidate English words."""

import base64
import logging
from pathlib import Path

from snapcards.constants.demo import DEMO_WORDS
from snapcards.constants.llm_config import DEMO_RECOGNITION_DELAY, DEFAULT_VISION_MODEL
from snapcards.ai.base import AIAdapter
from snapcards.llm.retry import call_llm_json

logger = logging.getLogger(__name__)

RECOGNITION_PROMPT = (
    "Identify the English words in the image below and remove duplicates. "
    'Return a plain JSON array of strings, for example ["apple", "banana"], '
    "with no Markdown formatting and no other text."
)


def dedupe_words(items: list) -> list[str]:
    """Order-preserving, case-insensitive de-duplication of recognized words.

    Non-string and blank entries are dropped; the first spelling wins.
    """
    seen: set[str] = set()
    words: list[str] = []
    for item in items:
        if not isinstance(item, str):
            logger.debug(f"Dropping non-string recognition item: {item!r}")
            continue
        word = item.strip()
        if not word or word.lower() in seen:
            continue
        seen.add(word.lower())
        words.append(word)
    return words


class RecognitionAdapter(AIAdapter):
    """Extract candidate words from a photo.

    In demo mode, or without a usable key, returns the canned word list after
    a short simulated delay and makes no network call. Once a live request is
    made, failures propagate; they never degrade to the canned list.
    """

    def __init__(self, model: str = DEFAULT_VISION_MODEL, **kwargs):
        kwargs.setdefault("demo_delay", DEMO_RECOGNITION_DELAY)
        super().__init__(model=model, **kwargs)

    def recognize(
        self,
        image_path: str | Path | None = None,
        image_base64: str | None = None,
        api_key: str | None = None,
    ) -> list[str]:
        """Recognize words in an image.

        Args:
            image_path: Path to the captured image (read if no base64 given).
            image_base64: Inline base64 image data.
            api_key: Optional per-request key.

        Returns:
            De-duplicated candidate words in reply order.

        Raises:
            AIServiceError: Transport or service failure.
            MalformedResponseError: Reply is not a JSON array.
            ValueError: Neither image_path nor image_base64 was given on the live path.
        """
        key = self.live_key(api_key)
        if key is None:
            logger.info("Recognition running in demo mode, returning canned words")
            self.simulate_latency()
            return list(DEMO_WORDS)

        if not image_base64:
            if image_path is None:
                raise ValueError("image_path or image_base64 is required")
            image_base64 = base64.b64encode(Path(image_path).read_bytes()).decode("ascii")

        items = call_llm_json(
            self.provider_for(key),
            RECOGNITION_PROMPT,
            image_base64=image_base64,
            expect=list,
            max_retries=self.max_retries,
            sleep=self._sleep,
        )
        words = dedupe_words(items)
        logger.info(f"Recognized {len(words)} candidate words")
        return words
