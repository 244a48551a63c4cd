"""Word enrichment adapter: bare word -> WordCard (meaning, phonetics, sentences)."""

import copy
import logging

from snapcards.ai.base import AIAdapter
from snapcards.constants.demo import DEMO_CARDS, DEMO_PLACEHOLDER_CARD
from snapcards.constants.llm_config import DEFAULT_TEXT_MODEL, DEMO_ENRICHMENT_DELAY
from snapcards.errors import MalformedResponseError
from snapcards.llm.retry import call_llm_json
from snapcards.models import WordCard

logger = logging.getLogger(__name__)

ENRICHMENT_SYSTEM_PROMPT = "You are a helpful English tutor. Return JSON only."

ENRICHMENT_PROMPT = """You are a helpful English tutor. Provide a detailed study card for the word "{word}".

Required fields in JSON:
1. "word": The word itself.
2. "meaning": Chinese translation (concise but accurate). MUST BE IN CHINESE. DO NOT LEAVE EMPTY.
3. "pronunciation": IPA phonetic symbol.
4. "sentences": An array of 2 distinct example sentences. Each sentence object must have:
   - "english": The English sentence.
   - "chinese": Chinese translation.
   - "explanation": A brief explanation of how the word is used in this context (in Chinese).

Return strict JSON format only, no markdown code blocks:
{{
  "word": "{word}",
  "meaning": "...",
  "pronunciation": "...",
  "sentences": [
    {{ "english": "...", "chinese": "...", "explanation": "..." }},
    {{ "english": "...", "chinese": "...", "explanation": "..." }}
  ]
}}"""


def demo_card(word: str) -> WordCard:
    """Built-in card for `word`; unknown words get the generic placeholder."""
    entry = DEMO_CARDS.get(word.strip().lower())
    if entry is not None:
        return WordCard.from_content(copy.deepcopy(entry))
    return WordCard.from_content(copy.deepcopy(DEMO_PLACEHOLDER_CARD), word=word)


def validate_card_payload(data: dict, word: str) -> WordCard:
    """Check an enrichment reply and turn it into an unstored WordCard.

    Raises:
        MalformedResponseError: If `meaning` is empty or `sentences` is not a list.
    """
    meaning = data.get("meaning")
    if not isinstance(meaning, str) or not meaning.strip():
        raise MalformedResponseError(f"Enrichment for {word!r} has no meaning")
    sentences = data.get("sentences", [])
    if sentences is None:
        sentences = []
    if not isinstance(sentences, list):
        raise MalformedResponseError(
            f"Enrichment for {word!r} has sentences of type {type(sentences).__name__}"
        )
    payload = dict(data, sentences=sentences)
    reply_word = data.get("word")
    if not isinstance(reply_word, str) or not reply_word.strip():
        reply_word = word
    return WordCard.from_content(payload, word=reply_word)


class EnrichmentAdapter(AIAdapter):
    """Expand one word into a study card.

    Demo mode (or no usable key) serves the built-in table; otherwise the
    enrichment model is asked for a JSON card. Failures propagate to the
    caller as a single-word failure.
    """

    def __init__(self, model: str = DEFAULT_TEXT_MODEL, **kwargs):
        kwargs.setdefault("demo_delay", DEMO_ENRICHMENT_DELAY)
        super().__init__(model=model, **kwargs)

    def enrich(self, word: str, api_key: str | None = None) -> WordCard:
        """Enrich a word.

        Args:
            word: Headword as selected by the user.
            api_key: Optional per-request key.

        Returns:
            WordCard without id/date_added (assigned when stored).

        Raises:
            AIServiceError: Transport or service failure.
            MalformedResponseError: Reply is not a valid card object.
        """
        key = self.live_key(api_key)
        if key is None:
            logger.debug(f"Enrichment for {word!r} running in demo mode")
            self.simulate_latency()
            return demo_card(word)

        data = call_llm_json(
            self.provider_for(key),
            ENRICHMENT_PROMPT.format(word=word),
            system=ENRICHMENT_SYSTEM_PROMPT,
            expect=dict,
            max_retries=self.max_retries,
            sleep=self._sleep,
        )
        return validate_card_payload(data, word)
