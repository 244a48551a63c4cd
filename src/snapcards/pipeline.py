"""Enrichment pipeline: selected words -> word cards in the store.

Words are processed strictly one at a time. Each word either becomes a card
or is logged and skipped; the batch itself never fails.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable

from snapcards.ai.enrichment import EnrichmentAdapter
from snapcards.constants.statuses import DEFAULT_STATUS
from snapcards.models import WordCard, generate_local_id, now_ms
from snapcards.store import WordListStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Progress:
    """Batch progress after a word finished (successfully or not)."""

    completed: int
    total: int


@dataclass
class BatchResult:
    """Outcome of one enrichment batch.

    Attributes:
        added: Cards stored by this batch.
        skipped: Words already present in the list (duplicates).
        failed: Word -> error message for words that could not be enriched or stored.
    """

    added: list[WordCard] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when nothing was added; callers use this to warn the user."""
        return not self.added


def unique_words(words: Iterable[str]) -> list[str]:
    """Drop exact repeats, keeping first-seen order."""
    return list(dict.fromkeys(words))


class EnrichmentPipeline:
    """Turn a batch of selected words into stored word cards.

    Args:
        enricher: Adapter producing a card per word.
        store: Destination store.
        api_key: Optional per-request key passed to the enricher.
    """

    def __init__(
        self,
        enricher: EnrichmentAdapter,
        store: WordListStore,
        api_key: str | None = None,
    ):
        self.enricher = enricher
        self.store = store
        self.api_key = api_key

    def run(
        self,
        words: Iterable[str],
        on_progress: Callable[[Progress], None] | None = None,
    ) -> BatchResult:
        """Enrich and store each word in order.

        Args:
            words: Selected words; repeats are collapsed before processing.
            on_progress: Called after every word with {completed, total}.

        Returns:
            BatchResult; check `is_empty` to detect a batch that added nothing.
        """
        targets = unique_words(words)
        total = len(targets)
        result = BatchResult()
        logger.info(f"Enriching {total} words")

        for i, word in enumerate(targets):
            try:
                details = self.enricher.enrich(word, self.api_key)
                card = replace(
                    details,
                    id=generate_local_id(),
                    date_added=now_ms(),
                    status=DEFAULT_STATUS,
                )
                stored = self.store.add(card)
            except Exception as e:
                logger.error(f"Failed to enrich {word!r}: {e}")
                result.failed[word] = str(e)
            else:
                if stored is None:
                    result.skipped.append(word)
                else:
                    result.added.append(stored)

            if on_progress:
                on_progress(Progress(completed=i + 1, total=total))

        logger.info(
            f"Enrichment finished: {len(result.added)} added, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed"
        )
        return result
