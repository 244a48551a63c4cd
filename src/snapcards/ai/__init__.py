"""Recognition and enrichment adapters over the LLM providers."""

from snapcards.ai.enrichment import EnrichmentAdapter
from snapcards.ai.recognition import RecognitionAdapter

__all__ = ["EnrichmentAdapter", "RecognitionAdapter"]
