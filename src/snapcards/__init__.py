"""snapcards: photo-to-flashcard word sync and enrichment."""

__version__ = "0.3.0"
