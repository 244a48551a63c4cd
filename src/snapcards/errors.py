"""Exceptions raised by snapcards.

Duplicate adds are not errors (they are silent no-ops), and per-word
enrichment failures inside a batch are contained by the pipeline.
"""


class SnapcardsError(Exception):
    """Base class for all snapcards errors."""


class AIServiceError(SnapcardsError):
    """Recognition/enrichment service failed (network, non-2xx, error payload)."""


class MalformedResponseError(SnapcardsError, ValueError):
    """Service replied, but the reply could not be parsed into the expected shape."""


class RemoteStoreError(SnapcardsError):
    """Remote word store rejected or failed a request."""
