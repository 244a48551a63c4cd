"""Data models for word cards.

This module defines dataclasses for:
- Sentence: one example sentence with translation and usage note
- WordCard: the study record for one headword, plus its mastery status
"""

import logging
import re
import threading
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from snapcards.constants.statuses import DEFAULT_STATUS, VALID_STATUSES, WordStatus

logger = logging.getLogger(__name__)

_id_lock = threading.Lock()
_last_id_ms = 0

# Fractional seconds longer or shorter than 6 digits trip up fromisoformat on 3.10
_FRACTION_RE = re.compile(r"\.(\d+)")


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_local_id() -> str:
    """Generate a time-based id for cards created without a remote store.

    Ids are epoch-millisecond strings, bumped forward when several cards are
    created within the same millisecond so they stay unique.
    """
    global _last_id_ms
    with _id_lock:
        candidate = now_ms()
        if candidate <= _last_id_ms:
            candidate = _last_id_ms + 1
        _last_id_ms = candidate
    return str(candidate)


def parse_timestamp_ms(value: Any) -> int:
    """Convert a remote `created_at` value to epoch milliseconds.

    Accepts ISO-8601 strings (with `Z` or offset suffix), datetimes and numbers.
    Returns 0 when the value is missing or unparsable.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Could not parse timestamp {value!r}")
            return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def normalize_status(value: Any) -> str:
    """Map a stored status to a valid one; missing or unknown values become `new`."""
    if not value:
        return DEFAULT_STATUS
    status = str(value).strip().lower()
    if status not in VALID_STATUSES:
        logger.warning(f"Unknown word status {value!r}, treating as {DEFAULT_STATUS!r}")
        return DEFAULT_STATUS
    return status


@dataclass
class Sentence:
    """Example sentence for a word card.

    Attributes:
        english: The English sentence.
        chinese: Its translation in the reader's language.
        explanation: Short note on how the word is used here.
    """

    english: str
    chinese: str = ""
    explanation: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "english": self.english,
            "chinese": self.chinese,
            "explanation": self.explanation,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Sentence":
        return cls(
            english=str(d.get("english") or ""),
            chinese=str(d.get("chinese") or ""),
            explanation=str(d.get("explanation") or ""),
        )


@dataclass
class WordCard:
    """Study card for one headword.

    `status` is the only field changed after creation. `id` and `date_added`
    are empty until a backend stores the card.

    Attributes:
        word: Display form of the headword (case preserved).
        meaning: Short gloss in the reader's language.
        pronunciation: Phonetic transcription.
        sentences: Example sentences in display order.
        id: Local time-based id or remote row id.
        date_added: Creation time, epoch milliseconds.
        status: One of new, mastered, review, forgot.
    """

    word: str
    meaning: str = ""
    pronunciation: str = ""
    sentences: list[Sentence] = field(default_factory=list)
    id: str = ""
    date_added: int = 0
    status: str = DEFAULT_STATUS

    @property
    def key(self) -> str:
        """Case-insensitive identity used for duplicate detection."""
        return self.word.strip().lower()

    def same_word(self, other: str) -> bool:
        return self.key == other.strip().lower()

    def with_status(self, status: WordStatus) -> "WordCard":
        return replace(self, status=status)

    def content(self) -> dict[str, Any]:
        """Card payload as stored in the remote `content` column."""
        return {
            "word": self.word,
            "meaning": self.meaning,
            "pronunciation": self.pronunciation,
            "sentences": [s.to_dict() for s in self.sentences],
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for the local JSON file."""
        data = self.content()
        data.update(
            {
                "id": self.id,
                "dateAdded": self.date_added,
                "status": self.status,
            }
        )
        return data

    @classmethod
    def from_content(cls, d: dict[str, Any], word: str | None = None) -> "WordCard":
        """Build an unstored card from a content blob (enrichment output)."""
        sentences = d.get("sentences") or []
        return cls(
            word=str(word if word is not None else d.get("word") or ""),
            meaning=str(d.get("meaning") or ""),
            pronunciation=str(d.get("pronunciation") or ""),
            sentences=[Sentence.from_dict(s) for s in sentences if isinstance(s, dict)],
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "WordCard":
        """Deserialize from the local JSON representation."""
        card = cls.from_content(d)
        card.id = str(d.get("id") or "")
        card.date_added = int(d.get("dateAdded") or 0)
        card.status = normalize_status(d.get("status"))
        return card

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WordCard":
        """Map a remote `user_words` row to a card.

        A missing or null `status` column maps to `new`.
        """
        card = cls.from_content(row.get("content") or {})
        card.id = str(row.get("id") or "")
        card.date_added = parse_timestamp_ms(row.get("created_at"))
        card.status = normalize_status(row.get("status"))
        return card
