"""Storage backends for word cards and persisted settings."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from snapcards.models import WordCard

logger = logging.getLogger(__name__)


class LocalWordBackend(ABC):
    """Persistence for the word list used while no session is bound.

    Local backends only ever see whole lists: the WordListStore keeps the
    list in memory and saves the full snapshot after each mutation.
    """

    @abstractmethod
    def load(self) -> list[WordCard]:
        """Load the saved list (newest first). Returns [] if nothing is saved."""
        pass

    @abstractmethod
    def save(self, cards: list[WordCard]) -> None:
        """Replace the saved list with `cards`."""
        pass


class MemoryWordBackend(LocalWordBackend):
    """Keeps the local list in process memory only."""

    def __init__(self, cards: list[WordCard] | None = None) -> None:
        self._cards = list(cards or [])

    def load(self) -> list[WordCard]:
        return list(self._cards)

    def save(self, cards: list[WordCard]) -> None:
        self._cards = list(cards)


class JsonFileWordBackend(LocalWordBackend):
    """JSON file backend for the local word list."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> list[WordCard]:
        """Load cards from the JSON file; a missing or corrupt file yields []."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read local word list {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Local word list {self.path} is not a list, ignoring it")
            return []
        return [WordCard.from_dict(item) for item in data if isinstance(item, dict)]

    def save(self, cards: list[WordCard]) -> None:
        """Write cards atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps([card.to_dict() for card in cards], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        os.replace(tmp_path, self.path)


class RemoteWordBackend(ABC):
    """Row-level access to the per-user remote word table.

    Rows look like `{id, userid, content, status, created_at}`; reads are
    scoped to the signed-in user by the store's row-level policy.
    All methods raise RemoteStoreError on failure.
    """

    @abstractmethod
    def fetch_all(self) -> list[WordCard]:
        """All of the user's cards, newest first by creation time."""
        pass

    @abstractmethod
    def insert(self, user_id: str, card: WordCard) -> WordCard:
        """Insert a card with status `new`; returns it with the store-assigned id/date."""
        pass

    @abstractmethod
    def delete(self, card_id: str) -> None:
        pass

    @abstractmethod
    def update_status(self, card_id: str, status: str) -> None:
        pass

    @abstractmethod
    def delete_all(self, user_id: str) -> None:
        """Delete every row owned by `user_id`."""
        pass


class SettingsStorage(ABC):
    """Persistence for the settings that survive restarts (API key, demo flag)."""

    @abstractmethod
    def load(self) -> dict:
        pass

    @abstractmethod
    def save(self, settings: dict) -> None:
        pass


class MemorySettingsStorage(SettingsStorage):
    def __init__(self, settings: dict | None = None) -> None:
        self._settings = dict(settings or {})

    def load(self) -> dict:
        return dict(self._settings)

    def save(self, settings: dict) -> None:
        self._settings = dict(settings)


class JsonFileSettingsStorage(SettingsStorage):
    """Settings stored as a small JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read settings {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, settings: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(settings, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
