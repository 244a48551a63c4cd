"""Mode controller: bound session and demo/API-key settings."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING

from snapcards.storage.backends import MemorySettingsStorage, SettingsStorage

if TYPE_CHECKING:
    from snapcards.store import WordListStore

logger = logging.getLogger(__name__)

# Keys in the persisted settings object
SETTING_API_KEY = "apiKey"
SETTING_DEMO_MODE = "isDemoMode"


@dataclass(frozen=True)
class Session:
    """Authenticated identity handed over by the auth collaborator.

    Attributes:
        user_id: Owner id used for remote inserts and bulk deletes.
        access_token: Opaque token; not interpreted here.
    """

    user_id: str
    access_token: str | None = None


class ModeController:
    """Holds the session and the persisted demo flag / API key.

    Session changes drive the WordListStore: signing out clears the list,
    signing in (or switching user) discards local state and reloads from the
    remote store in the background. Re-binding the same user only refreshes
    the session reference, so at most one reload is triggered per transition.

    Args:
        store: The WordListStore to drive.
        settings: Persistence for `apiKey` and `isDemoMode`.
    """

    def __init__(self, store: WordListStore, settings: SettingsStorage | None = None):
        self._store = store
        self._settings = settings or MemorySettingsStorage()
        saved = self._settings.load()
        self._api_key: str = str(saved.get(SETTING_API_KEY) or "")
        self._demo_mode: bool = bool(saved.get(SETTING_DEMO_MODE, True))
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def is_demo_mode(self) -> bool:
        return self._demo_mode

    @property
    def api_key(self) -> str:
        return self._api_key

    def set_session(self, session: Session | None) -> Future | None:
        """Bind or clear the session.

        Returns:
            Future of the triggered reload, or None if no reload was needed.

        Raises:
            ValueError: If the store has no remote backend; nothing is bound.
        """
        previous = self._session

        if session is None:
            self._store.bind_session(None)
            self._session = None
            if previous is not None:
                logger.info("Signed out, clearing word list")
                self._store.discard()
            return None

        # bind_session raises when the store has no remote backend
        self._store.bind_session(session)
        self._session = session

        if previous is not None and previous.user_id == session.user_id:
            return None

        logger.info(f"Session bound for user {session.user_id}, reloading words")
        self._store.discard()
        return self._store.load_in_background()

    def set_demo_mode(self, is_demo: bool) -> None:
        """Toggle demo mode; only affects the next recognition/enrichment call."""
        self._demo_mode = bool(is_demo)
        self._persist()

    def set_api_key(self, key: str) -> None:
        self._api_key = key.strip()
        self._persist()

    def effective_api_key(self) -> str | None:
        """Per-call key for the AI adapters: none in demo mode, else the saved key."""
        if self._demo_mode or not self._api_key:
            return None
        return self._api_key

    def _persist(self) -> None:
        self._settings.save(
            {
                SETTING_API_KEY: self._api_key,
                SETTING_DEMO_MODE: self._demo_mode,
            }
        )
