"""Word list store: the single owner of the in-memory word list.

Every mutation goes through WordListStore, which writes to the backend that
matches the bound session (local when there is none, remote otherwise) and
mirrors the result into memory.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace

from snapcards.constants.statuses import DEFAULT_STATUS, VALID_STATUSES
from snapcards.errors import RemoteStoreError
from snapcards.export import status_counts
from snapcards.models import WordCard, generate_local_id, now_ms
from snapcards.session import Session
from snapcards.storage.backends import LocalWordBackend, MemoryWordBackend, RemoteWordBackend
from snapcards.storage.status import RemoteStatusPusher, StatusPusher

logger = logging.getLogger(__name__)


class WordListStore:
    """Reconciling container for the current user's word list.

    Args:
        remote: Remote backend used while a session is bound.
        local: Backend persisting the list while no session is bound.
        status_pusher: Remote write used by update_status; defaults to
            pushing through `remote`.
        executor: Runs background reloads and status pushes. Defaults to a
            single worker thread, so background jobs run one at a time.
    """

    def __init__(
        self,
        remote: RemoteWordBackend | None = None,
        local: LocalWordBackend | None = None,
        status_pusher: StatusPusher | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._remote = remote
        self._local = local or MemoryWordBackend()
        if status_pusher is None and remote is not None:
            status_pusher = RemoteStatusPusher(remote)
        self._status_pusher = status_pusher
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="snapcards-sync"
        )
        self._lock = threading.RLock()
        self._session: Session | None = None
        self._words: list[WordCard] = self._local.load()
        self._pending_loads = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def words(self) -> list[WordCard]:
        """Snapshot of the list, newest first."""
        with self._lock:
            return list(self._words)

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def loading(self) -> bool:
        """True while any reload is queued or running."""
        with self._lock:
            return self._pending_loads > 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._words)

    def get(self, card_id: str) -> WordCard | None:
        with self._lock:
            return next((w for w in self._words if w.id == card_id), None)

    def find_by_word(self, word: str) -> WordCard | None:
        """Case-insensitive lookup by headword."""
        with self._lock:
            return self._find_word(word)

    def status_counts(self) -> dict[str, int]:
        return status_counts(self.words)

    # ------------------------------------------------------------------
    # Session binding (driven by ModeController)
    # ------------------------------------------------------------------

    def bind_session(self, session: Session | None) -> None:
        """Point subsequent operations at `session` without touching the list."""
        if session is not None and self._remote is None:
            raise ValueError("Cannot bind a session: no remote backend configured")
        self._session = session

    def discard(self) -> None:
        """Drop the in-memory list and the local saved copy."""
        with self._lock:
            self._words = []
            self._local.save([])

    def load_in_background(self) -> Future:
        """Schedule load() on the executor; `loading` is set immediately."""
        self._track_load(1)
        return self._executor.submit(self._queued_load)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace the list with the remote rows for the bound session.

        No-op without a session (the local list is already resident). A fetch
        failure is logged and leaves the list unchanged. Rows fetched for a
        user who is no longer bound (sign-out or user switch mid-fetch) are
        dropped; a re-bind of the same user keeps them.
        """
        session = self._session
        if session is None:
            return

        self._track_load(1)
        try:
            cards = self._remote.fetch_all()
        except RemoteStoreError as e:
            logger.error(f"Fetch words error: {e}")
            return
        finally:
            self._track_load(-1)

        with self._lock:
            # Same user with a refreshed token still owns these rows
            if self._session is None or self._session.user_id != session.user_id:
                logger.info("Session changed during load, dropping fetched words")
                return
            self._words = cards
        logger.info(f"Loaded {len(cards)} words for user {session.user_id}")

    def add(self, card: WordCard) -> WordCard | None:
        """Add a card unless its word is already present (case-insensitive).

        Returns:
            The stored card, or None for a duplicate.

        Raises:
            RemoteStoreError: Remote insert failed; the list is unchanged.
        """
        with self._lock:
            if self._find_word(card.word) is not None:
                logger.debug(f"Skipping duplicate word {card.word!r}")
                return None
            session = self._session

            if session is None:
                card_id = card.id
                if not card_id or any(w.id == card_id for w in self._words):
                    card_id = generate_local_id()
                stored = replace(
                    card,
                    id=card_id,
                    date_added=card.date_added or now_ms(),
                    status=DEFAULT_STATUS,
                )
                self._words.insert(0, stored)
                self._save_local()
                return stored

        stored = self._remote.insert(session.user_id, card)
        with self._lock:
            self._words.insert(0, stored)
        return stored

    def remove(self, card_id: str) -> None:
        """Remove a card by id. Unknown ids are a no-op.

        With a session, the remote row is deleted first and memory is only
        updated on success.

        Raises:
            RemoteStoreError: Remote delete failed; the list is unchanged.
        """
        if self.get(card_id) is None:
            logger.debug(f"Remove: no word with id {card_id!r}")
            return

        session = self._session
        if session is not None:
            self._remote.delete(card_id)

        with self._lock:
            self._words = [w for w in self._words if w.id != card_id]
            if session is None:
                self._save_local()

    def update_status(self, card_id: str, status: str) -> Future | None:
        """Set a card's status in memory now; push to the remote store in the background.

        A failed push is logged and the local value is kept (no rollback).

        Returns:
            Future of the remote push, or None when there is nothing to push.

        Raises:
            ValueError: If `status` is not a valid status.
        """
        if status not in VALID_STATUSES:
            raise ValueError(f"Invalid status {status!r}. Valid: {list(VALID_STATUSES)}")

        with self._lock:
            index = next((i for i, w in enumerate(self._words) if w.id == card_id), None)
            if index is None:
                logger.debug(f"Update status: no word with id {card_id!r}")
                return None
            self._words[index] = self._words[index].with_status(status)
            session = self._session
            if session is None:
                self._save_local()
                return None

        return self._executor.submit(self._push_status, card_id, status)

    def clear_all(self) -> None:
        """Delete every word. With a session, memory is emptied only after the remote delete.

        Raises:
            RemoteStoreError: Remote delete failed; the list is unchanged.
        """
        session = self._session
        if session is not None:
            self._remote.delete_all(session.user_id)

        with self._lock:
            self._words = []
            if session is None:
                self._save_local()

    def close(self) -> None:
        """Wait for background jobs and release the executor if this store created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "WordListStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_word(self, word: str) -> WordCard | None:
        return next((w for w in self._words if w.same_word(word)), None)

    def _track_load(self, delta: int) -> None:
        with self._lock:
            self._pending_loads += delta

    def _queued_load(self) -> None:
        try:
            self.load()
        finally:
            self._track_load(-1)

    def _save_local(self) -> None:
        self._local.save(self._words)

    def _push_status(self, card_id: str, status: str) -> None:
        if self._status_pusher is None:
            return
        try:
            self._status_pusher.push(card_id, status)
        except RemoteStoreError as e:
            logger.error(f"Update status error for {card_id}: {e}")
