"""Remote status push used by optimistic status updates.

WordListStore applies a status change locally first and hands the remote
write to a StatusPusher. Swapping the pusher changes the remote-write policy
without touching the store's callers.
"""

from abc import ABC, abstractmethod

from snapcards.storage.backends import RemoteWordBackend


class StatusPusher(ABC):
    @abstractmethod
    def push(self, card_id: str, status: str) -> None:
        """Write `status` for `card_id` to the remote store.

        Raises:
            RemoteStoreError: If the remote write fails.
        """
        pass


class RemoteStatusPusher(StatusPusher):
    """Pushes straight to a RemoteWordBackend."""

    def __init__(self, remote: RemoteWordBackend) -> None:
        self.remote = remote

    def push(self, card_id: str, status: str) -> None:
        self.remote.update_status(card_id, status)
