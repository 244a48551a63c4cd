"""Supabase-backed remote word store and sign-in helper."""

from __future__ import annotations

import logging

import httpx
from supabase import AuthError, Client, PostgrestAPIError, create_client

from snapcards.constants.statuses import DEFAULT_STATUS
from snapcards.errors import RemoteStoreError
from snapcards.models import WordCard
from snapcards.session import Session
from snapcards.storage.backends import RemoteWordBackend

logger = logging.getLogger(__name__)

USER_WORDS_TABLE = "user_words"

_REMOTE_ERRORS = (PostgrestAPIError, httpx.HTTPError)


def create_supabase_client(url: str | None, key: str | None) -> Client:
    """Create a Supabase client.

    Raises:
        ValueError: If url or key is missing.
    """
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")
    return create_client(url, key)


def sign_in(client: Client, email: str, password: str) -> Session:
    """Sign in with email/password and return the bound session.

    Raises:
        RemoteStoreError: If authentication fails.
    """
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except (AuthError, httpx.HTTPError) as e:
        raise RemoteStoreError(f"Sign-in failed: {e}") from e
    if response.user is None or response.session is None:
        raise RemoteStoreError("Sign-in returned no session")
    return Session(user_id=response.user.id, access_token=response.session.access_token)


class SupabaseWordBackend(RemoteWordBackend):
    """`user_words` table accessed through the Supabase client."""

    def __init__(self, client: Client, table: str = USER_WORDS_TABLE) -> None:
        self.client = client
        self.table = table

    def fetch_all(self) -> list[WordCard]:
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except _REMOTE_ERRORS as e:
            raise RemoteStoreError(f"Fetch words failed: {e}") from e
        logger.debug(f"Fetched {len(result.data or [])} rows from {self.table}")
        return [WordCard.from_row(row) for row in result.data or []]

    def insert(self, user_id: str, card: WordCard) -> WordCard:
        payload = {
            "userid": user_id,
            "content": card.content(),
            "status": DEFAULT_STATUS,
        }
        try:
            result = self.client.table(self.table).insert(payload).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteStoreError(f"Add word failed: {e}") from e
        if not result.data:
            raise RemoteStoreError(f"Add word returned no row for {card.word!r}")
        return WordCard.from_row(result.data[0])

    def delete(self, card_id: str) -> None:
        try:
            self.client.table(self.table).delete().eq("id", card_id).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteStoreError(f"Delete word failed: {e}") from e

    def update_status(self, card_id: str, status: str) -> None:
        try:
            self.client.table(self.table).update({"status": status}).eq("id", card_id).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteStoreError(f"Update status failed: {e}") from e

    def delete_all(self, user_id: str) -> None:
        # Scoped to the owner's rows
        try:
            self.client.table(self.table).delete().eq("userid", user_id).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteStoreError(f"Clear words failed: {e}") from e
