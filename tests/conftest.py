"""Shared fixtures: in-process fakes for the remote store, executor and LLM."""

from concurrent.futures import Executor, Future

import pytest

from snapcards.errors import RemoteStoreError
from snapcards.llm.base import LLMProvider, LLMResponse
from snapcards.models import WordCard
from snapcards.storage.backends import MemoryWordBackend, RemoteWordBackend
from snapcards.store import WordListStore


class ImmediateExecutor(Executor):
    """Runs submitted work synchronously; futures are already done on return."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, /, *args, **kwargs):
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class QueuedExecutor(Executor):
    """Holds submitted work until the test runs it with run_next()."""

    def __init__(self):
        self.queue: list[tuple] = []

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        self.queue.append((future, fn, args, kwargs))
        return future

    def run_next(self):
        future, fn, args, kwargs = self.queue.pop(0)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)


class FakeRemote(RemoteWordBackend):
    """In-memory stand-in for the Supabase `user_words` table."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self._next_id = 1

    def _check(self, op):
        self.calls.append((op,))
        if op in self.fail_on:
            raise RemoteStoreError(f"{op} failed")

    def fetch_all(self):
        self._check("fetch_all")
        rows = sorted(self.rows, key=lambda r: r["created_at"], reverse=True)
        return [WordCard.from_row(r) for r in rows]

    def insert(self, user_id, card):
        self._check("insert")
        row = {
            "id": f"row-{self._next_id}",
            "userid": user_id,
            "content": card.content(),
            "status": "new",
            "created_at": f"2026-01-01T00:00:{self._next_id:02d}+00:00",
        }
        self._next_id += 1
        self.rows.append(row)
        return WordCard.from_row(row)

    def delete(self, card_id):
        self._check("delete")
        self.rows = [r for r in self.rows if r["id"] != card_id]

    def update_status(self, card_id, status):
        self._check("update_status")
        for row in self.rows:
            if row["id"] == card_id:
                row["status"] = status

    def delete_all(self, user_id):
        self._check("delete_all")
        self.rows = [r for r in self.rows if r["userid"] != user_id]

    def ops(self):
        return [c[0] for c in self.calls]


class ScriptedProvider(LLMProvider):
    """LLM provider that replays canned replies (or raises canned errors)."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts: list[dict] = []
        self.model = "scripted"
        self.temperature = 0.0

    def complete(self, prompt, system=None, image_base64=None, **kwargs):
        self.prompts.append({"prompt": prompt, "system": system, "image_base64": image_base64})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model=self.model)


def make_card(word, **kwargs) -> WordCard:
    kwargs.setdefault("meaning", f"{word} meaning")
    return WordCard(word=word, **kwargs)


def make_row(row_id, word, created_at, status="new", userid="user-1"):
    return {
        "id": row_id,
        "userid": userid,
        "content": {
            "word": word,
            "meaning": f"{word} meaning",
            "pronunciation": "/x/",
            "sentences": [],
        },
        "status": status,
        "created_at": created_at,
    }


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def local_store(executor):
    """Store with no remote backend (local/demo list)."""
    return WordListStore(local=MemoryWordBackend(), executor=executor)


@pytest.fixture
def remote_store(remote, executor):
    """Store with a fake remote backend; no session bound yet."""
    return WordListStore(remote=remote, local=MemoryWordBackend(), executor=executor)
