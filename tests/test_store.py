"""Tests for WordListStore (local and remote-backed)."""

import pytest

from conftest import FakeRemote, ImmediateExecutor, make_card, make_row
from snapcards.errors import RemoteStoreError
from snapcards.session import Session
from snapcards.storage.backends import MemoryWordBackend
from snapcards.storage.status import StatusPusher
from snapcards.store import WordListStore

SESSION = Session(user_id="user-1", access_token="token")


class TestLocalAdd:
    """add() without a session."""

    def test_add_prepends_with_status_new(self, local_store):
        """New words go to the front of the list with status new."""
        local_store.add(make_card("apple"))
        stored = local_store.add(make_card("book", status="mastered"))

        assert [w.word for w in local_store.words] == ["book", "apple"]
        assert stored.status == "new"
        assert stored.id
        assert stored.date_added > 0

    def test_add_duplicate_is_noop(self, local_store):
        """Adding 'apple' when 'Apple' exists leaves the list unchanged."""
        local_store.add(make_card("Apple"))

        result = local_store.add(make_card("apple", meaning="other"))

        assert result is None
        assert len(local_store) == 1
        assert local_store.words[0].word == "Apple"

    def test_add_duplicate_ignores_surrounding_whitespace(self, local_store):
        """Duplicate check compares trimmed, lower-cased words."""
        local_store.add(make_card("Galaxy"))
        assert local_store.add(make_card(" galaxy ")) is None

    def test_add_generates_unique_ids(self, local_store):
        """Cards added in a tight loop still get distinct ids."""
        for word in ["a", "b", "c", "d", "e"]:
            local_store.add(make_card(word))

        ids = [w.id for w in local_store.words]
        assert len(set(ids)) == 5

    def test_add_replaces_colliding_id(self, local_store):
        """A caller-provided id already in the list is replaced."""
        first = local_store.add(make_card("apple", id="1"))
        second = local_store.add(make_card("book", id="1"))

        assert first.id == "1"
        assert second.id != "1"

    def test_add_persists_to_local_backend(self, executor):
        """Local mutations are written through to the local backend."""
        local = MemoryWordBackend()
        store = WordListStore(local=local, executor=executor)

        store.add(make_card("apple"))

        assert [c.word for c in local.load()] == ["apple"]

    def test_list_loaded_from_local_backend(self, executor):
        """A saved local list is resident as soon as the store is created."""
        local = MemoryWordBackend([make_card("apple", id="1")])
        store = WordListStore(local=local, executor=executor)

        assert [w.word for w in store.words] == ["apple"]


class TestLocalMutations:
    """remove/update_status/clear_all without a session."""

    def test_remove(self, local_store):
        """Removing an id deletes exactly that card."""
        apple = local_store.add(make_card("apple"))
        local_store.add(make_card("book"))

        local_store.remove(apple.id)

        assert [w.word for w in local_store.words] == ["book"]

    def test_remove_twice_is_safe(self, local_store):
        """Second remove of the same id is a no-op."""
        apple = local_store.add(make_card("apple"))

        local_store.remove(apple.id)
        local_store.remove(apple.id)

        assert len(local_store) == 0

    def test_update_status_is_immediate_and_local(self, local_store, executor):
        """Status shows up right away and nothing is pushed remotely."""
        apple = local_store.add(make_card("apple"))

        future = local_store.update_status(apple.id, "mastered")

        assert future is None
        assert executor.submitted == 0
        assert local_store.get(apple.id).status == "mastered"

    def test_update_status_only_changes_status(self, local_store):
        """Other fields of the card stay as they were."""
        apple = local_store.add(make_card("apple", pronunciation="/ˈæp.l/"))

        local_store.update_status(apple.id, "review")

        updated = local_store.get(apple.id)
        assert updated.pronunciation == "/ˈæp.l/"
        assert updated.date_added == apple.date_added

    def test_update_status_unknown_id(self, local_store):
        """Unknown ids are ignored."""
        assert local_store.update_status("missing", "review") is None

    def test_update_status_rejects_invalid_status(self, local_store):
        """Only new/mastered/review/forgot are accepted."""
        apple = local_store.add(make_card("apple"))
        with pytest.raises(ValueError, match="Invalid status"):
            local_store.update_status(apple.id, "learned")

    @pytest.mark.parametrize("size", [0, 1, 5])
    def test_clear_all_empties(self, local_store, size):
        """clear_all always leaves an empty list."""
        for i in range(size):
            local_store.add(make_card(f"word{i}"))

        local_store.clear_all()

        assert local_store.words == []

    def test_find_by_word_is_case_insensitive(self, local_store):
        """Lookup by headword ignores case."""
        local_store.add(make_card("Apple"))
        assert local_store.find_by_word("APPLE").word == "Apple"
        assert local_store.find_by_word("pear") is None

    def test_status_counts(self, local_store):
        """Counts include every status."""
        apple = local_store.add(make_card("apple"))
        local_store.add(make_card("book"))
        local_store.update_status(apple.id, "mastered")

        counts = local_store.status_counts()

        assert counts == {"new": 1, "review": 0, "forgot": 0, "mastered": 1}


class TestRemoteLoad:
    """load() with a session."""

    def test_load_without_session_is_noop(self, remote_store, remote):
        """No session means no remote call."""
        remote_store.load()
        assert remote.calls == []

    def test_load_replaces_list_newest_first(self, remote, executor):
        """Rows are mapped and ordered by created_at descending."""
        remote.rows = [
            make_row("r1", "apple", "2026-01-01T00:00:00+00:00"),
            make_row("r2", "book", "2026-01-02T00:00:00+00:00", status=None),
        ]
        store = WordListStore(remote=remote, executor=executor)
        store.bind_session(SESSION)

        store.load()

        assert [w.word for w in store.words] == ["book", "apple"]
        assert store.words[0].status == "new"
        assert store.loading is False

    def test_load_failure_keeps_list(self, remote, executor):
        """A failed fetch is logged and the list stays as it was."""
        store = WordListStore(remote=remote, executor=executor)
        store.bind_session(SESSION)
        store.add(make_card("apple"))
        remote.fail_on.add("fetch_all")

        store.load()

        assert [w.word for w in store.words] == ["apple"]
        assert store.loading is False

    def test_load_drops_result_for_replaced_session(self, executor):
        """If the session changes mid-fetch, the fetched rows are discarded."""

        class SwitchingRemote(FakeRemote):
            def fetch_all(inner):
                store.bind_session(Session(user_id="user-2"))
                return super().fetch_all()

        remote = SwitchingRemote([make_row("r1", "apple", "2026-01-01T00:00:00Z")])
        store = WordListStore(remote=remote, executor=executor)
        store.bind_session(SESSION)

        store.load()

        assert store.words == []

    def test_load_keeps_result_for_same_user_rebind(self, executor):
        """A refreshed session object for the same user keeps the fetched rows."""

        class RefreshingRemote(FakeRemote):
            def fetch_all(inner):
                store.bind_session(Session(user_id="user-1", access_token="refreshed"))
                return super().fetch_all()

        remote = RefreshingRemote([make_row("r1", "apple", "2026-01-01T00:00:00Z")])
        store = WordListStore(remote=remote, executor=executor)
        store.bind_session(SESSION)

        store.load()

        assert [w.word for w in store.words] == ["apple"]

    def test_bind_session_requires_remote(self, local_store):
        """A session cannot be bound without a remote backend."""
        with pytest.raises(ValueError, match="no remote backend"):
            local_store.bind_session(SESSION)


class TestRemoteMutations:
    """add/remove/update_status/clear_all with a session."""

    @pytest.fixture
    def store(self, remote_store):
        remote_store.bind_session(SESSION)
        return remote_store

    def test_add_uses_remote_row(self, store, remote):
        """The stored card carries the remote id and timestamp."""
        stored = store.add(make_card("apple", id="local-id"))

        assert stored.id == "row-1"
        assert stored.date_added > 0
        assert store.words[0].id == "row-1"
        assert remote.rows[0]["userid"] == "user-1"
        assert remote.rows[0]["content"]["word"] == "apple"

    def test_add_duplicate_skips_remote(self, store, remote):
        """Duplicates never reach the remote store."""
        store.add(make_card("Apple"))
        store.add(make_card("apple"))

        assert remote.ops() == ["insert"]
        assert len(store) == 1

    def test_add_failure_leaves_list_unchanged(self, store, remote):
        """Remote insert failure raises and nothing is inserted locally."""
        store.add(make_card("apple"))
        remote.fail_on.add("insert")

        with pytest.raises(RemoteStoreError):
            store.add(make_card("book"))

        assert len(store) == 1

    def test_remove_deletes_remote_first(self, store, remote):
        """The row is deleted remotely and then from memory."""
        apple = store.add(make_card("apple"))

        store.remove(apple.id)

        assert remote.rows == []
        assert store.words == []

    def test_remove_failure_keeps_card(self, store, remote):
        """Memory and remote never diverge on a failed delete."""
        apple = store.add(make_card("apple"))
        remote.fail_on.add("delete")

        with pytest.raises(RemoteStoreError):
            store.remove(apple.id)

        assert store.get(apple.id) is not None

    def test_remove_unknown_id_makes_no_call(self, store, remote):
        """Removing an id that is not in the list is a no-op."""
        store.remove("missing")
        assert "delete" not in remote.ops()

    def test_update_status_pushes_remote(self, store, remote, executor):
        """Status is applied locally and pushed in the background."""
        apple = store.add(make_card("apple"))

        future = store.update_status(apple.id, "forgot")

        assert future is not None
        future.result()
        assert store.get(apple.id).status == "forgot"
        assert remote.rows[0]["status"] == "forgot"

    def test_update_status_failure_not_rolled_back(self, store, remote):
        """A failed push is swallowed and the optimistic value stays."""
        apple = store.add(make_card("apple"))
        remote.fail_on.add("update_status")

        future = store.update_status(apple.id, "mastered")

        assert future.result() is None
        assert store.get(apple.id).status == "mastered"
        assert remote.rows[0]["status"] == "new"

    def test_update_status_uses_custom_pusher(self, remote, executor):
        """The remote push goes through the injected StatusPusher."""

        class RecordingPusher(StatusPusher):
            def __init__(self):
                self.pushed = []

            def push(self, card_id, status):
                self.pushed.append((card_id, status))

        pusher = RecordingPusher()
        store = WordListStore(remote=remote, status_pusher=pusher, executor=executor)
        store.bind_session(SESSION)
        apple = store.add(make_card("apple"))

        store.update_status(apple.id, "review")

        assert pusher.pushed == [(apple.id, "review")]
        assert "update_status" not in remote.ops()

    def test_clear_all_deletes_user_rows(self, store, remote):
        """Bulk delete is scoped to the session user."""
        store.add(make_card("apple"))
        remote.rows.append(make_row("other", "pear", "2026-01-01T00:00:00Z", userid="user-2"))

        store.clear_all()

        assert store.words == []
        assert [r["id"] for r in remote.rows] == ["other"]

    def test_clear_all_failure_keeps_list(self, store, remote):
        """Memory is only emptied after the remote delete succeeds."""
        store.add(make_card("apple"))
        remote.fail_on.add("delete_all")

        with pytest.raises(RemoteStoreError):
            store.clear_all()

        assert len(store) == 1


class TestExecutorLifecycle:
    def test_close_waits_for_owned_executor(self, remote):
        """A store with its own thread pool drains it on close."""
        with WordListStore(remote=remote) as store:
            store.bind_session(SESSION)
            apple = store.add(make_card("apple"))
            future = store.update_status(apple.id, "review")

        assert future.done()
        assert remote.rows[0]["status"] == "review"

    def test_close_leaves_injected_executor(self):
        """An injected executor is not shut down by the store."""
        executor = ImmediateExecutor()
        store = WordListStore(executor=executor)
        store.close()
        assert executor.submit(lambda: 1).result() == 1
