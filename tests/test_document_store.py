"""Tests for the collection primitives and the transaction wrapper."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

import pytest

from feedstore.constants import LIKES, MESSAGES, POSTS
from feedstore.services import create_post, get_messages, get_post_likes, send_message, toggle_like
from feedstore.storage import DocumentStore, MemoryKeyValueBackend, StoreReadError, StoreWriteError


def test_missing_collection_reads_as_empty(store):
    assert store.get_collection(POSTS) == []


def test_corrupt_json_reads_as_empty(store, caplog):
    store.backend.set_item(POSTS, "[{not json")
    with caplog.at_level(logging.WARNING):
        assert store.get_collection(POSTS) == []
    assert "corrupt" in caplog.text


def test_non_array_payload_reads_as_empty(store):
    store.backend.set_item(POSTS, '{"id": "1"}')
    assert store.get_collection(POSTS) == []


def test_backend_read_error_reads_as_empty(store, monkeypatch):
    def _fail(key):
        raise StoreReadError("disk unplugged")

    monkeypatch.setattr(store.backend, "get_item", _fail)
    assert store.get_collection(POSTS) == []
    assert store.get_record("currentUser") is None


def test_put_collection_replaces_previous_contents(store):
    store.put_collection(LIKES, [{"id": "1"}, {"id": "2"}])
    store.put_collection(LIKES, [{"id": "3"}])
    assert store.get_collection(LIKES) == [{"id": "3"}]


def test_transaction_discards_changes_when_block_raises(store):
    store.put_collection(LIKES, [{"id": "1"}])
    with pytest.raises(RuntimeError):
        with store.transaction(LIKES) as batch:
            batch[LIKES].append({"id": "2"})
            raise RuntimeError("boom")
    assert store.get_collection(LIKES) == [{"id": "1"}]


def test_transaction_skips_write_when_nothing_changed(store, monkeypatch):
    store.put_collection(LIKES, [{"id": "1"}])
    calls = []
    monkeypatch.setattr(store.backend, "set_items", lambda items: calls.append(items))
    with store.transaction(LIKES) as batch:
        assert batch[LIKES] == [{"id": "1"}]
    assert calls == []


def test_transaction_only_exposes_declared_collections(store):
    with pytest.raises(KeyError):
        with store.transaction(LIKES) as batch:
            batch[POSTS]


def test_write_failure_propagates_to_caller(store, monkeypatch):
    def _fail(items):
        raise StoreWriteError("quota exceeded")

    monkeypatch.setattr(store.backend, "set_items", _fail)
    with pytest.raises(StoreWriteError):
        send_message(store, sender="alice", recipient="bob", text="hello")
    monkeypatch.undo()
    assert store.get_collection(MESSAGES) == []


def test_new_id_never_repeats_for_the_same_instant():
    fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store = DocumentStore(MemoryKeyValueBackend(), clock=lambda: fixed)
    ids = [store.new_id() for _ in range(50)]
    assert len(set(ids)) == 50
    assert ids[0] == str(int(fixed.timestamp() * 1000))


def test_concurrent_sends_do_not_lose_messages(store):
    threads = [
        threading.Thread(target=send_message, args=(store,), kwargs={"sender": f"user{i}", "recipient": "hub", "text": "ping"})
        for i in range(12)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(get_messages(store)) == 12


def test_concurrent_likes_do_not_lose_updates(store):
    post = create_post(store, username="owner", caption="hello")
    threads = [
        threading.Thread(target=toggle_like, args=(store,), kwargs={"post_id": post.id, "username": f"fan{i}"})
        for i in range(12)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(get_post_likes(store, post.id)) == 12


def test_transaction_aborts_when_backend_read_fails(store, monkeypatch):
    create_post(store, username="alice", caption="one")
    create_post(store, username="alice", caption="two")
    original = store.backend.get_item
    failures = iter([True])

    def _flaky(key):
        if key == POSTS and next(failures, False):
            raise StoreReadError("disk unplugged")
        return original(key)

    monkeypatch.setattr(store.backend, "get_item", _flaky)
    with pytest.raises(StoreReadError):
        create_post(store, username="alice", caption="three")

    assert [post["caption"] for post in store.get_collection(POSTS)] == ["one", "two"]


def test_nested_transaction_on_held_collection_raises(store):
    post = create_post(store, username="alice", caption="hello")
    with store.transaction(LIKES) as batch:
        with pytest.raises(RuntimeError, match="likes"):
            toggle_like(store, post_id=post.id, username="bob")
        batch[LIKES].append({"id": "1", "postId": post.id, "username": "carol"})

    assert [like.username for like in get_post_likes(store, post.id)] == ["carol"]


def test_nested_transaction_on_other_collections_is_allowed(store):
    with store.transaction(LIKES) as batch:
        send_message(store, sender="alice", recipient="bob", text="hi")
        batch[LIKES].append({"id": "1", "postId": "p", "username": "carol"})

    assert len(get_messages(store)) == 1
    assert len(store.get_collection(LIKES)) == 1
