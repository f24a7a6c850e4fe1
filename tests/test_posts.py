"""Tests for posts, comments, likes and their notifications."""
from __future__ import annotations

import pytest

from feedstore.constants import COMMENTS, LIKES, NOTIFICATIONS
from feedstore.services import (
    add_comment,
    create_post,
    delete_comment,
    delete_post,
    get_post,
    get_post_comments,
    get_post_engagement,
    get_post_likes,
    is_post_liked,
    list_feed,
    list_notifications,
    list_user_posts,
    toggle_like,
)


def test_create_post_requires_image_or_caption(store):
    with pytest.raises(ValueError):
        create_post(store, username="alice", caption="   ")


def test_feed_is_newest_first(store):
    first = create_post(store, username="alice", caption="one")
    second = create_post(store, username="bob", images=["file:///two.jpg"])
    third = create_post(store, username="alice", caption="three")

    assert [post.id for post in list_feed(store)] == [third.id, second.id, first.id]
    assert [post.id for post in list_user_posts(store, "alice")] == [third.id, first.id]


def test_like_and_comment_notify_post_owner(store, register):
    register(store, "alice")
    register(store, "bob")
    post = create_post(store, username="alice", images=["file:///cat.jpg"], caption="cat")

    assert toggle_like(store, post_id=post.id, username="bob") is True
    add_comment(store, post_id=post.id, username="bob", text="nice!")

    assert len(get_post_likes(store, post.id)) == 1
    assert len(get_post_comments(store, post.id)) == 1
    notifications = list_notifications(store, "alice")
    assert {item.type for item in notifications} == {"like", "comment"}
    assert all(item.sender == "bob" and item.post_id == post.id for item in notifications)
    assert notifications[0].type == "comment"
    assert notifications[0].post_data.caption == "cat"


def test_toggle_like_twice_restores_count(store):
    post = create_post(store, username="alice", caption="hello")
    before = len(get_post_likes(store, post.id))

    assert toggle_like(store, post_id=post.id, username="bob") is True
    assert is_post_liked(store, post_id=post.id, username="bob")
    assert toggle_like(store, post_id=post.id, username="bob") is False

    assert len(get_post_likes(store, post.id)) == before
    assert not is_post_liked(store, post_id=post.id, username="bob")
    assert len(list_notifications(store, "alice")) == 1


def test_liking_or_commenting_own_post_does_not_notify(store):
    post = create_post(store, username="alice", caption="me")
    toggle_like(store, post_id=post.id, username="alice")
    add_comment(store, post_id=post.id, username="alice", text="first")

    assert store.get_collection(NOTIFICATIONS) == []


def test_comments_are_newest_first(store):
    post = create_post(store, username="alice", caption="thread")
    older = add_comment(store, post_id=post.id, username="bob", text="first")
    newer = add_comment(store, post_id=post.id, username="carol", text="second")
    add_comment(store, post_id="other", username="bob", text="elsewhere")

    comments = get_post_comments(store, post.id)

    assert [comment.id for comment in comments] == [newer.id, older.id]
    assert all(a.timestamp >= b.timestamp for a, b in zip(comments, comments[1:]))


def test_blank_comment_is_rejected(store):
    with pytest.raises(ValueError):
        add_comment(store, post_id="p", username="bob", text="  ")


def test_only_author_deletes_comment(store):
    post = create_post(store, username="alice", caption="thread")
    comment = add_comment(store, post_id=post.id, username="bob", text="mine")

    assert delete_comment(store, comment.id, actor="alice") is False
    assert delete_comment(store, comment.id, actor="bob") is True
    assert get_post_comments(store, post.id) == []
    assert delete_comment(store, comment.id) is False


def test_only_owner_deletes_post_and_dependents_survive_by_default(store):
    post = create_post(store, username="alice", caption="bye")
    toggle_like(store, post_id=post.id, username="bob")
    add_comment(store, post_id=post.id, username="bob", text="wait")

    assert delete_post(store, post_id=post.id, actor="bob") is False
    assert delete_post(store, post_id=post.id, actor="alice") is True
    assert get_post(store, post.id) is None
    assert delete_post(store, post_id=post.id, actor="alice") is False

    assert len(store.get_collection(COMMENTS)) == 1
    assert len(store.get_collection(LIKES)) == 1
    snapshots = [item.post_data.caption for item in list_notifications(store, "alice")]
    assert snapshots == ["bye", "bye"]


def test_dependents_cascade_removes_comments_and_likes(make_store):
    store = make_store(POST_DELETE_CASCADE="dependents")
    post = create_post(store, username="alice", caption="bye")
    keep = create_post(store, username="alice", caption="stay")
    toggle_like(store, post_id=post.id, username="bob")
    toggle_like(store, post_id=keep.id, username="bob")
    add_comment(store, post_id=post.id, username="bob", text="wait")

    delete_post(store, post_id=post.id, actor="alice")

    assert store.get_collection(COMMENTS) == []
    assert [like["postId"] for like in store.get_collection(LIKES)] == [keep.id]
    assert len(list_notifications(store, "alice")) == 3


def test_full_cascade_also_removes_notifications(make_store):
    store = make_store(POST_DELETE_CASCADE="all")
    post = create_post(store, username="alice", caption="bye")
    keep = create_post(store, username="alice", caption="stay")
    toggle_like(store, post_id=post.id, username="bob")
    toggle_like(store, post_id=keep.id, username="bob")

    delete_post(store, post_id=post.id, actor="alice")

    assert [item.post_id for item in list_notifications(store, "alice")] == [keep.id]


def test_post_engagement_counts(store):
    post = create_post(store, username="alice", caption="stats")
    toggle_like(store, post_id=post.id, username="bob")
    toggle_like(store, post_id=post.id, username="carol")
    add_comment(store, post_id=post.id, username="bob", text="hi")

    engagement = get_post_engagement(store, post.id, viewer="carol")

    assert (engagement.likes, engagement.comments, engagement.liked_by_viewer) == (2, 1, True)
    assert get_post_engagement(store, post.id).liked_by_viewer is False
