"""Tests for friend requests and the symmetric friends lists."""
from __future__ import annotations

from feedstore.constants import FRIEND_REQUESTS
from feedstore.services import (
    accept_friend_request,
    are_friends,
    get_current_user,
    get_friend_requests,
    get_user_by_username,
    list_friend_requests,
    list_friends,
    list_notifications,
    reject_friend_request,
    send_friend_request,
)


def test_accepting_a_request_befriends_both_users(store, register):
    register(store, "alice")
    register(store, "bob")

    request = send_friend_request(store, sender="alice", recipient="bob")
    accepted = accept_friend_request(store, request.id)

    assert accepted.status == "accepted"
    assert get_user_by_username(store, "alice").friends == ["bob"]
    assert get_user_by_username(store, "bob").friends == ["alice"]
    assert [item.status for item in get_friend_requests(store)] == ["accepted"]


def test_sending_twice_keeps_one_pending_request(store, register):
    register(store, "alice")
    register(store, "bob")

    first = send_friend_request(store, sender="alice", recipient="bob")
    second = send_friend_request(store, sender="alice", recipient="bob")

    assert first.id == second.id
    assert len(store.get_collection(FRIEND_REQUESTS)) == 1
    assert [item.type for item in list_notifications(store, "bob")] == ["friend_request"]


def test_reverse_direction_is_a_separate_request(store):
    send_friend_request(store, sender="alice", recipient="bob")
    send_friend_request(store, sender="bob", recipient="alice")

    assert len(get_friend_requests(store)) == 2


def test_friend_request_notification_points_at_request(store):
    request = send_friend_request(store, sender="alice", recipient="bob")
    (notification,) = list_notifications(store, "bob")

    assert notification.sender == "alice"
    assert notification.request_id == request.id
    assert notification.message == "sent you a friend request"


def test_accept_refreshes_session_user(store, register):
    register(store, "alice")
    register(store, "bob")  # bob is now the session user

    request = send_friend_request(store, sender="alice", recipient="bob")
    accept_friend_request(store, request.id)

    assert get_current_user(store).friends == ["alice"]


def test_accept_twice_does_not_duplicate_friends(store, register):
    register(store, "alice")
    register(store, "bob")
    request = send_friend_request(store, sender="alice", recipient="bob")

    accept_friend_request(store, request.id)
    accept_friend_request(store, request.id)

    assert get_user_by_username(store, "alice").friends == ["bob"]
    assert get_user_by_username(store, "bob").friends == ["alice"]


def test_accept_unknown_request_is_a_no_op(store, register, monkeypatch):
    register(store, "alice")
    writes = []
    monkeypatch.setattr(store.backend, "set_items", lambda items: writes.append(items))

    assert accept_friend_request(store, "missing") is None
    assert writes == []


def test_accept_with_missing_user_still_marks_accepted(store, register):
    register(store, "alice")
    request = send_friend_request(store, sender="alice", recipient="ghost")

    accepted = accept_friend_request(store, request.id)

    assert accepted.status == "accepted"
    assert get_user_by_username(store, "alice").friends == []


def test_reject_deletes_request(store):
    request = send_friend_request(store, sender="alice", recipient="bob")

    assert reject_friend_request(store, request.id) is True
    assert get_friend_requests(store) == []
    assert reject_friend_request(store, request.id) is False


def test_list_friend_requests_splits_incoming_and_outgoing(store):
    send_friend_request(store, sender="alice", recipient="bob")
    send_friend_request(store, sender="carol", recipient="bob")
    accepted = send_friend_request(store, sender="bob", recipient="dave")
    send_friend_request(store, sender="bob", recipient="erin")
    accept_friend_request(store, accepted.id)

    incoming, outgoing = list_friend_requests(store, "bob")

    assert [item.sender for item in incoming] == ["alice", "carol"]
    assert [item.recipient for item in outgoing] == ["erin"]


def test_list_friends_resolves_user_records(store, register):
    for name in ("alice", "bob", "carol"):
        register(store, name)
    accept_friend_request(store, send_friend_request(store, sender="alice", recipient="bob").id)
    accept_friend_request(store, send_friend_request(store, sender="carol", recipient="alice").id)

    assert [user.username for user in list_friends(store, "alice")] == ["bob", "carol"]
    assert are_friends(store, "bob", "alice")
    assert not are_friends(store, "bob", "carol")
    assert list_friends(store, "nobody") == []
