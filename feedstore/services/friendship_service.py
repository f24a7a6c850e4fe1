"""Business logic for friend requests and friendships."""
from __future__ import annotations

import logging
from typing import Any

from ..constants import CURRENT_USER, FRIEND_REQUESTS, NOTIFICATIONS, USERS
from ..schemas import FriendRequest, User, parse_records
from ..storage import DocumentStore
from .notification_service import NotificationType, build_notification
from .user_service import get_user_by_username, get_users

logger = logging.getLogger(__name__)


def _find_user(users: list[dict[str, Any]], username: Any) -> dict[str, Any] | None:
    for document in users:
        if document.get("username") == username:
            return document
    return None


def _add_friend(document: dict[str, Any], friend: str) -> None:
    friends = document.get("friends")
    if not isinstance(friends, list):
        friends = []
        document["friends"] = friends
    if friend not in friends:
        friends.append(friend)


def get_friend_requests(store: DocumentStore) -> list[FriendRequest]:
    return parse_records(FriendRequest, store.get_collection(FRIEND_REQUESTS))


def send_friend_request(store: DocumentStore, *, sender: str, recipient: str) -> FriendRequest:
    """Create a pending request, or return the one already pending for this pair.

    Only the ``sender -> recipient`` direction is checked; a request in the
    opposite direction or an existing friendship does not block a new one.
    """

    with store.transaction(FRIEND_REQUESTS, NOTIFICATIONS) as batch:
        requests = batch[FRIEND_REQUESTS]
        for document in requests:
            if (
                document.get("from") == sender
                and document.get("to") == recipient
                and document.get("status") == "pending"
            ):
                logger.debug("Pending request %s already exists", document.get("id"))
                return FriendRequest.model_validate(document)

        timestamp = store.now()
        request = FriendRequest(
            id=store.new_id(timestamp),
            sender=sender,
            recipient=recipient,
            status="pending",
            timestamp=timestamp,
        )
        requests.append(request.to_document())
        if sender != recipient:
            notification = build_notification(
                store,
                type_=NotificationType.FRIEND_REQUEST,
                sender=sender,
                recipient=recipient,
                request_id=request.id,
            )
            batch[NOTIFICATIONS].insert(0, notification.to_document())
    return request


def list_friend_requests(store: DocumentStore, username: str) -> tuple[list[FriendRequest], list[FriendRequest]]:
    """Return ``(incoming, outgoing)`` pending requests for ``username``."""

    pending = [item for item in get_friend_requests(store) if item.status == "pending"]
    incoming = [item for item in pending if item.recipient == username]
    outgoing = [item for item in pending if item.sender == username]
    return incoming, outgoing


def accept_friend_request(store: DocumentStore, request_id: str) -> FriendRequest | None:
    """Accept a request and add both users to each other's friends.

    The request status, both friends lists and, when one of the two users is
    signed in, the session record are written together. Unknown ids are
    ignored and return ``None``.
    """

    with store.transaction(FRIEND_REQUESTS, USERS, records=(CURRENT_USER,)) as batch:
        request = next((doc for doc in batch[FRIEND_REQUESTS] if doc.get("id") == request_id), None)
        if request is None:
            logger.info("Friend request %s not found", request_id)
            return None
        request["status"] = "accepted"

        users = batch[USERS]
        sender = _find_user(users, request.get("from"))
        recipient = _find_user(users, request.get("to"))
        if sender is None or recipient is None:
            logger.warning("Friend request %s references a missing user", request_id)
        else:
            _add_friend(sender, recipient["username"])
            _add_friend(recipient, sender["username"])

            session = batch.record(CURRENT_USER)
            if session is not None:
                if session.get("username") == sender["username"]:
                    batch.set_record(CURRENT_USER, dict(sender))
                elif session.get("username") == recipient["username"]:
                    batch.set_record(CURRENT_USER, dict(recipient))

    return FriendRequest.model_validate(request)


def reject_friend_request(store: DocumentStore, request_id: str) -> bool:
    """Delete the request outright; returns whether anything was removed."""

    with store.transaction(FRIEND_REQUESTS) as batch:
        before = len(batch[FRIEND_REQUESTS])
        batch[FRIEND_REQUESTS] = [doc for doc in batch[FRIEND_REQUESTS] if doc.get("id") != request_id]
        removed = len(batch[FRIEND_REQUESTS]) != before
    if not removed:
        logger.info("Friend request %s not found", request_id)
    return removed


def list_friends(store: DocumentStore, username: str) -> list[User]:
    """Resolve ``username``'s friends list, skipping names with no account."""

    user = get_user_by_username(store, username)
    if user is None:
        return []
    by_name = {item.username: item for item in get_users(store)}
    return [by_name[name] for name in user.friends if name in by_name]


def are_friends(store: DocumentStore, first: str, second: str) -> bool:
    user = get_user_by_username(store, first)
    return user is not None and second in user.friends


__all__ = [
    "accept_friend_request",
    "are_friends",
    "get_friend_requests",
    "list_friend_requests",
    "list_friends",
    "reject_friend_request",
    "send_friend_request",
]
